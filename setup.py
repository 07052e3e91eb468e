"""Package metadata for docstore (src layout, console script ``docstore``)."""

from setuptools import find_packages, setup

setup(
    name="docstore",
    version="0.1.0",
    description="Documentation content store: ordered pages and categories in one JSON slot",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.1",
        "numpy>=1.26",
        "rapidfuzz>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "docstore=docstore.cli:cli",
        ],
    },
)
