"""DocStoreConfig: project-local config for a documentation content store.

Default layout (all relative to the project root):

    docstore.toml                    # project config
    .docstore/
        atom-docs-data.json          # the single durable slot: {"pages": [...], "categories": [...]}

docstore.toml example:

    [docstore]
    name = "my-docs"
    # data_file = ".docstore/atom-docs-data.json"   # default

    [search]
    title_weight = 0.4
    description_weight = 0.3
    content_weight = 0.2
    tags_weight = 0.1
    threshold = 0.4
    min_match_length = 2

    [export]
    dir = "."

DOCSTORE_DATA_FILE in the environment overrides data_file.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "docstore.toml"
_DEFAULT_DATA_FILE = ".docstore/atom-docs-data.json"
_DATA_FILE_ENV = "DOCSTORE_DATA_FILE"


@dataclass
class SearchConfig:
    title_weight: float = 0.4
    description_weight: float = 0.3
    content_weight: float = 0.2
    tags_weight: float = 0.1
    threshold: float = 0.4          # 0 = exact only, 1 = match anything
    min_match_length: int = 2       # query tokens shorter than this are ignored

    @property
    def weights(self) -> tuple[float, float, float, float]:
        """Weights in field order: title, description, content, tags."""
        return (self.title_weight, self.description_weight, self.content_weight, self.tags_weight)


@dataclass
class ExportConfig:
    dir: str = "."


@dataclass
class DocStoreConfig:
    """Resolved configuration for a docs project."""

    root: Path                      # directory that contains docstore.toml
    name: str = ""
    data_file: Path = field(default_factory=Path)
    search: SearchConfig = field(default_factory=SearchConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    @property
    def export_dir(self) -> Path:
        path = Path(self.export.dir)
        return path if path.is_absolute() else self.root / path

    def ensure_dirs(self) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)


def load_config(root: Path | str | None = None) -> DocStoreConfig:
    """Load docstore.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    ds_section = raw.get("docstore", {})
    srch_section = raw.get("search", {})
    exp_section = raw.get("export", {})

    data_rel = os.environ.get(_DATA_FILE_ENV) or ds_section.get("data_file", _DEFAULT_DATA_FILE)
    data_path = Path(data_rel)
    if not data_path.is_absolute():
        data_path = root_path / data_path

    return DocStoreConfig(
        root=root_path,
        name=ds_section.get("name", root_path.name),
        data_file=data_path,
        search=SearchConfig(
            title_weight=float(srch_section.get("title_weight", 0.4)),
            description_weight=float(srch_section.get("description_weight", 0.3)),
            content_weight=float(srch_section.get("content_weight", 0.2)),
            tags_weight=float(srch_section.get("tags_weight", 0.1)),
            threshold=float(srch_section.get("threshold", 0.4)),
            min_match_length=int(srch_section.get("min_match_length", 2)),
        ),
        export=ExportConfig(
            dir=str(exp_section.get("dir", ".")),
        ),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for docstore.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def init_config(root: Path, name: str | None = None) -> Path:
    """Write a default docstore.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"docstore.toml already exists at {config_path}"
        raise FileExistsError(msg)

    project_name = name or root.name
    content = f"""\
[docstore]
name = "{project_name}"
# data_file = ".docstore/atom-docs-data.json"   # default; or set DOCSTORE_DATA_FILE

# [search]
# title_weight = 0.4
# description_weight = 0.3
# content_weight = 0.2
# tags_weight = 0.1
# threshold = 0.4          # fuzzy tolerance: 0 = exact, 1 = anything
# min_match_length = 2     # ignore shorter query tokens

# [export]
# dir = "."                # where backups are written
"""
    config_path.write_text(content)
    return config_path
