"""Tests for docstore.toml loading."""

import pytest

from docstore.config import init_config, load_config


class TestLoadConfig:
    """Defaults, file values and env override."""

    def test_defaults(self, tmp_path):
        cfg = load_config(tmp_path)
        assert cfg.root == tmp_path
        assert cfg.name == tmp_path.name
        assert cfg.data_file == tmp_path / ".docstore" / "atom-docs-data.json"
        assert cfg.search.weights == (0.4, 0.3, 0.2, 0.1)
        assert cfg.search.min_match_length == 2
        assert cfg.export_dir == tmp_path

    def test_file_values(self, tmp_path):
        (tmp_path / "docstore.toml").write_text(
            '[docstore]\nname = "handbook"\ndata_file = "state.json"\n'
            "[search]\nthreshold = 0.2\ntitle_weight = 0.9\n"
            '[export]\ndir = "backups"\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.name == "handbook"
        assert cfg.data_file == tmp_path / "state.json"
        assert cfg.search.threshold == 0.2
        assert cfg.search.title_weight == 0.9
        assert cfg.export_dir == tmp_path / "backups"

    def test_finds_root_upward(self, tmp_path, monkeypatch):
        (tmp_path / "docstore.toml").write_text('[docstore]\nname = "up"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config().root == tmp_path

    def test_env_override(self, tmp_path, monkeypatch):
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("DOCSTORE_DATA_FILE", str(target))
        assert load_config(tmp_path).data_file == target


class TestInitConfig:
    """Default file creation."""

    def test_creates_loadable_file(self, tmp_path):
        path = init_config(tmp_path, name="docs")
        assert path.exists()
        assert load_config(tmp_path).name == "docs"

    def test_refuses_overwrite(self, tmp_path):
        init_config(tmp_path)
        with pytest.raises(FileExistsError):
            init_config(tmp_path)
