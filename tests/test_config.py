"""Tests for hop.toml loading, saving and defaults."""

from pathlib import Path

import pytest

from hop.config import (
    CONFIG_FILENAME,
    DEFAULT_BOOKMARK_FILE,
    HopConfig,
    get_config_dir,
    load_config,
    load_or_create_config,
    save_config,
)
from hop.errors import InvalidArguments


class TestConfigDir:

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOP_CONFIG_DIR", str(tmp_path / "cfg"))
        assert get_config_dir() == tmp_path / "cfg"

    def test_xdg(self, tmp_path, monkeypatch):
        monkeypatch.delenv("HOP_CONFIG_DIR")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "hop"

    def test_home_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("HOP_CONFIG_DIR")
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "hop"


class TestLoadOrCreate:

    def test_creates_defaults(self, isolated_env):
        config = load_or_create_config()
        assert (isolated_env / CONFIG_FILENAME).exists()
        assert config.bookmark_file == DEFAULT_BOOKMARK_FILE
        assert config.lock is False
        assert config.default_category == "general"
        assert config.limit == 10
        assert config.shell == ""

    def test_round_trip(self, tmp_path):
        original = HopConfig(
            path=tmp_path,
            bookmark_file="/data/marks.txt",
            lock=True,
            default_category="misc",
            limit=5,
            shell="/bin/zsh",
        )
        save_config(original)
        loaded = load_or_create_config(tmp_path)
        assert loaded == original

    def test_partial_file_uses_defaults(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('[store]\nlock = true\n')
        config = load_config(tmp_path)
        assert config.lock is True
        assert config.limit == 10
        assert config.bookmark_file == DEFAULT_BOOKMARK_FILE


class TestValidation:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path)

    def test_newer_version(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[hop]\nversion = 99\n")
        with pytest.raises(ValueError, match="newer than supported"):
            load_config(tmp_path)

    @pytest.mark.parametrize("limit", ["0", "-3", '"ten"', "true"])
    def test_bad_limit(self, tmp_path, limit):
        (tmp_path / CONFIG_FILENAME).write_text(f"[display]\nlimit = {limit}\n")
        with pytest.raises(ValueError, match="display.limit"):
            load_config(tmp_path)

    def test_unstorable_default_category(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('[display]\ndefault_category = "a|b"\n')
        with pytest.raises(InvalidArguments):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[store\n")
        with pytest.raises(ValueError):
            load_config(tmp_path)


class TestBookmarkFile:

    def test_tilde_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = HopConfig(path=tmp_path)
        assert config.resolve_bookmark_file() == tmp_path / ".hop_bookmarks.txt"

    def test_env_beats_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOP_BOOKMARK_FILE", str(tmp_path / "env.txt"))
        config = HopConfig(path=tmp_path, bookmark_file=str(tmp_path / "cfg.txt"))
        assert config.resolve_bookmark_file() == tmp_path / "env.txt"

    def test_override_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOP_BOOKMARK_FILE", str(tmp_path / "env.txt"))
        config = HopConfig(path=tmp_path)
        assert config.resolve_bookmark_file(Path("/x/y.txt")) == Path("/x/y.txt")

    @pytest.mark.parametrize("value,expected", [("1", True), ("true", True), ("0", False), ("", False)])
    def test_hop_lock_env(self, tmp_path, monkeypatch, value, expected):
        monkeypatch.setenv("HOP_LOCK", value)
        assert HopConfig(path=tmp_path).locking is expected
