"""
Shared pytest fixtures for hop tests.

Every test gets its own config directory and bookmark file under tmp_path,
so nothing touches ~/.config/hop or ~/.hop_bookmarks.txt.
"""

import logging
from pathlib import Path

import pytest

from hop.api import Hopper
from hop.config import HopConfig


class FakeClock:
    """Settable clock for deterministic access timestamps."""

    def __init__(self, now: float = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point hop's config dir at tmp_path and clear hop environment overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("HOP_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("HOP_BOOKMARK_FILE", raising=False)
    monkeypatch.delenv("HOP_LOCK", raising=False)
    monkeypatch.delenv("HOP_VERBOSE", raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def restore_hop_logger():
    """Drop ops-log handlers and level changes made by the CLI during a test."""
    hop_logger = logging.getLogger("hop")
    handlers = list(hop_logger.handlers)
    level = hop_logger.level
    yield
    for handler in list(hop_logger.handlers):
        if handler not in handlers:
            hop_logger.removeHandler(handler)
            handler.close()
    hop_logger.setLevel(level)


@pytest.fixture
def bookmark_file(tmp_path) -> Path:
    """Path for a bookmark file that doesn't exist yet."""
    return tmp_path / "bookmarks.txt"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config(isolated_env) -> HopConfig:
    return HopConfig(path=isolated_env)


@pytest.fixture
def hopper(bookmark_file, config, clock) -> Hopper:
    """Hopper on an empty bookmark file with a fake clock."""
    return Hopper(bookmark_file, config=config, clock=clock)


@pytest.fixture
def dirs(tmp_path) -> dict[str, Path]:
    """A few real directories to bookmark."""
    made = {}
    for name in ("x", "alpha", "beta", "gamma"):
        d = tmp_path / "dirs" / name
        d.mkdir(parents=True)
        made[name] = d
    return made
