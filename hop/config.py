"""
Configuration management for hop.

The configuration is stored as a TOML file in the config directory.
It says where the bookmark file lives and tunes display and locking.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tomli_w

from .query import DEFAULT_LIMIT
from .types import DEFAULT_CATEGORY, check_field


CONFIG_FILENAME = "hop.toml"
CONFIG_VERSION = 1

DEFAULT_BOOKMARK_FILE = "~/.hop_bookmarks.txt"


def get_config_dir() -> Path:
    """
    Directory holding hop.toml and the hop logs.

    Priority:
    1. HOP_CONFIG_DIR environment variable
    2. $XDG_CONFIG_HOME/hop
    3. ~/.config/hop
    """
    env_dir = os.environ.get("HOP_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "hop"
    return Path.home() / ".config" / "hop"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class HopConfig:
    """Complete hop configuration."""
    path: Path
    version: int = CONFIG_VERSION
    bookmark_file: str = DEFAULT_BOOKMARK_FILE
    lock: bool = False
    default_category: str = DEFAULT_CATEGORY
    limit: int = DEFAULT_LIMIT
    shell: str = ""

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def resolve_bookmark_file(self, override: Optional[Path] = None) -> Path:
        """Bookmark file to use: explicit override, then HOP_BOOKMARK_FILE, then config."""
        if override is not None:
            return Path(override).expanduser()
        env_file = os.environ.get("HOP_BOOKMARK_FILE")
        if env_file:
            return Path(env_file).expanduser()
        return Path(self.bookmark_file).expanduser()

    @property
    def locking(self) -> bool:
        """Whether mutations take the advisory lock (HOP_LOCK=1 forces it on)."""
        return self.lock or _env_flag("HOP_LOCK")


def load_config(config_dir: Path) -> HopConfig:
    """
    Load configuration from a config directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = config_dir / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    version = data.get("hop", {}).get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    store = data.get("store", {})
    display = data.get("display", {})
    shell = data.get("shell", {})

    limit = display.get("limit", DEFAULT_LIMIT)
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValueError(f"Invalid display.limit in {config_path}: {limit!r}")
    default_category = display.get("default_category", DEFAULT_CATEGORY) or DEFAULT_CATEGORY
    check_field("Category", default_category)

    return HopConfig(
        path=config_dir,
        version=version,
        bookmark_file=store.get("file", DEFAULT_BOOKMARK_FILE) or DEFAULT_BOOKMARK_FILE,
        lock=bool(store.get("lock", False)),
        default_category=default_category,
        limit=limit,
        shell=shell.get("command", "") or "",
    )


def save_config(config: HopConfig) -> None:
    """
    Save configuration to the config directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "hop": {
            "version": config.version,
        },
        "store": {
            "file": config.bookmark_file,
            "lock": config.lock,
        },
        "display": {
            "default_category": config.default_category,
            "limit": config.limit,
        },
        "shell": {
            "command": config.shell,
        },
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(config_dir: Optional[Path] = None) -> HopConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    if config_dir is None:
        config_dir = get_config_dir()
    config_path = config_dir / CONFIG_FILENAME

    if config_path.exists():
        return load_config(config_dir)
    else:
        config = HopConfig(path=config_dir)
        save_config(config)
        return config
