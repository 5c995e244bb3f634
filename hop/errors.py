"""
Errors for hop, and error logging for the CLI.

Library code raises the HopError subclasses below; the CLI turns them into a
one-line message and exit code 1. Anything else is logged with its full stack
trace while the user sees a clean message.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class HopError(Exception):
    """Base class for expected, user-facing failures."""


class InvalidArguments(HopError, ValueError):
    """Missing or malformed command input."""


class NotFound(HopError, LookupError):
    """No bookmark with the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Bookmark '{name}' not found.")


class NameConflict(HopError):
    """A bookmark with the requested name already exists."""

    def __init__(self, name: str, hint: str = ""):
        self.name = name
        message = f"Bookmark '{name}' already exists."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class PathInvalid(HopError):
    """The path given to add is missing or is not a directory."""


class StaleBookmark(HopError):
    """The bookmarked directory no longer exists."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        super().__init__(
            f"The bookmarked path '{path}' for '{name}' is not a valid directory. "
            f"Please remove or update the bookmark."
        )


class PersistenceFailure(HopError):
    """The bookmark file could not be written; the previous file is intact."""


def _error_log_path() -> Path:
    from .config import get_config_dir
    return get_config_dir() / "hop-errors.log"


def log_exception(
    exc: Exception,
    context: str = "",
    bookmark_file: Optional[Path] = None,
) -> Path:
    """
    Append a crash report to hop-errors.log in the config directory.

    Each entry is a separator, a UTC timestamp with the failing command line,
    the bookmark file in use (when known), and the traceback.

    Args:
        exc: The unexpected exception
        context: The command line that failed, e.g. "hop to proj"
        bookmark_file: Bookmark file the command was working on

    Returns:
        Path to the error log, whether or not the write succeeded
    """
    log_path = _error_log_path()
    lines = [
        "=" * 60,
        f"[{datetime.now(timezone.utc).isoformat()}] {context}".rstrip(),
    ]
    if bookmark_file is not None:
        lines.append(f"bookmarks: {bookmark_file}")
    lines.append("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a", encoding="utf-8", errors="backslashreplace") as f:
            f.write("\n" + "\n".join(lines))
    except OSError:
        pass  # the user still gets the one-line message
    return log_path
