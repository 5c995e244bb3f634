"""
Hop: directory bookmarks for the terminal.

Give a directory a short name, jump back to it later, and see which
bookmarks you use most and most recently.

Quick Start:
    from hop import Hopper

    hp = Hopper()                        # bookmark file from ~/.config/hop/hop.toml
    hp.add("proj", "~/src/project", "work")
    path = hp.navigate("proj").path      # records the access
    hp.frequent(5)

CLI Usage:
    hop add proj ~/src/project -c work
    hop to proj                          # nested shell in the directory
    cd "$(hop to proj -p)"               # or just print the path
    hop list -c work

Bookmark File:
    ~/.hop_bookmarks.txt, one `name|path|category|last_accessed|access_count`
    record per line. Override with HOP_BOOKMARK_FILE or --file.

Environment Variables:
    HOP_BOOKMARK_FILE  - Override the bookmark file location
    HOP_CONFIG_DIR     - Override the config directory (~/.config/hop)
    HOP_LOCK           - Set to 1 to lock the file around every change
    HOP_VERBOSE        - Set to 1 for debug logging to stderr
"""

from .api import Hopper
from .errors import (
    HopError,
    InvalidArguments,
    NameConflict,
    NotFound,
    PathInvalid,
    PersistenceFailure,
    StaleBookmark,
)
from .store import BookmarkStore
from .types import Bookmark, DEFAULT_CATEGORY

__version__ = "0.1.0"
__all__ = [
    "Hopper",
    "Bookmark",
    "BookmarkStore",
    "DEFAULT_CATEGORY",
    "HopError",
    "InvalidArguments",
    "NameConflict",
    "NotFound",
    "PathInvalid",
    "PersistenceFailure",
    "StaleBookmark",
]
