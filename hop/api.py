"""
Core API for directory bookmarks.

Every method is one complete operation: it loads the bookmark file, applies
at most one mutation, and saves before returning. No bookmark state is kept
on the Hopper between calls, so two Hoppers (or two processes) pointing at
the same file always see each other's saved changes.
"""

import logging
import os
import time
from contextlib import contextmanager, nullcontext
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterator, Optional

from .config import HopConfig, load_or_create_config
from .errors import InvalidArguments, NameConflict, PathInvalid, StaleBookmark
from .query import category_is, filter_bookmarks, name_contains, top_by_frequency, top_by_recency
from .store import BookmarkStore, locked
from .types import Bookmark, check_field, check_name

logger = logging.getLogger(__name__)

_CONFLICT_HINT = "Use 'hop remove {name}' or 'hop rename {name} ...'."


def _cwd() -> str:
    try:
        return os.getcwd()
    except FileNotFoundError:
        raise PathInvalid("The current directory no longer exists.") from None


class Hopper:
    """
    Directory bookmarks: add, navigate, rename, remove, and query.

    Errors are raised as HopError subclasses (see hop.errors); a failed
    operation never leaves a partial change on disk.
    """

    def __init__(
        self,
        bookmark_file: Optional[Path] = None,
        config: Optional[HopConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            bookmark_file: Bookmark file to use. Defaults to HOP_BOOKMARK_FILE,
                then the file named in the config.
            config: Loaded configuration. Defaults to the user's hop.toml
                (created if missing).
            clock: Source of the current time for access timestamps.
        """
        self._config = config if config is not None else load_or_create_config()
        self._path = self._config.resolve_bookmark_file(bookmark_file)
        self._clock = clock

    @property
    def config(self) -> HopConfig:
        return self._config

    @property
    def path(self) -> Path:
        """Bookmark file this Hopper reads and writes."""
        return self._path

    # -------------------------------------------------------------------------
    # Store access
    # -------------------------------------------------------------------------

    def load(self) -> BookmarkStore:
        """Fresh snapshot of the bookmark file."""
        return BookmarkStore.load(self._path)

    @contextmanager
    def _mutating(self) -> Iterator[BookmarkStore]:
        """Load, let the caller mutate, then save.

        Nothing is saved if the body raises. With locking enabled the whole
        sequence runs under the advisory lock.
        """
        guard = locked(self._path) if self._config.locking else nullcontext()
        with guard:
            store = self.load()
            yield store
            store.save()

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    def add(
        self,
        name: str,
        path: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Bookmark:
        """
        Bookmark a directory.

        Args:
            name: Bookmark name
            path: Directory to bookmark (default: current directory). `~` is
                expanded and the path resolved to an absolute real path.
            category: Category label (default from config, normally 'general')

        Returns:
            The stored Bookmark

        Raises:
            InvalidArguments: bad name, path or category
            PathInvalid: path is missing or not a directory
            NameConflict: a bookmark with this name exists
        """
        check_name(name)
        category = self._category(category)

        raw = path if path else _cwd()
        target = Path(raw).expanduser()
        if not target.exists():
            raise PathInvalid(f"Path '{raw}' does not exist.")
        if not target.is_dir():
            raise PathInvalid(f"Path '{raw}' is not a directory.")
        abs_path = check_field("Path", str(target.resolve()))

        bookmark = Bookmark(name=name, path=abs_path, category=category)
        with self._mutating() as store:
            if name in store:
                raise NameConflict(name, _CONFLICT_HINT.format(name=name))
            store.put(bookmark)
        logger.info("add %s -> %s [%s]", name, abs_path, category)
        return bookmark

    def set_here(self, name: str, category: Optional[str] = None) -> Bookmark:
        """Bookmark the current directory."""
        return self.add(name, _cwd(), category)

    def navigate(self, name: str) -> Bookmark:
        """
        Resolve a bookmark and record the access.

        The access is recorded as soon as the directory checks out, whatever
        the caller does with the path afterwards.

        Returns:
            The updated Bookmark (count incremented, timestamp set)

        Raises:
            NotFound: no such bookmark
            StaleBookmark: the directory no longer exists (bookmark is kept)
        """
        with self._mutating() as store:
            bookmark = store.get(name)
            if not os.path.isdir(bookmark.path):
                raise StaleBookmark(name, bookmark.path)
            bookmark = bookmark.touched(int(self._clock()))
            store.put(bookmark)
        logger.info("to %s -> %s (count=%d)", name, bookmark.path, bookmark.access_count)
        return bookmark

    def rename(
        self,
        old_name: str,
        new_name: Optional[str] = None,
        new_category: Optional[str] = None,
    ) -> Bookmark:
        """
        Rename a bookmark and/or change its category.

        Path, timestamp and count are kept. Both edits are saved together.

        Raises:
            InvalidArguments: neither new_name nor new_category given, or
                either is not storable
            NotFound: old_name doesn't exist
            NameConflict: new_name is taken by another bookmark
        """
        if not new_name and not new_category:
            raise InvalidArguments(
                "Specify either a new name or a new category using '-c <category>'."
            )
        if new_name:
            check_name(new_name)
        if new_category:
            check_field("Category", new_category)

        with self._mutating() as store:
            bookmark = store.get(old_name)
            if new_name and new_name != old_name:
                if new_name in store:
                    raise NameConflict(new_name, "Choose a different name.")
                store.delete(old_name)
                bookmark = replace(bookmark, name=new_name)
            if new_category:
                bookmark = replace(bookmark, category=new_category)
            store.put(bookmark)
        logger.info("rename %s -> %s [%s]", old_name, bookmark.name, bookmark.category)
        return bookmark

    def remove(self, name: str) -> Bookmark:
        """
        Delete one bookmark.

        Returns:
            The removed Bookmark

        Raises:
            NotFound: no such bookmark
        """
        with self._mutating() as store:
            bookmark = store.get(name)
            store.delete(name)
        logger.info("remove %s", name)
        return bookmark

    def clear(self) -> int:
        """Delete every bookmark. Returns how many were removed."""
        with self._mutating() as store:
            removed = store.clear()
        logger.info("clear: %d bookmarks removed", removed)
        return removed

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Bookmark:
        """Look up one bookmark without recording an access."""
        return self.load().get(name)

    def list_bookmarks(self, word: Optional[str] = None, category: Optional[str] = None) -> list[Bookmark]:
        """
        Bookmarks sorted by name, optionally filtered.

        Args:
            word: Keep names containing this substring
            category: Keep this exact category
        """
        bookmarks = list(self.load())
        if word:
            bookmarks = filter_bookmarks(bookmarks, name_contains(word))
        if category:
            bookmarks = filter_bookmarks(bookmarks, category_is(category))
        return filter_bookmarks(bookmarks)

    def stats(self) -> list[Bookmark]:
        """Every bookmark, sorted by name."""
        return filter_bookmarks(self.load())

    def recent(self, limit: Optional[int] = None) -> list[Bookmark]:
        """Most recently visited bookmarks (default limit from config)."""
        return top_by_recency(self.load(), limit or self._config.limit)

    def frequent(self, limit: Optional[int] = None) -> list[Bookmark]:
        """Most frequently visited bookmarks (default limit from config)."""
        return top_by_frequency(self.load(), limit or self._config.limit)

    # -------------------------------------------------------------------------

    def _category(self, category: Optional[str]) -> str:
        return check_field("Category", category or self._config.default_category)
