"""
Bookmark store backed by a single flat file.

The file holds one record per line:

    name|path|category|last_accessed|access_count

The whole file is read on load and rewritten on save. Saves go through a
temporary file in the same directory followed by an atomic rename, so a
reader sees either the old file or the new one, never a partial write.

The store does not prevent lost updates between two processes that both
load, modify and save. `locked()` takes an advisory lock around such a
sequence for callers that opt in.
"""

import fcntl
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .errors import NotFound, PersistenceFailure
from .types import Bookmark

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"


class BookmarkStore:
    """
    In-memory mapping of bookmark name to Bookmark, tied to its backing file.

    Instances are meant to live for one operation: load, optionally mutate,
    save. Nothing is cached between loads.
    """

    def __init__(self, path: Path, bookmarks: Optional[dict[str, Bookmark]] = None):
        """
        Args:
            path: Path to the bookmark file
            bookmarks: Initial contents, keyed by name
        """
        self._path = Path(path)
        self._bookmarks: dict[str, Bookmark] = dict(bookmarks or {})

    @property
    def path(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Load / Save
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "BookmarkStore":
        """
        Read the bookmark file into a new store.

        A missing file is an empty store; the file is created so later runs
        (and the user) can see it. Lines without a name, and lines that are
        not valid UTF-8, are skipped.
        """
        path = Path(path)
        store = cls(path)
        if not path.exists():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
            except OSError as e:
                logger.warning("Could not create bookmark file %s: %s", path, e)
            return store

        with open(path, "rb") as f:
            for lineno, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError:
                    logger.debug("Skipping undecodable line %d in %s", lineno, path)
                    continue
                bookmark = Bookmark.from_line(line)
                if bookmark is None:
                    if line.strip():
                        logger.debug("Skipping malformed line %d in %s", lineno, path)
                    continue
                if bookmark.name in store._bookmarks:
                    logger.debug("Duplicate bookmark %r on line %d, keeping the later one",
                                 bookmark.name, lineno)
                store._bookmarks[bookmark.name] = bookmark
        logger.debug("Loaded %d bookmarks from %s", len(store._bookmarks), path)
        return store

    def dumps(self) -> str:
        """Serialize all records, sorted by name, one per line."""
        return "".join(f"{self._bookmarks[name].to_line()}\n" for name in sorted(self._bookmarks))

    def save(self) -> None:
        """
        Atomically replace the bookmark file with the current contents.

        Raises:
            InvalidArguments: if a record holds a field the format can't store
                (nothing is written)
            PersistenceFailure: if the temporary file can't be written or
                renamed into place (the previous file is left as it was)
        """
        content = self.dumps()
        target_dir = self._path.parent
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=target_dir, prefix=f".{self._path.name}-", suffix=".tmp"
            )
        except OSError as e:
            raise PersistenceFailure(
                f"Failed to create temporary file for saving in {target_dir}: {e}"
            ) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path)
        except (OSError, ValueError) as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise PersistenceFailure(f"Failed to save bookmarks to {self._path}: {e}") from e
        logger.debug("Saved %d bookmarks to %s", len(self._bookmarks), self._path)

    # -------------------------------------------------------------------------
    # Record access
    # -------------------------------------------------------------------------

    def get(self, name: str) -> Bookmark:
        """
        Look up a bookmark by name.

        Raises:
            NotFound: if there is no such bookmark
        """
        try:
            return self._bookmarks[name]
        except KeyError:
            raise NotFound(name) from None

    def find(self, name: str) -> Optional[Bookmark]:
        """Look up a bookmark by name, returning None if absent."""
        return self._bookmarks.get(name)

    def put(self, bookmark: Bookmark) -> None:
        """Insert or overwrite the record under `bookmark.name`."""
        self._bookmarks[bookmark.name] = bookmark

    def delete(self, name: str) -> bool:
        """Remove a bookmark. Returns True if it existed."""
        return self._bookmarks.pop(name, None) is not None

    def clear(self) -> int:
        """Remove every bookmark. Returns how many were removed."""
        count = len(self._bookmarks)
        self._bookmarks.clear()
        return count

    def names(self) -> list[str]:
        return sorted(self._bookmarks)

    def __contains__(self, name: object) -> bool:
        return name in self._bookmarks

    def __len__(self) -> int:
        return len(self._bookmarks)

    def __iter__(self) -> Iterator[Bookmark]:
        """Iterate bookmarks in name order."""
        for name in sorted(self._bookmarks):
            yield self._bookmarks[name]


@contextmanager
def locked(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock for the bookmark file at `path`.

    The lock lives on a sidecar file (`<path>.lock`) because the bookmark
    file itself is replaced on every save.
    """
    lock_path = Path(str(path) + LOCK_SUFFIX)
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(lock_path, os.O_RDWR | os.O_CREAT, 0o600)
    except OSError as e:
        raise PersistenceFailure(f"Failed to open lock file {lock_path}: {e}") from e
    try:
        fcntl.flock(fd, fcntl.LOCK_EX)
        logger.debug("Acquired lock %s", lock_path)
        yield
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)
