"""
Read-only views over a loaded bookmark store.

All functions take anything that iterates Bookmarks (normally a
BookmarkStore) and return new lists; nothing here writes to disk.
"""

from typing import Callable, Iterable, Optional

from .errors import InvalidArguments
from .types import Bookmark

Predicate = Callable[[Bookmark], bool]

DEFAULT_LIMIT = 10


def name_contains(word: str) -> Predicate:
    """Match bookmarks whose name contains `word` (case-sensitive)."""
    return lambda b: word in b.name


def category_is(category: str) -> Predicate:
    """Match bookmarks whose category is exactly `category`."""
    return lambda b: b.category == category


def filter_bookmarks(
    bookmarks: Iterable[Bookmark],
    predicate: Optional[Predicate] = None,
) -> list[Bookmark]:
    """Bookmarks matching `predicate` (all if None), sorted by name."""
    matched = [b for b in bookmarks if predicate is None or predicate(b)]
    return sorted(matched, key=lambda b: b.name)


def _check_limit(n: int) -> None:
    if n < 1:
        raise InvalidArguments(f"Limit must be at least 1, got {n}")


def top_by_recency(bookmarks: Iterable[Bookmark], n: int = DEFAULT_LIMIT) -> list[Bookmark]:
    """
    Most recently accessed bookmarks first.

    Bookmarks never navigated to are left out. Ties keep name order.
    """
    _check_limit(n)
    visited = filter_bookmarks(bookmarks, lambda b: b.last_accessed is not None)
    visited.sort(key=lambda b: b.last_accessed, reverse=True)
    return visited[:n]


def top_by_frequency(bookmarks: Iterable[Bookmark], n: int = DEFAULT_LIMIT) -> list[Bookmark]:
    """
    Most frequently accessed bookmarks first.

    Bookmarks with a zero count are included. Ties keep name order.
    """
    _check_limit(n)
    ranked = filter_bookmarks(bookmarks)
    ranked.sort(key=lambda b: b.access_count, reverse=True)
    return ranked[:n]
