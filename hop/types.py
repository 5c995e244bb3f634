"""
Data types for directory bookmarks.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from .errors import InvalidArguments


# Field separator in the bookmark file
DELIMITER = "|"

DEFAULT_CATEGORY = "general"

# Characters that would corrupt a record line if stored in a field
_FORBIDDEN = (DELIMITER, "\n", "\r")


def local_timestamp(epoch: Optional[int]) -> str:
    """Format an epoch timestamp as local 'YYYY-MM-DD HH:MM:SS', or 'Never'."""
    if epoch is None:
        return "Never"
    try:
        return datetime.fromtimestamp(epoch).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return "Invalid Date"


def check_field(label: str, value: str) -> str:
    """Reject values that cannot be stored in a record line.

    Returns the value unchanged so it can be used inline.

    Raises:
        InvalidArguments: if the value contains the delimiter or a line break,
            or can't be encoded as UTF-8 (e.g. an undecodable file name)
    """
    for ch in _FORBIDDEN:
        if ch in value:
            shown = "'|'" if ch == DELIMITER else "a line break"
            raise InvalidArguments(f"{label} cannot contain {shown}: {value!r}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise InvalidArguments(f"{label} is not valid UTF-8: {value!r}") from None
    return value


def check_name(name: Optional[str]) -> str:
    """Validate a bookmark name (non-empty, no surrounding spaces, storable)."""
    if not name or not name.strip():
        raise InvalidArguments("Bookmark name is required.")
    if name != name.strip():
        raise InvalidArguments(f"Bookmark name cannot start or end with whitespace: {name!r}")
    return check_field("Bookmark name", name)


@dataclass(frozen=True)
class Bookmark:
    """
    One named directory.

    Fields mirror the on-disk record order:
    name|path|category|last_accessed|access_count
    """
    name: str
    path: str
    category: str = DEFAULT_CATEGORY
    last_accessed: Optional[int] = None
    access_count: int = 0

    def validate(self) -> "Bookmark":
        """Check every free-form field for characters the file format can't hold."""
        check_name(self.name)
        check_field("Path", self.path)
        check_field("Category", self.category)
        if self.access_count < 0:
            raise InvalidArguments(f"Access count cannot be negative: {self.access_count}")
        return self

    def to_line(self) -> str:
        """Serialize to a single record line (no trailing newline)."""
        self.validate()
        last = "" if self.last_accessed is None else str(self.last_accessed)
        return DELIMITER.join(
            [self.name, self.path, self.category, last, str(self.access_count)]
        )

    @classmethod
    def from_line(cls, line: str) -> Optional["Bookmark"]:
        """Parse a record line leniently.

        Returns None for lines without a key. Missing trailing fields take
        their defaults; unparseable numbers read as unset.
        """
        line = line.rstrip("\r\n")
        fields = line.split(DELIMITER, 4)
        name = fields[0].strip()
        if not name:
            return None
        fields += [""] * (5 - len(fields))
        _, path, category, last, count = fields

        last = last.strip()
        last_accessed = int(last) if last.isdecimal() else None
        count = count.strip()
        access_count = int(count) if count.isdecimal() else 0

        return cls(
            name=name,
            path=path,
            category=category or DEFAULT_CATEGORY,
            last_accessed=last_accessed,
            access_count=access_count,
        )

    def touched(self, now: int) -> "Bookmark":
        """Return a copy recording one more access at `now`.

        The timestamp never moves backwards, even if the clock does.
        """
        if self.last_accessed is not None:
            now = max(now, self.last_accessed)
        return replace(self, last_accessed=now, access_count=self.access_count + 1)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "path": self.path,
            "category": self.category,
            "last_accessed": self.last_accessed,
            "access_count": self.access_count,
        }
