"""Parsed diff content for one change.

Lines are kept in render order; ``DiffLineKind`` only drives styling.
``DiffDisplayFormat`` selects which ``jj show`` flavor produced the lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DiffLineKind(Enum):
    FILE_HEADER = "file_header"
    CONTEXT = "context"
    ADDED = "added"
    DELETED = "deleted"
    SEPARATOR = "separator"


class FileOperation(Enum):
    """How a file header says the file changed."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


class DiffDisplayFormat(Enum):
    """Output flavor requested from ``jj show``; cycles word diff → stat → git."""

    COLOR_WORDS = "color-words"
    STAT = "stat"
    GIT = "git"

    @property
    def flag(self) -> str | None:
        """Extra ``jj show`` flag for this format (``None`` for the default)."""
        if self is DiffDisplayFormat.STAT:
            return "--stat"
        if self is DiffDisplayFormat.GIT:
            return "--git"
        return None

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> DiffDisplayFormat:
        order = list(DiffDisplayFormat)
        return order[(order.index(self) + 1) % len(order)]


@dataclass(frozen=True)
class DiffLine:
    """One rendered diff row with optional ``(old, new)`` line numbers."""

    kind: DiffLineKind
    content: str
    line_numbers: tuple[int | None, int | None] | None = None

    @classmethod
    def file_header(cls, path: str) -> DiffLine:
        return cls(DiffLineKind.FILE_HEADER, path)

    @classmethod
    def separator(cls) -> DiffLine:
        return cls(DiffLineKind.SEPARATOR, "")


@dataclass
class DiffContent:
    """Header metadata plus ordered diff lines for a single change."""

    commit_id: str = ""
    author: str = ""
    timestamp: str = ""
    description: str = ""
    lines: list[DiffLine] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return any(line.kind is DiffLineKind.FILE_HEADER for line in self.lines)

    @property
    def file_count(self) -> int:
        return sum(1 for line in self.lines if line.kind is DiffLineKind.FILE_HEADER)

    def file_header_indices(self) -> list[int]:
        """Return line indices of file headers, used for next/previous file jumps."""
        return [idx for idx, line in enumerate(self.lines) if line.kind is DiffLineKind.FILE_HEADER]
