"""Working-copy status snapshot from ``jj status``.

A status is replaced wholesale on every refresh and never patched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FileState(Enum):
    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    CONFLICTED = "C"


@dataclass(frozen=True)
class FileStatus:
    """One changed path; ``renamed_from`` is set only for renames."""

    path: str
    state: FileState
    renamed_from: str | None = None

    @property
    def indicator(self) -> str:
        return self.state.value

    @property
    def display_path(self) -> str:
        if self.state is FileState.RENAMED and self.renamed_from:
            return f"{self.renamed_from} → {self.path}"
        return self.path


@dataclass
class Status:
    files: list[FileStatus] = field(default_factory=list)
    has_conflicts: bool = False
    working_copy_change_id: str = ""
    parent_change_id: str = ""

    @property
    def is_clean(self) -> bool:
        return not self.files

    def count_by_state(self) -> dict[FileState, int]:
        """Return non-zero per-state file counts."""
        counts: dict[FileState, int] = {}
        for item in self.files:
            counts[item.state] = counts.get(item.state, 0) + 1
        return counts
