"""Bookmark records from ``jj bookmark list``.

``Bookmark`` is a raw list row; ``BookmarkInfo`` adds the target change so
the bookmark view can offer jump, track, and move flows.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..text import truncate_text


@dataclass(frozen=True)
class Bookmark:
    """Local or remote bookmark entry with its tracking state."""

    name: str
    remote: str | None = None
    is_tracked: bool = False

    @property
    def full_name(self) -> str:
        """Return ``name@remote`` for remote entries, ``name`` otherwise."""
        if self.remote is None:
            return self.name
        return f"{self.name}@{self.remote}"

    @property
    def is_local(self) -> bool:
        return self.remote is None

    @property
    def is_untracked_remote(self) -> bool:
        """Remote entry that has no tracked local counterpart."""
        return self.remote is not None and not self.is_tracked


@dataclass(frozen=True)
class BookmarkInfo:
    """Bookmark plus the change it points to, when resolvable."""

    bookmark: Bookmark
    change_id: str | None = None
    commit_id: str | None = None
    description: str | None = None

    @property
    def name(self) -> str:
        return self.bookmark.name

    @property
    def remote(self) -> str | None:
        return self.bookmark.remote

    @property
    def is_jumpable(self) -> bool:
        """Whether the bookmark resolves to a change that can be selected."""
        return bool(self.change_id)

    @property
    def group_order(self) -> int:
        """Sort key: local first, then tracked remote, then untracked remote."""
        if self.bookmark.remote is None:
            return 0
        if self.bookmark.is_tracked:
            return 1
        return 2

    def display_label(self, max_width: int = 50) -> str:
        """Return ``name  change_id  description`` clipped to ``max_width`` characters."""
        parts = [self.bookmark.full_name]
        if self.change_id:
            parts.append(self.change_id[:8])
        if self.description:
            parts.append(self.description)
        return truncate_text("  ".join(parts), max_width)
