"""View invalidation flags and the bounded preview cache.

``DirtyFlags`` records which views need re-reading from ``jj`` after a
mutation. ``PreviewCache`` keeps recently shown diffs keyed by change id and
trusts an entry only while its commit id still matches the log.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import dataclass, field

from .model import Change, DiffContent

PREVIEW_CACHE_CAPACITY = 8


@dataclass
class DirtyFlags:
    """Per-view staleness markers. Every mutation also dirties the op log."""

    log: bool = False
    status: bool = False
    op_log: bool = False
    bookmarks: bool = False

    @classmethod
    def log_only(cls) -> DirtyFlags:
        """Metadata-only mutation (describe, revert)."""
        return cls(log=True, op_log=True)

    @classmethod
    def status_only(cls) -> DirtyFlags:
        return cls(status=True, op_log=True)

    @classmethod
    def log_and_status(cls) -> DirtyFlags:
        return cls(log=True, status=True, op_log=True)

    @classmethod
    def log_and_bookmarks(cls) -> DirtyFlags:
        return cls(log=True, bookmarks=True, op_log=True)

    @classmethod
    def everything(cls) -> DirtyFlags:
        """Undo, redo, restore and fetch can change any view."""
        return cls(log=True, status=True, op_log=True, bookmarks=True)

    def merge(self, other: DirtyFlags) -> None:
        """OR ``other`` into these flags."""
        self.log = self.log or other.log
        self.status = self.status or other.status
        self.op_log = self.op_log or other.op_log
        self.bookmarks = self.bookmarks or other.bookmarks

    def any(self) -> bool:
        return self.log or self.status or self.op_log or self.bookmarks


@dataclass
class PreviewCacheEntry:
    change_id: str
    commit_id: str
    content: DiffContent
    bookmarks: list[str] = field(default_factory=list)


class PreviewCache:
    """Strict LRU of diff previews; iteration order runs oldest to newest."""

    def __init__(self, capacity: int = PREVIEW_CACHE_CAPACITY) -> None:
        self.capacity = max(1, capacity)
        self._entries: OrderedDict[str, PreviewCacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, change_id: object) -> bool:
        return change_id in self._entries

    def keys(self) -> list[str]:
        """Return cached change ids from least to most recently used."""
        return list(self._entries)

    def peek(self, change_id: str) -> PreviewCacheEntry | None:
        """Read an entry without changing its eviction priority."""
        return self._entries.get(change_id)

    def touch(self, change_id: str) -> bool:
        """Promote an entry to most recently used; return whether it existed."""
        if change_id not in self._entries:
            return False
        self._entries.move_to_end(change_id)
        return True

    def insert(self, entry: PreviewCacheEntry) -> None:
        """Add or replace an entry, evicting the least recently used at capacity."""
        if entry.change_id in self._entries:
            del self._entries[entry.change_id]
        while len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[entry.change_id] = entry

    def remove(self, change_id: str) -> None:
        self._entries.pop(change_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def validate(self, changes: Iterable[Change]) -> None:
        """Drop entries that no longer match ``changes``.

        An entry survives only when a selectable row with the same change id
        carries the same commit id; its bookmark list is refreshed from that
        row. Graph-only rows never count as a match.
        """
        current = {change.change_id: change for change in changes if not change.is_graph_only}
        for change_id in list(self._entries):
            entry = self._entries[change_id]
            change = current.get(change_id)
            if change is None or change.commit_id != entry.commit_id:
                del self._entries[change_id]
                continue
            entry.bookmarks = list(change.bookmarks)
