"""Per-view cursor and data holders.

Each class owns the rows one screen shows plus its selection. They never call
``jj``; the controller fills them after each refresh.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .model import (
    AnnotationContent,
    BookmarkInfo,
    Change,
    ConflictFile,
    DiffContent,
    DiffDisplayFormat,
    EvologEntry,
    Operation,
    RebaseMode,
    Status,
)


def _clamp(index: int, size: int) -> int:
    if size <= 0:
        return 0
    return max(0, min(index, size - 1))


class LogMode:
    """Log sub-modes that retarget ``j``/``k`` and Enter."""

    NORMAL = "normal"
    REBASE_MODE_SELECT = "rebase_mode_select"
    REBASE_SELECT = "rebase_select"
    SQUASH_SELECT = "squash_select"
    PARALLELIZE_SELECT = "parallelize_select"


@dataclass
class LogViewState:
    changes: list[Change] = field(default_factory=list)
    selected_index: int = 0
    scroll_offset: int = 0
    current_revset: str | None = None
    reversed: bool = False
    last_search_query: str | None = None
    revset_history: list[str] = field(default_factory=list)
    mode: str = LogMode.NORMAL
    rebase_mode: RebaseMode = RebaseMode.REVISION
    # Change being rebased or squashed while a destination is chosen.
    source_change_id: str | None = None
    skip_emptied: bool = False

    def _selectable(self, index: int) -> bool:
        return 0 <= index < len(self.changes) and not self.changes[index].is_graph_only

    def selected_change(self) -> Change | None:
        if self._selectable(self.selected_index):
            return self.changes[self.selected_index]
        return None

    def set_changes(self, changes: list[Change]) -> None:
        """Replace all rows, keeping the selection on the same change id when possible."""
        previous = self.selected_change()
        self.changes = changes
        if previous is not None and self.select_change_by_id(previous.change_id):
            return
        if not self.select_working_copy():
            self.move_to_top()

    def select_change_by_id(self, change_id: str) -> bool:
        for idx, change in enumerate(self.changes):
            if not change.is_graph_only and change.change_id == change_id:
                self.selected_index = idx
                return True
        return False

    def select_change_by_prefix(self, prefix: str) -> bool:
        """Select the first change whose id starts with ``prefix`` (or vice versa)."""
        if not prefix:
            return False
        for idx, change in enumerate(self.changes):
            if change.is_graph_only or not change.change_id:
                continue
            if change.change_id.startswith(prefix) or prefix.startswith(change.change_id):
                self.selected_index = idx
                return True
        return False

    def select_working_copy(self) -> bool:
        for idx, change in enumerate(self.changes):
            if change.is_working_copy and not change.is_graph_only:
                self.selected_index = idx
                return True
        return False

    def move_by(self, delta: int) -> None:
        """Move ``delta`` selectable rows, skipping graph-only connectors."""
        step = 1 if delta > 0 else -1
        remaining = abs(delta)
        idx = self.selected_index
        while remaining > 0:
            candidate = idx + step
            while 0 <= candidate < len(self.changes) and self.changes[candidate].is_graph_only:
                candidate += step
            if not self._selectable(candidate):
                break
            idx = candidate
            remaining -= 1
        self.selected_index = idx

    def move_to_top(self) -> None:
        for idx in range(len(self.changes)):
            if self._selectable(idx):
                self.selected_index = idx
                return
        self.selected_index = 0

    def move_to_bottom(self) -> None:
        for idx in range(len(self.changes) - 1, -1, -1):
            if self._selectable(idx):
                self.selected_index = idx
                return
        self.selected_index = 0

    def search(self, query: str, forward: bool = True) -> bool:
        """Select the next (or previous) change matching ``query``, wrapping around."""
        count = len(self.changes)
        if count == 0 or not query:
            return False
        step = 1 if forward else -1
        for offset in range(1, count + 1):
            idx = (self.selected_index + step * offset) % count
            if self.changes[idx].matches_query(query):
                self.selected_index = idx
                return True
        return False

    def find_change(self, change_id: str) -> Change | None:
        for change in self.changes:
            if not change.is_graph_only and change.change_id == change_id:
                return change
        return None

    def find_bookmark_owner(self, name: str) -> Change | None:
        """Return the loaded change carrying bookmark ``name``."""
        for change in self.changes:
            if not change.is_graph_only and name in change.bookmarks:
                return change
        return None

    def working_copy(self) -> Change | None:
        for change in self.changes:
            if change.is_working_copy and not change.is_graph_only:
                return change
        return None

    def reset_mode(self) -> None:
        self.mode = LogMode.NORMAL
        self.source_change_id = None
        self.skip_emptied = False


@dataclass
class ListCursor:
    """Selection over a plain list of rows."""

    selected_index: int = 0
    scroll_offset: int = 0

    def move_within(self, delta: int, size: int) -> None:
        self.selected_index = _clamp(self.selected_index + delta, size)

    def to_top(self) -> None:
        self.selected_index = 0

    def to_bottom(self, size: int) -> None:
        self.selected_index = max(0, size - 1)


@dataclass
class StatusViewState(ListCursor):
    status: Status = field(default_factory=Status)

    def set_status(self, status: Status) -> None:
        self.status = status
        self.selected_index = _clamp(self.selected_index, len(status.files))

    def selected_path(self) -> str | None:
        files = self.status.files
        if 0 <= self.selected_index < len(files):
            return files[self.selected_index].path
        return None


@dataclass
class OperationViewState(ListCursor):
    operations: list[Operation] = field(default_factory=list)

    def set_operations(self, operations: list[Operation]) -> None:
        self.operations = operations
        self.selected_index = _clamp(self.selected_index, len(operations))

    def selected_operation(self) -> Operation | None:
        if 0 <= self.selected_index < len(self.operations):
            return self.operations[self.selected_index]
        return None


BOOKMARK_GROUP_HEADERS = {
    0: "── Local ──",
    1: "── Remote (tracked) ──",
    2: "── Remote (untracked) ──",
}


@dataclass
class BookmarkViewState(ListCursor):
    bookmarks: list[BookmarkInfo] = field(default_factory=list)
    # Bookmark being renamed; the new name is typed into the prompt.
    rename_from: str | None = None

    def set_bookmarks(self, bookmarks: list[BookmarkInfo]) -> None:
        """Store bookmarks grouped local / tracked remote / untracked remote."""
        self.bookmarks = sorted(bookmarks, key=lambda info: (info.group_order, info.bookmark.full_name))
        self.selected_index = _clamp(self.selected_index, len(self.bookmarks))

    def selected_bookmark(self) -> BookmarkInfo | None:
        if 0 <= self.selected_index < len(self.bookmarks):
            return self.bookmarks[self.selected_index]
        return None

    def rows(self) -> list[str | BookmarkInfo]:
        """Return display rows with a header string before each group."""
        rows: list[str | BookmarkInfo] = []
        group = None
        for info in self.bookmarks:
            if info.group_order != group:
                group = info.group_order
                rows.append(BOOKMARK_GROUP_HEADERS[group])
            rows.append(info)
        return rows


@dataclass
class DiffViewState:
    change_id: str
    content: DiffContent
    display_format: DiffDisplayFormat = DiffDisplayFormat.COLOR_WORDS
    scroll_offset: int = 0

    def scroll(self, delta: int, visible_rows: int) -> None:
        max_offset = max(0, len(self.content.lines) - max(1, visible_rows))
        self.scroll_offset = max(0, min(self.scroll_offset + delta, max_offset))

    def next_file(self) -> bool:
        for idx in self.content.file_header_indices():
            if idx > self.scroll_offset:
                self.scroll_offset = idx
                return True
        return False

    def prev_file(self) -> bool:
        for idx in reversed(self.content.file_header_indices()):
            if idx < self.scroll_offset:
                self.scroll_offset = idx
                return True
        return False

    def jump_to_file(self, path: str) -> bool:
        for idx in self.content.file_header_indices():
            if self.content.lines[idx].content == path:
                self.scroll_offset = idx
                return True
        return False

    def current_file(self) -> str | None:
        """Return the file whose section contains the top visible line."""
        current = None
        for idx in self.content.file_header_indices():
            if idx > self.scroll_offset:
                break
            current = self.content.lines[idx].content
        return current


@dataclass
class BlameViewState(ListCursor):
    content: AnnotationContent = field(default_factory=lambda: AnnotationContent(file_path=""))

    def selected_change_id(self) -> str | None:
        lines = self.content.lines
        if 0 <= self.selected_index < len(lines):
            return lines[self.selected_index].change_id
        return None


@dataclass
class ResolveViewState(ListCursor):
    change_id: str = ""
    is_working_copy: bool = False
    files: list[ConflictFile] = field(default_factory=list)

    def set_files(self, files: list[ConflictFile]) -> None:
        self.files = files
        self.selected_index = _clamp(self.selected_index, len(files))

    def selected_file(self) -> ConflictFile | None:
        if 0 <= self.selected_index < len(self.files):
            return self.files[self.selected_index]
        return None


@dataclass
class EvologViewState(ListCursor):
    change_id: str = ""
    entries: list[EvologEntry] = field(default_factory=list)

    def selected_entry(self) -> EvologEntry | None:
        if 0 <= self.selected_index < len(self.entries):
            return self.entries[self.selected_index]
        return None
