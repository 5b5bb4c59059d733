"""Line builders for each view.

Builders read state and return styled body rows starting at the view's scroll
offset. They never clip to width; the screen writer fits every row.
"""

from __future__ import annotations

from ..cache import PreviewCacheEntry
from ..model import (
    BookmarkInfo,
    Change,
    DiffContent,
    DiffLine,
    DiffLineKind,
    FileState,
    FileStatus,
)
from ..state import AppState
from ..ui_theme import UITheme
from ..view_state import LogMode
from .ansi import sanitize_terminal_text, selected_with_ansi, styled
from .help import help_lines
from .highlight import highlight_lines

AUTHOR_COLUMN_WIDTH = 12
BLAME_AUTHOR_WIDTH = 10
PREVIEW_MIN_WIDTH = 100


def _select(line: str, selected: bool, theme: UITheme) -> str:
    return selected_with_ansi(line, theme.reverse) if selected else line


def _author_name(author: str) -> str:
    """Local part of an email address, or the author string itself."""
    return author.split("@", 1)[0] if "@" in author else author


def _short_timestamp(timestamp: str) -> str:
    return timestamp[:16].replace("T", " ")


# Log


def format_change_row(change: Change, theme: UITheme, marker: str = "") -> str:
    graph = styled(change.graph_prefix, theme.graph, theme.reset)
    if change.is_graph_only:
        return graph
    id_style = theme.working_copy if change.is_working_copy else theme.change_id
    parts = [
        styled(change.short_id(), id_style, theme.reset),
        styled(_author_name(change.author)[:AUTHOR_COLUMN_WIDTH].ljust(AUTHOR_COLUMN_WIDTH), theme.author, theme.reset),
        styled(_short_timestamp(change.timestamp), theme.timestamp, theme.reset),
    ]
    if change.bookmarks:
        parts.append(styled(" ".join(change.bookmarks), theme.bookmark, theme.reset))
    if change.has_conflict:
        parts.append(styled("(conflict)", theme.conflict, theme.reset))
    if change.is_empty:
        parts.append(styled("(empty)", theme.empty, theme.reset))
    description = sanitize_terminal_text(change.display_description)
    parts.append(description if change.description else styled(description, theme.dim, theme.reset))
    row = graph + " ".join(parts)
    if marker:
        row = f"{styled(marker, theme.notify_warning, theme.reset)} {row}"
    return row


def log_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    log = state.log
    if not log.changes:
        return [styled("(no changes in revset)", theme.dim, theme.reset)]
    source = log.source_change_id if log.mode != LogMode.NORMAL else None
    lines: list[str] = []
    end = min(len(log.changes), log.scroll_offset + rows)
    for idx in range(log.scroll_offset, end):
        change = log.changes[idx]
        marker = ">>" if source is not None and change.change_id == source else ""
        lines.append(_select(format_change_row(change, theme, marker), idx == log.selected_index, theme))
    return lines


def preview_entry(state: AppState) -> PreviewCacheEntry | None:
    """Cached preview for the selected change, while its commit id still matches."""
    change = state.log.selected_change()
    if change is None:
        return None
    entry = state.preview_cache.peek(change.change_id)
    if entry is None or entry.commit_id != change.commit_id:
        return None
    return entry


def preview_visible(state: AppState, width: int) -> bool:
    return state.preview_enabled and width >= PREVIEW_MIN_WIDTH


def preview_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    entry = preview_entry(state)
    if entry is None:
        if state.log.selected_change() is None:
            return []
        return [styled("Loading preview...", theme.dim, theme.reset)]
    lines = diff_header_lines(entry.content, theme)
    if entry.bookmarks:
        lines.insert(1, styled("Bookmarks: " + " ".join(entry.bookmarks), theme.bookmark, theme.reset))
    for line in entry.content.lines:
        if len(lines) >= rows:
            break
        lines.append(format_diff_line(line, theme))
    return lines[:rows]


# Diff


def diff_header_lines(content: DiffContent, theme: UITheme) -> list[str]:
    lines = [
        styled(f"Commit: {content.commit_id}", theme.commit_id, theme.reset),
        styled(f"Author: {content.author} ({content.timestamp})", theme.author, theme.reset),
    ]
    for description_line in (content.description or "").splitlines() or [""]:
        lines.append("    " + sanitize_terminal_text(description_line))
    lines.append("")
    if not content.has_changes and not content.lines:
        lines.append(styled("(no changes)", theme.dim, theme.reset))
    return lines


def _line_number_column(numbers: tuple[int | None, int | None] | None) -> str:
    if numbers is None:
        return ""
    old, new = numbers
    old_text = str(old) if old is not None else ""
    new_text = str(new) if new is not None else ""
    return f"{old_text:>5} {new_text:>5} "


def format_diff_line(line: DiffLine, theme: UITheme) -> str:
    text = sanitize_terminal_text(line.content)
    if line.kind is DiffLineKind.FILE_HEADER:
        return styled(f"── {text} ──", theme.diff_header, theme.reset)
    if line.kind is DiffLineKind.SEPARATOR:
        return ""
    numbers = styled(_line_number_column(line.line_numbers), theme.dim, theme.reset)
    if line.kind is DiffLineKind.ADDED:
        return numbers + styled(f"+{text}", theme.diff_added, theme.reset)
    if line.kind is DiffLineKind.DELETED:
        return numbers + styled(f"-{text}", theme.diff_deleted, theme.reset)
    return numbers + (f" {text}" if line.line_numbers is not None else text)


def diff_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    diff_view = state.diff_view
    if diff_view is None:
        return []
    content = diff_view.content
    if not content.lines:
        return diff_header_lines(content, theme)[:rows]
    visible = content.lines[diff_view.scroll_offset : diff_view.scroll_offset + rows]
    return [format_diff_line(line, theme) for line in visible]


# Status


_STATE_STYLES = {
    FileState.ADDED: "status_added",
    FileState.MODIFIED: "status_modified",
    FileState.DELETED: "status_deleted",
    FileState.RENAMED: "status_renamed",
    FileState.CONFLICTED: "conflict",
}


def format_file_status(item: FileStatus, theme: UITheme) -> str:
    sgr = getattr(theme, _STATE_STYLES[item.state])
    return f"{styled(item.indicator, sgr, theme.reset)} {sanitize_terminal_text(item.display_path)}"


def status_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    view = state.status
    status = view.status
    header = (
        f"Working copy: {styled(status.working_copy_change_id[:8], theme.working_copy, theme.reset)}"
        f"  Parent: {styled(status.parent_change_id[:8], theme.change_id, theme.reset)}"
    )
    lines = [header]
    if status.has_conflicts:
        lines.append(styled("There are unresolved conflicts", theme.conflict, theme.reset))
    if status.is_clean:
        lines.append(styled("The working copy has no changes.", theme.dim, theme.reset))
        return lines
    list_rows = max(1, rows - len(lines))
    end = min(len(status.files), view.scroll_offset + list_rows)
    for idx in range(view.scroll_offset, end):
        row = format_file_status(status.files[idx], theme)
        lines.append(_select(row, idx == view.selected_index, theme))
    return lines


def status_header_rows(state: AppState) -> int:
    """Rows the status view spends above its file list."""
    return 2 if state.status.status.has_conflicts else 1


# Operation history


def operation_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    view = state.operations
    if not view.operations:
        return [styled("(no operations)", theme.dim, theme.reset)]
    lines: list[str] = []
    end = min(len(view.operations), view.scroll_offset + rows)
    for idx in range(view.scroll_offset, end):
        op = view.operations[idx]
        marker = styled("@", theme.working_copy, theme.reset) if op.is_current else " "
        row = (
            f"{marker} {styled(op.short_id, theme.commit_id, theme.reset)} "
            f"{styled(op.user, theme.author, theme.reset)} "
            f"{styled(op.timestamp, theme.timestamp, theme.reset)} "
            f"{sanitize_terminal_text(op.description)}"
        )
        lines.append(_select(row, idx == view.selected_index, theme))
    return lines


# Bookmarks


def format_bookmark(info: BookmarkInfo, theme: UITheme) -> str:
    bookmark = info.bookmark
    parts = [styled(bookmark.full_name, theme.bookmark, theme.reset)]
    if info.change_id:
        parts.append(styled(info.change_id[:8], theme.change_id, theme.reset))
    else:
        parts.append(styled("(no target)", theme.dim, theme.reset))
    if info.description:
        parts.append(sanitize_terminal_text(info.description))
    return "  " + "  ".join(parts)


def bookmark_row_index(state: AppState) -> int:
    """Index of the selected bookmark within the grouped display rows."""
    selected = state.bookmarks.selected_bookmark()
    for idx, row in enumerate(state.bookmarks.rows()):
        if row is selected:
            return idx
    return 0


def bookmark_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    view = state.bookmarks
    all_rows = view.rows()
    if not all_rows:
        return [styled("(no bookmarks)", theme.dim, theme.reset)]
    selected = view.selected_bookmark()
    lines: list[str] = []
    for row in all_rows[view.scroll_offset : view.scroll_offset + rows]:
        if isinstance(row, str):
            lines.append(styled(row, theme.title, theme.reset))
        else:
            lines.append(_select(format_bookmark(row, theme), row is selected, theme))
    return lines


# Blame


def blame_lines(state: AppState, theme: UITheme, rows: int, syntax_style: str | None = None) -> list[str]:
    view = state.blame_view
    if view is None:
        return []
    content = view.content
    if not content.lines:
        return [styled("(empty file)", theme.dim, theme.reset)]
    start = view.scroll_offset
    window = content.lines[start : start + rows]
    sources = [sanitize_terminal_text(line.content) for line in window]
    highlighted = highlight_lines(sources, content.file_path, syntax_style) if syntax_style else sources
    number_width = len(str(content.lines[-1].line_number))
    gutter_width = 8 + 1 + BLAME_AUTHOR_WIDTH + 1 + 5
    lines: list[str] = []
    for offset, (line, source) in enumerate(zip(window, highlighted)):
        if line.first_in_hunk:
            gutter = (
                f"{styled(line.change_id[:8].ljust(8), theme.change_id, theme.reset)} "
                f"{styled(line.short_author(BLAME_AUTHOR_WIDTH).ljust(BLAME_AUTHOR_WIDTH), theme.author, theme.reset)} "
                f"{styled(line.short_timestamp().ljust(5), theme.timestamp, theme.reset)}"
            )
        else:
            gutter = styled("│".ljust(gutter_width), theme.graph, theme.reset)
        number = styled(str(line.line_number).rjust(number_width), theme.dim, theme.reset)
        row = f"{gutter} {number} {source}"
        lines.append(_select(row, start + offset == view.selected_index, theme))
    return lines


# Conflicts


def resolve_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    view = state.resolve_view
    if view is None:
        return []
    lines: list[str] = []
    end = min(len(view.files), view.scroll_offset + rows)
    for idx in range(view.scroll_offset, end):
        conflict = view.files[idx]
        row = (
            f"{styled('C', theme.conflict, theme.reset)} {sanitize_terminal_text(conflict.path)}  "
            f"{styled(conflict.description, theme.dim, theme.reset)}"
        )
        lines.append(_select(row, idx == view.selected_index, theme))
    return lines


# Evolution log


def evolog_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    view = state.evolog_view
    if view is None:
        return []
    lines: list[str] = []
    end = min(len(view.entries), view.scroll_offset + rows)
    for idx in range(view.scroll_offset, end):
        entry = view.entries[idx]
        parts = [
            styled(entry.commit_id, theme.commit_id, theme.reset),
            styled(_author_name(entry.author), theme.author, theme.reset),
            styled(entry.timestamp, theme.timestamp, theme.reset),
        ]
        if entry.is_empty:
            parts.append(styled("(empty)", theme.empty, theme.reset))
        parts.append(sanitize_terminal_text(entry.description) or styled("(no description set)", theme.dim, theme.reset))
        lines.append(_select(" ".join(parts), idx == view.selected_index, theme))
    return lines


# Help


def help_view_lines(state: AppState, theme: UITheme, rows: int) -> list[str]:
    return help_lines(theme)[state.help_scroll : state.help_scroll + rows]
