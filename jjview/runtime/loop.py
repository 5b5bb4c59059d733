"""Main interactive event loop for the terminal UI.

Each pass keeps scroll offsets in step with the selection, renders when the
state is dirty, then waits briefly for one key. Idle passes fetch at most one
deferred diff preview and expire notifications.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..render import bookmark_row_index, body_rows, status_header_rows
from ..state import AppState
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 120


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[int, int], None]
    handle_key: Callable[[str], None]
    on_idle: Callable[[], bool]


def follow_selection(selected: int, offset: int, rows: int, total: int) -> int:
    """Return a scroll offset that keeps ``selected`` within ``rows`` visible rows."""
    rows = max(1, rows)
    if selected < offset:
        offset = selected
    elif selected >= offset + rows:
        offset = selected - rows + 1
    return max(0, min(offset, max(0, total - rows)))


def sync_scroll_offsets(state: AppState, rows: int) -> None:
    """Move every list view's scroll offset so its selection stays on screen."""
    log = state.log
    log.scroll_offset = follow_selection(log.selected_index, log.scroll_offset, rows, len(log.changes))

    status = state.status
    status_rows = max(1, rows - status_header_rows(state))
    status.scroll_offset = follow_selection(
        status.selected_index,
        status.scroll_offset,
        status_rows,
        len(status.status.files),
    )

    operations = state.operations
    operations.scroll_offset = follow_selection(
        operations.selected_index,
        operations.scroll_offset,
        rows,
        len(operations.operations),
    )

    bookmarks = state.bookmarks
    bookmarks.scroll_offset = follow_selection(
        bookmark_row_index(state),
        bookmarks.scroll_offset,
        rows,
        len(bookmarks.rows()),
    )

    if state.blame_view is not None:
        blame = state.blame_view
        blame.scroll_offset = follow_selection(blame.selected_index, blame.scroll_offset, rows, len(blame.content))
    if state.resolve_view is not None:
        resolve = state.resolve_view
        resolve.scroll_offset = follow_selection(
            resolve.selected_index,
            resolve.scroll_offset,
            rows,
            len(resolve.files),
        )
    if state.evolog_view is not None:
        evolog = state.evolog_view
        evolog.scroll_offset = follow_selection(
            evolog.selected_index,
            evolog.scroll_offset,
            rows,
            len(evolog.entries),
        )


def normalize_enter(state: AppState, key: str) -> str | None:
    """Map CR/LF to ``ENTER``; return ``None`` for the LF half of a CRLF pair."""
    if state.skip_next_lf and key == "ENTER_LF":
        state.skip_next_lf = False
        return None
    if key == "ENTER_CR":
        state.skip_next_lf = True
        return "ENTER"
    state.skip_next_lf = False
    if key == "ENTER_LF":
        return "ENTER"
    return key


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until ``state.should_quit`` is set."""
    ops = callbacks
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not state.should_quit:
            term = shutil.get_terminal_size((80, 24))
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                state.dirty = True
            rows = body_rows(term.lines)
            state.last_frame_height = rows
            sync_scroll_offsets(state, rows)

            if state.dirty:
                ops.render(term.columns, term.lines)
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            except KeyboardInterrupt:
                # Ctrl+C arrives as a key in raw mode; a stray SIGINT is ignored.
                continue
            if key == "":
                if ops.on_idle():
                    state.dirty = True
                continue

            normalized = normalize_enter(state, key)
            if normalized is None:
                continue
            ops.handle_key(normalized)
