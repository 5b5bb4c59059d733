"""Full-frame composition: title bar, view body, dialog overlay, footer.

``build_frame`` is pure; ``write_frame`` clears the screen and writes the
composed rows in one call.
"""

from __future__ import annotations

import os

from ..model import NotificationKind
from ..state import AppState, View
from ..ui_theme import UITheme
from ..view_state import LogMode
from .ansi import clip_ansi_line, display_width, fit_ansi_line, sanitize_terminal_text, styled
from .dialog import overlay_dialog
from .highlight import DEFAULT_STYLE
from .views import (
    blame_lines,
    bookmark_lines,
    diff_lines,
    evolog_lines,
    help_view_lines,
    log_lines,
    operation_lines,
    preview_lines,
    preview_visible,
    resolve_lines,
    status_lines,
)

CHROME_ROWS = 2
HELP_HINT = "│ ? Help"

VIEW_HINTS = {
    View.LOG: "Enter diff · r revset · / search · c new · d describe · b bookmark · P push · f fetch",
    View.DIFF: "j/k scroll · ]/[ file · w format · a blame · q back",
    View.STATUS: "Enter diff · a blame · C commit · r restore · D diffedit · x next conflict · q back",
    View.OPERATION: "Enter restore · q back",
    View.BLAME: "Enter diff · J jump to log · q back",
    View.BOOKMARK: "Enter jump · T/U track · D delete · r rename · F forget · m move to @ · q back",
    View.RESOLVE: "Enter merge tool · o ours · t theirs · d diff · q back",
    View.EVOLOG: "Enter diff · q back",
    View.HELP: "j/k scroll · q back",
}

LOG_MODE_HINTS = {
    LogMode.REBASE_MODE_SELECT: "Rebase: r revision · s source · b branch · A after · B before · S skip emptied · Esc cancel",
    LogMode.REBASE_SELECT: "Rebase: select destination, Enter confirm, Esc cancel",
    LogMode.SQUASH_SELECT: "Squash: select destination, Enter confirm, Esc cancel",
    LogMode.PARALLELIZE_SELECT: "Parallelize: select end of range, Enter confirm, Esc cancel",
}


def body_rows(height: int) -> int:
    """Rows left for the view once the title bar and footer are drawn."""
    return max(1, height - CHROME_ROWS)


def build_status_line(left_text: str, width: int, right_text: str = HELP_HINT) -> str:
    usable = max(1, width - 1)
    if usable <= display_width(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - display_width(right_text) - 1)
    left = clip_ansi_line(left_text, left_limit)
    gap = " " * (usable - display_width(left) - display_width(right_text))
    return f"{left}{gap}{right_text}"


def title_text(state: AppState) -> str:
    view = state.current_view
    if view is View.LOG:
        log = state.log
        revset = log.current_revset or state.default_revset or "default"
        order = " (oldest first)" if log.reversed else ""
        return f"Log: {revset}{order}"
    if view is View.DIFF and state.diff_view is not None:
        diff_view = state.diff_view
        current = diff_view.current_file()
        suffix = f" · {current}" if current else ""
        return f"Diff: {diff_view.change_id[:8]} [{diff_view.display_format.label}]{suffix}"
    if view is View.STATUS:
        count = len(state.status.status.files)
        return f"Status: {count} changed file{'s' if count != 1 else ''}"
    if view is View.OPERATION:
        return "Operation history"
    if view is View.BOOKMARK:
        return f"Bookmarks ({len(state.bookmarks.bookmarks)})"
    if view is View.BLAME and state.blame_view is not None:
        return f"Blame: {state.blame_view.content.title()}"
    if view is View.RESOLVE and state.resolve_view is not None:
        return f"Conflicts in {state.resolve_view.change_id[:8]}"
    if view is View.EVOLOG and state.evolog_view is not None:
        return f"Evolution of {state.evolog_view.change_id[:8]}"
    if view is View.HELP:
        return "Help"
    return view.value


def footer_text(state: AppState, theme: UITheme) -> str:
    """Footer content by priority: prompt, error, notification, mode, hints."""
    if state.prompt is not None:
        return f"{state.prompt.label}{sanitize_terminal_text(state.prompt.buffer)}█"
    if state.error_message:
        return styled(f"Error: {sanitize_terminal_text(state.error_message)}", theme.error, theme.reset)
    notification = state.notification
    if notification is not None:
        sgr = {
            NotificationKind.SUCCESS: theme.notify_success,
            NotificationKind.INFO: theme.notify_info,
            NotificationKind.WARNING: theme.notify_warning,
        }[notification.kind]
        return styled(sanitize_terminal_text(notification.message), sgr, theme.reset)
    if state.current_view is View.LOG and state.log.mode in LOG_MODE_HINTS:
        hint = LOG_MODE_HINTS[state.log.mode]
        if state.log.mode == LogMode.REBASE_MODE_SELECT and state.log.skip_emptied:
            hint += " [skip emptied]"
        return styled(hint, theme.notify_warning, theme.reset)
    return VIEW_HINTS.get(state.current_view, "")


def _log_body(state: AppState, theme: UITheme, width: int, rows: int) -> list[str]:
    left = log_lines(state, theme, rows)
    if not preview_visible(state, width):
        return left
    left_width = width // 2
    right_width = max(1, width - left_width - 1)
    right = preview_lines(state, theme, rows)
    divider = styled("│", theme.graph, theme.reset)
    out: list[str] = []
    for row in range(rows):
        left_text = left[row] if row < len(left) else ""
        right_text = right[row] if row < len(right) else ""
        out.append(f"{fit_ansi_line(left_text, left_width)}{theme.reset}{divider}{clip_ansi_line(right_text, right_width)}")
    return out


def view_body(state: AppState, theme: UITheme, width: int, rows: int, syntax_style: str | None = DEFAULT_STYLE) -> list[str]:
    view = state.current_view
    if view is View.LOG:
        return _log_body(state, theme, width, rows)
    if view is View.DIFF:
        return diff_lines(state, theme, rows)
    if view is View.STATUS:
        return status_lines(state, theme, rows)
    if view is View.OPERATION:
        return operation_lines(state, theme, rows)
    if view is View.BOOKMARK:
        return bookmark_lines(state, theme, rows)
    if view is View.BLAME:
        return blame_lines(state, theme, rows, syntax_style)
    if view is View.RESOLVE:
        return resolve_lines(state, theme, rows)
    if view is View.EVOLOG:
        return evolog_lines(state, theme, rows)
    return help_view_lines(state, theme, rows)


def build_frame(
    state: AppState,
    theme: UITheme,
    width: int,
    height: int,
    syntax_style: str | None = DEFAULT_STYLE,
) -> list[str]:
    """Compose exactly ``height`` rows, each fitted to ``width`` columns."""
    width = max(1, width)
    rows = body_rows(height)
    body = view_body(state, theme, width, rows, syntax_style)[:rows]
    body.extend([""] * (rows - len(body)))
    if state.active_dialog is not None:
        body = overlay_dialog(body, state.active_dialog, theme, width)
    title = build_status_line(f" jjview │ {sanitize_terminal_text(title_text(state))}", width, "")
    frame = [styled(fit_ansi_line(title, width), theme.reverse, theme.reset)]
    for line in body:
        clipped = clip_ansi_line(line, width)
        if "\033" in clipped:
            clipped += theme.reset
        frame.append(clipped)
    frame.append(clip_ansi_line(build_status_line(footer_text(state, theme), width), width))
    return frame


def write_frame(lines: list[str], fd: int) -> None:
    out = "\033[H\033[J" + "\r\n".join(lines)
    os.write(fd, out.encode("utf-8", errors="replace"))
