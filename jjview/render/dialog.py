"""Centered modal box for the active dialog."""

from __future__ import annotations

from ..dialog import Dialog, DialogKind
from ..ui_theme import UITheme
from .ansi import clip_ansi_line, display_width, fit_ansi_line, sanitize_terminal_text, selected_with_ansi, styled

DIALOG_MIN_WIDTH = 30
DIALOG_MAX_WIDTH = 72
DIALOG_MARGIN = 4


def _hint(dialog: Dialog) -> str:
    if dialog.kind is DialogKind.CONFIRM:
        return "y/Enter confirm · n/Esc cancel"
    if dialog.kind is DialogKind.SELECT:
        return "Space toggle · Enter confirm · Esc cancel"
    return "j/k move · Enter choose · Esc cancel"


def dialog_inner_lines(dialog: Dialog, theme: UITheme, max_items: int) -> list[str]:
    """Unframed dialog rows: message, optional detail, items, key hint."""
    lines = [sanitize_terminal_text(line) for line in dialog.message.splitlines() or [""]]
    if dialog.detail:
        lines.extend(styled(sanitize_terminal_text(line), theme.dim, theme.reset) for line in dialog.detail.splitlines())
    if dialog.items:
        lines.append("")
        start = max(0, min(dialog.cursor - max_items + 1, len(dialog.items) - max_items))
        for idx in range(start, min(len(dialog.items), start + max_items)):
            item = dialog.items[idx]
            if dialog.kind is DialogKind.SELECT:
                label = f"[{'x' if item.selected else ' '}] {sanitize_terminal_text(item.label)}"
            else:
                label = sanitize_terminal_text(item.label)
            if idx == dialog.cursor:
                label = selected_with_ansi(f"> {label}", theme.reverse)
            else:
                label = f"  {label}"
            lines.append(label)
    lines.append("")
    lines.append(styled(_hint(dialog), theme.dim, theme.reset))
    return lines


def dialog_box_lines(dialog: Dialog, theme: UITheme, screen_width: int, screen_rows: int) -> list[str]:
    """Framed dialog rows, each exactly the box width."""
    max_items = max(1, screen_rows - 8)
    inner = dialog_inner_lines(dialog, theme, max_items)
    content_width = max([display_width(line) for line in inner] + [display_width(dialog.title) + 2])
    width_limit = max(DIALOG_MIN_WIDTH, min(DIALOG_MAX_WIDTH, screen_width - DIALOG_MARGIN))
    inner_width = max(DIALOG_MIN_WIDTH - 4, min(content_width, width_limit - 4))
    border = theme.dialog_border
    title = f" {clip_ansi_line(dialog.title, inner_width - 1)} "
    top_fill = max(0, inner_width + 2 - display_width(title) - 1)
    box = [
        styled("┌─", border, theme.reset)
        + styled(title, theme.dialog_title, theme.reset)
        + styled("─" * top_fill + "┐", border, theme.reset)
    ]
    side = styled("│", border, theme.reset)
    for line in inner:
        box.append(f"{side} {fit_ansi_line(line, inner_width)}{theme.reset} {side}")
    box.append(styled("└" + "─" * (inner_width + 2) + "┘", border, theme.reset))
    return box


def overlay_dialog(body: list[str], dialog: Dialog, theme: UITheme, width: int) -> list[str]:
    """Draw the dialog centered over ``body`` rows; rows right of the box are blanked."""
    box = dialog_box_lines(dialog, theme, width, len(body))
    if not body:
        return box
    box = box[: len(body)]
    box_width = display_width(box[0])
    left = max(0, (width - box_width) // 2)
    top = max(0, (len(body) - len(box)) // 2)
    out = list(body)
    for offset, box_line in enumerate(box):
        base = fit_ansi_line(out[top + offset], left)
        out[top + offset] = f"{base}{theme.reset}{box_line}"
    return out
