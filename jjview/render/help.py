"""Help screen content: one section per view, one row per binding."""

from __future__ import annotations

from ..ui_theme import UITheme

HelpSection = tuple[str, tuple[tuple[str, str], ...]]

HELP_SECTIONS: tuple[HelpSection, ...] = (
    (
        "GLOBAL",
        (
            ("q", "Quit (log) / back"),
            ("Esc", "Back to previous view"),
            ("Tab", "Next view: log, status, bookmarks, operations"),
            ("?", "This help"),
            ("Ctrl+L", "Refresh current view"),
            ("Ctrl+C", "Quit"),
        ),
    ),
    (
        "NAVIGATION",
        (
            ("j/k", "Move down/up"),
            ("g/G", "Go to top/bottom"),
            ("Ctrl+D/U", "Half page down/up"),
        ),
    ),
    (
        "LOG",
        (
            ("Enter", "Show diff"),
            ("r", "Revset input (empty resets)"),
            ("/", "Search; n/N next/previous match"),
            ("p", "Toggle diff preview"),
            ("~", "Toggle oldest/newest first"),
            ("s", "Status view"),
            ("o", "Operation history"),
            ("M", "Bookmark view"),
            ("u / Ctrl+R", "Undo / redo"),
            ("y", "Copy change id"),
            ("v", "Evolution log"),
            ("X", "Resolve conflicts"),
            ("d / E", "Describe inline / in editor"),
            ("e", "Edit change"),
            ("c / C", "New change / new from selected"),
            ("S", "Squash into (select, Enter)"),
            ("R", "Rebase: r/s/b/A/B mode, S skip emptied, select, Enter"),
            ("A", "Abandon"),
            ("x", "Split"),
            ("I", "Diffedit in diff editor"),
            ("z", "Simplify parents"),
            ("|", "Parallelize from selected (select end, Enter)"),
            ("Y", "Duplicate"),
            ("V", "Revert"),
            ("] / [", "Next / previous change"),
            ("a", "Absorb"),
            ("b / D", "Create / delete bookmarks"),
            ("T / B", "Track remote bookmarks / jump to bookmark"),
            ("f / P", "Fetch / push"),
        ),
    ),
    (
        "STATUS",
        (
            ("Enter", "Diff of file"),
            ("a", "Blame file"),
            ("C", "Commit"),
            ("r / R", "Restore file / all files"),
            ("D", "Diffedit file"),
            ("x", "Next conflicted file"),
        ),
    ),
    (
        "DIFF",
        (
            ("]/[ or n/N", "Next / previous file"),
            ("w", "Cycle format: color-words, stat, git"),
            ("a", "Blame file at top"),
        ),
    ),
    (
        "BOOKMARKS",
        (
            ("Enter/J", "Jump to change in log"),
            ("T / U", "Track / untrack remote"),
            ("D", "Delete local"),
            ("r", "Rename local"),
            ("F", "Forget"),
            ("m", "Move to @"),
            ("u", "Undo"),
        ),
    ),
    (
        "OPERATIONS",
        (("Enter", "Restore repository to operation"),),
    ),
    (
        "BLAME",
        (
            ("Enter", "Diff of line's change"),
            ("J", "Jump to change in log (twice to widen revset)"),
        ),
    ),
    (
        "RESOLVE",
        (
            ("Enter", "External merge tool (@ only)"),
            ("o / t", "Take ours / theirs"),
            ("d", "Diff of file"),
        ),
    ),
    (
        "EVOLOG",
        (("Enter", "Diff of that version"),),
    ),
)

KEY_COLUMN_WIDTH = 14


def help_lines(theme: UITheme | None = None) -> list[str]:
    """Styled help rows; section headings are followed by a blank row."""
    heading = theme.help_heading if theme is not None else ""
    key_style = theme.help_key if theme is not None else ""
    reset = theme.reset if theme is not None and (heading or key_style) else ""
    lines: list[str] = []
    for title, bindings in HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{heading}{title}{reset}")
        for key, description in bindings:
            lines.append(f"  {key_style}{key.ljust(KEY_COLUMN_WIDTH)}{reset}{description}")
    return lines


def help_line_count() -> int:
    return len(help_lines())
