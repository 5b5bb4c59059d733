"""ANSI-aware width measurement and line shaping.

Clipping and padding keep escape sequences intact and count East Asian wide
characters as two columns, so styled rows line up in the terminal.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
_WIDE_CLASSES = frozenset({"W", "F"})
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Terminal columns for ``ch`` at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in _WIDE_CLASSES else 1


def _segments(text: str) -> Iterator[tuple[bool, str]]:
    """Split ``text`` into ``(is_escape, chunk)`` runs, in order."""
    pos = 0
    for escape in ANSI_ESCAPE_RE.finditer(text):
        if escape.start() > pos:
            yield False, text[pos : escape.start()]
        yield True, escape.group(0)
        pos = escape.end()
    if pos < len(text):
        yield False, text[pos:]


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are kept and do not count toward the width; tabs are
    expanded so clipping matches rendered cells. A wide character that would
    straddle the edge is dropped.
    """
    if max_cols <= 0 or not text:
        return ""
    pieces: list[str] = []
    col = 0
    for is_escape, chunk in _segments(text):
        if is_escape:
            pieces.append(chunk)
            continue
        for ch in chunk:
            if col >= max_cols:
                break
            cells = char_display_width(ch, col)
            if col + cells > max_cols:
                col = max_cols
                break
            pieces.append(" " * cells if ch == "\t" else ch)
            col += cells
    return "".join(pieces)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip and then pad with spaces to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def selected_with_ansi(text: str, reverse: str = "\033[7m") -> str:
    """Apply selection styling without discarding existing colors."""
    if not text or not reverse:
        return text
    # Keep reverse video active across internal resets.
    return reverse + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def styled(text: str, sgr: str, reset: str = "\033[0m") -> str:
    if not sgr or not text:
        return text
    return f"{sgr}{text}{reset}"


def sanitize_terminal_text(source: str) -> str:
    """Escape control bytes coming from engine output (bell, cursor moves, ...)."""
    if _CONTROL_RE.search(source) is None:
        return source
    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch == "\t":
            out.append(ch)
        elif code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
        else:
            out.append(ch)
    return "".join(out)
