"""Pygments syntax highlighting for the blame view."""

from __future__ import annotations

import logging
from functools import lru_cache

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"


@lru_cache(maxsize=8)
def _formatter(style: str) -> TerminalFormatter:
    return TerminalFormatter(style=style)


def lexer_for_path(file_path: str) -> Lexer:
    """Lexer picked from the file name; plain text when nothing matches."""
    try:
        return get_lexer_for_filename(file_path, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


def highlight_lines(lines: list[str], file_path: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Highlight ``lines`` as one file and return them split back one-to-one.

    Falls back to the plain lines when the highlighted output does not split
    into the same number of rows.
    """
    if not lines:
        return []
    source = "\n".join(lines)
    rendered = highlight(source, lexer_for_path(file_path), _formatter(style))
    out = rendered.split("\n")
    if out and out[-1] == "" and len(out) == len(lines) + 1:
        out.pop()
    if len(out) != len(lines):
        logger.debug("highlight row mismatch for %s: %d != %d", file_path, len(out), len(lines))
        return list(lines)
    return out
