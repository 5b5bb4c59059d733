"""Parser for ``jj log`` output produced with ``LOG_TEMPLATE``.

Each row begins with the engine's graph glyphs. Rows with a TAB carry change
fields; rows without one are graph-only connectors kept for rendering.
"""

from __future__ import annotations

import logging

from ...model import Change
from ..errors import ParseError

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"
MIN_LOG_FIELDS = 6


def split_graph_prefix(head: str) -> tuple[str, str]:
    """Split ``"│ ○  abcdwxyz"`` into ``("│ ○  ", "abcdwxyz")``.

    The change id is the trailing run of ASCII lowercase letters. Raises
    ``ParseError`` when no such run exists.
    """
    end = len(head)
    start = end
    while start > 0 and "a" <= head[start - 1] <= "z":
        start -= 1
    if start == end:
        raise ParseError(f"no change id in log row: {head!r}")
    return head[:start], head[start:]


def _flag(value: str) -> bool:
    return value.strip() == "true"


def parse_log_line(line: str) -> Change:
    """Parse one non-empty log row into a ``Change``."""
    if FIELD_SEPARATOR not in line:
        return Change.graph_only(line)

    head, rest = line.split(FIELD_SEPARATOR, 1)
    graph_prefix, change_id = split_graph_prefix(head)
    fields = rest.split(FIELD_SEPARATOR)
    if len(fields) < MIN_LOG_FIELDS:
        raise ParseError(f"expected at least {MIN_LOG_FIELDS} log fields, got {len(fields)}")

    bookmarks_field = fields[6].strip() if len(fields) > 6 else ""
    bookmarks = [name for name in bookmarks_field.split(",") if name] if bookmarks_field else []
    return Change(
        change_id=change_id,
        commit_id=fields[0],
        author=fields[1],
        timestamp=fields[2],
        description=fields[3],
        is_working_copy=_flag(fields[4]),
        is_empty=_flag(fields[5]),
        bookmarks=bookmarks,
        has_conflict=_flag(fields[7]) if len(fields) > 7 else False,
        graph_prefix=graph_prefix,
    )


def parse_log(output: str) -> list[Change]:
    """Parse full log output, preserving row order. Empty lines are dropped."""
    changes: list[Change] = []
    for raw_line in output.splitlines():
        if not raw_line.strip():
            continue
        changes.append(parse_log_line(raw_line))
    return changes


def parse_log_lenient(output: str) -> list[Change]:
    """Parse log output, skipping rows that do not match the template."""
    changes: list[Change] = []
    for raw_line in output.splitlines():
        if not raw_line.strip():
            continue
        try:
            changes.append(parse_log_line(raw_line))
        except ParseError as exc:
            logger.debug("skipping log row: %s", exc)
    return changes
