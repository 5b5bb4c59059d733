"""Parser for ``jj evolog`` output produced with ``EVOLOG_TEMPLATE``."""

from __future__ import annotations

from ...model import EvologEntry

EVOLOG_FIELDS = 6
EMPTY_MARKER = "[empty]"


def parse_evolog(output: str) -> list[EvologEntry]:
    """Parse evolog rows (newest first); tabs inside descriptions are preserved."""
    entries: list[EvologEntry] = []
    for line in output.splitlines():
        if not line:
            continue
        fields = line.split("\t", EVOLOG_FIELDS - 1)
        if len(fields) < EVOLOG_FIELDS:
            continue
        commit_id, change_id, author, timestamp, empty_flag, description = fields
        entries.append(
            EvologEntry(
                commit_id=commit_id,
                change_id=change_id,
                author=author,
                timestamp=timestamp,
                is_empty=empty_flag == EMPTY_MARKER,
                description=description,
            )
        )
    return entries
