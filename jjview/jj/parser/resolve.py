"""Parser for ``jj resolve --list`` output."""

from __future__ import annotations

import re

from ...model import ConflictFile

RESOLVE_LINE_RE = re.compile(r"^(.+?)\s{2,}(\d+-sided\s+conflict.*)$")
SIDES_RE = re.compile(r"^(\d+)")


def conflict_sides(description: str) -> int | None:
    """Return ``N`` from an ``N-sided conflict`` description."""
    match = SIDES_RE.match(description)
    return int(match.group(1)) if match else None


def parse_resolve_list(output: str) -> list[ConflictFile]:
    conflicts: list[ConflictFile] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        if "\t" in line:
            path, _, description = line.partition("\t")
        else:
            match = RESOLVE_LINE_RE.match(line.rstrip())
            if match is None:
                continue
            path, description = match.groups()
        path = path.strip()
        description = description.strip()
        if not path:
            continue
        conflicts.append(ConflictFile(path=path, description=description, sides=conflict_sides(description)))
    return conflicts
