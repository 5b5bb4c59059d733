"""Parser for ``jj git push --dry-run`` output.

The dry run prints one line per planned ref update. Anything unrecognized
yields an unparsed result so callers can fall back to a plain confirmation.
"""

from __future__ import annotations

from ...model import PushActionKind, PushPreviewAction, PushPreviewResult

NOTHING_CHANGED_MARKER = "Nothing changed."

_MOVE_PREFIXES: tuple[tuple[str, PushActionKind], ...] = (
    ("Move forward bookmark ", PushActionKind.MOVE_FORWARD),
    ("Move sideways bookmark ", PushActionKind.MOVE_SIDEWAYS),
    ("Move backward bookmark ", PushActionKind.MOVE_BACKWARD),
)
_ADD_PREFIX = "Add bookmark "
_DELETE_PREFIX = "Delete bookmark "


def parse_push_action(line: str) -> PushPreviewAction | None:
    for prefix, kind in _MOVE_PREFIXES:
        if line.startswith(prefix):
            name, sep, hashes = line[len(prefix) :].partition(" from ")
            from_hash, sep2, to_hash = hashes.partition(" to ")
            if not sep or not sep2:
                return None
            return PushPreviewAction(kind, name, from_hash=from_hash, to_hash=to_hash)
    if line.startswith(_ADD_PREFIX):
        name, sep, to_hash = line[len(_ADD_PREFIX) :].partition(" to ")
        return PushPreviewAction(PushActionKind.ADD, name, to_hash=to_hash) if sep else None
    if line.startswith(_DELETE_PREFIX):
        name, sep, from_hash = line[len(_DELETE_PREFIX) :].partition(" from ")
        return PushPreviewAction(PushActionKind.DELETE, name, from_hash=from_hash) if sep else None
    return None


def parse_push_dry_run(output: str) -> PushPreviewResult:
    if NOTHING_CHANGED_MARKER in output:
        return PushPreviewResult.nothing_changed()
    actions = [action for action in (parse_push_action(line.strip()) for line in output.splitlines()) if action]
    if not actions:
        return PushPreviewResult.unparsed()
    return PushPreviewResult.changes(actions)
