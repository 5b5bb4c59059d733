"""Parser for ``jj status`` output."""

from __future__ import annotations

from ...model import FileState, FileStatus, Status

_STATE_CHARS = {
    "A": FileState.ADDED,
    "M": FileState.MODIFIED,
    "D": FileState.DELETED,
    "C": FileState.CONFLICTED,
}


def _parse_rename(rest: str) -> FileStatus | None:
    """Expand ``src/{old.py => new.py}`` into a rename entry."""
    open_idx = rest.find("{")
    close_idx = rest.find("}")
    if open_idx == -1 or close_idx < open_idx:
        return None
    prefix = rest[:open_idx]
    inner = rest[open_idx + 1 : close_idx]
    suffix = rest[close_idx + 1 :]
    old, sep, new = inner.partition(" => ")
    if not sep:
        return None
    return FileStatus(
        path=f"{prefix}{new}{suffix}",
        state=FileState.RENAMED,
        renamed_from=f"{prefix}{old}{suffix}",
    )


def parse_status_line(line: str) -> FileStatus | None:
    """Parse ``X path``; returns ``None`` for anything that is not a file row."""
    if len(line) < 3 or line[1] != " ":
        return None
    rest = line[2:].strip()
    if not rest:
        return None
    code = line[0]
    if code == "R":
        return _parse_rename(rest)
    state = _STATE_CHARS.get(code)
    if state is None:
        return None
    return FileStatus(path=rest, state=state)


def _change_id_after_colon(line: str) -> str:
    _, sep, info = line.partition(": ")
    if not sep:
        return ""
    tokens = info.split()
    return tokens[0] if tokens else ""


def parse_status(output: str) -> Status:
    status = Status()
    for raw_line in output.splitlines():
        line = raw_line.strip()
        entry = parse_status_line(line)
        if entry is not None:
            if entry.state is FileState.CONFLICTED:
                status.has_conflicts = True
            status.files.append(entry)
            continue
        if line.startswith("Working copy"):
            change_id = _change_id_after_colon(line)
            if change_id:
                status.working_copy_change_id = change_id
        elif line.startswith("Parent commit"):
            change_id = _change_id_after_colon(line)
            if change_id:
                status.parent_change_id = change_id
    return status
