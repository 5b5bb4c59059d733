"""Parsers for ``jj show`` and ``jj diff`` output.

The default (color-words) format is parsed into typed diff lines with line
numbers. ``--stat`` output is kept as plain context rows and ``--git`` output
is classified by its unified-diff prefixes.
"""

from __future__ import annotations

from ...model import DiffContent, DiffLine, DiffLineKind, FileOperation

COMMIT_ID_PREFIX = "Commit ID: "
AUTHOR_PREFIX = "Author   : "
SKIPPED_HEADER_PREFIXES = ("Change ID: ", "Committer: ", "Bookmarks: ", "Tags     : ")
DESCRIPTION_INDENT = "    "
NO_CHANGES_LABEL = "(no changes)"

FILE_HEADER_PATTERNS: tuple[tuple[str, FileOperation], ...] = (
    ("Added regular file ", FileOperation.ADDED),
    ("Removed regular file ", FileOperation.DELETED),
    ("Deleted regular file ", FileOperation.DELETED),
    ("Modified regular file ", FileOperation.MODIFIED),
    ("Renamed regular file ", FileOperation.MODIFIED),
    ("Copied regular file ", FileOperation.ADDED),
    ("Created conflict in ", FileOperation.MODIFIED),
    ("Resolved conflict in ", FileOperation.MODIFIED),
)


def parse_author_line(line: str) -> tuple[str, str]:
    """Split ``Name <email> (timestamp)`` into author and timestamp."""
    start = line.rfind("(")
    end = line.rfind(")")
    if start != -1 and end > start:
        return line[:start].strip(), line[start + 1 : end]
    return line.strip(), ""


def extract_file_info(line: str) -> tuple[str, FileOperation] | None:
    """Return ``(path, operation)`` when ``line`` is a file header."""
    for prefix, operation in FILE_HEADER_PATTERNS:
        if line.startswith(prefix):
            path = line[len(prefix) :]
            if path.endswith(":"):
                path = path[:-1]
            return path, operation
    return None


def _parse_int(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        return None


def parse_line_numbers(column: str) -> tuple[int | None, int | None]:
    """Read the ``old new`` number column that precedes a diff line.

    With a single number, heavy left padding means the old column was blank,
    so the number belongs to the new side.
    """
    parts = column.split()
    if not parts:
        return None, None
    if len(parts) == 1:
        number = _parse_int(parts[0])
        leading = len(column) - len(column.lstrip())
        if leading > len(column) // 2:
            return None, number
        return number, None
    return _parse_int(parts[0]), _parse_int(parts[1])


def _kind_from_numbers(operation: FileOperation, numbers: tuple[int | None, int | None]) -> DiffLineKind:
    if operation is FileOperation.ADDED:
        return DiffLineKind.ADDED
    if operation is FileOperation.DELETED:
        return DiffLineKind.DELETED
    old, new = numbers
    if old is not None and new is None:
        return DiffLineKind.DELETED
    if old is None and new is not None:
        return DiffLineKind.ADDED
    return DiffLineKind.CONTEXT


def parse_diff_line(line: str, operation: FileOperation) -> DiffLine | None:
    """Parse one ``  12   13: text`` row; rows without a colon are ignored."""
    column, sep, content = line.partition(":")
    if not sep:
        return None
    numbers = parse_line_numbers(column)
    stripped = content.lstrip()
    if stripped.startswith("+ "):
        return DiffLine(DiffLineKind.ADDED, stripped[2:], numbers)
    if stripped.startswith("- "):
        return DiffLine(DiffLineKind.DELETED, stripped[2:], numbers)
    if stripped == "+":
        return DiffLine(DiffLineKind.ADDED, "", numbers)
    if stripped == "-":
        return DiffLine(DiffLineKind.DELETED, "", numbers)
    # One space separates the number column from the text.
    if content.startswith(" "):
        content = content[1:]
    return DiffLine(_kind_from_numbers(operation, numbers), content, numbers)


def _join_description(lines: list[str]) -> str:
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def _parse_header(lines: list[str]) -> tuple[DiffContent, int]:
    """Fill commit metadata from the leading header; return the body start index."""
    content = DiffContent()
    description: list[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if line.startswith(COMMIT_ID_PREFIX):
            content.commit_id = line[len(COMMIT_ID_PREFIX) :].strip()
        elif line.startswith(AUTHOR_PREFIX):
            content.author, content.timestamp = parse_author_line(line[len(AUTHOR_PREFIX) :])
        elif line.startswith(SKIPPED_HEADER_PREFIXES):
            pass
        elif not line:
            if description:
                description.append("")
        elif line.startswith(DESCRIPTION_INDENT):
            description.append(line.lstrip())
        else:
            break
        index += 1
    content.description = _join_description(description)
    return content, index


def _append_word_diff(content: DiffContent, lines: list[str]) -> None:
    operation = FileOperation.MODIFIED
    file_count = 0
    for line in lines:
        info = extract_file_info(line)
        if info is not None:
            path, operation = info
            if file_count:
                content.lines.append(DiffLine.separator())
            content.lines.append(DiffLine.file_header(path))
            file_count += 1
            continue
        if not file_count:
            continue
        parsed = parse_diff_line(line, operation)
        if parsed is not None:
            content.lines.append(parsed)


def parse_show(output: str) -> DiffContent:
    """Parse default-format ``jj show`` output (header, description, diff)."""
    lines = output.splitlines()
    content, body_start = _parse_header(lines)
    _append_word_diff(content, lines[body_start:])
    return content


def parse_diff_body(output: str) -> DiffContent:
    """Parse default-format ``jj diff`` output, which has no commit header."""
    content = DiffContent()
    _append_word_diff(content, output.splitlines())
    return content


def _append_stat(content: DiffContent, lines: list[str]) -> None:
    if not "\n".join(lines).strip():
        content.lines.append(DiffLine(DiffLineKind.CONTEXT, NO_CHANGES_LABEL))
        return
    content.lines.extend(DiffLine(DiffLineKind.CONTEXT, line) for line in lines)


def parse_show_stat(output: str) -> DiffContent:
    lines = output.splitlines()
    content, body_start = _parse_header(lines)
    _append_stat(content, lines[body_start:])
    return content


def parse_diff_body_stat(output: str) -> DiffContent:
    content = DiffContent()
    _append_stat(content, output.splitlines())
    return content


def _git_header_path(rest: str) -> str:
    marker = rest.find(" b/")
    return rest[marker + 3 :] if marker != -1 else rest


def _append_git(content: DiffContent, lines: list[str]) -> None:
    file_count = 0
    for line in lines:
        if line.startswith("diff --git "):
            if file_count:
                content.lines.append(DiffLine.separator())
            content.lines.append(DiffLine.file_header(_git_header_path(line[len("diff --git ") :])))
            file_count += 1
        elif line.startswith(("index ", "--- ", "+++ ")):
            continue
        elif line.startswith("@@ "):
            content.lines.append(DiffLine(DiffLineKind.CONTEXT, line))
        elif line.startswith("+"):
            content.lines.append(DiffLine(DiffLineKind.ADDED, line[1:]))
        elif line.startswith("-"):
            content.lines.append(DiffLine(DiffLineKind.DELETED, line[1:]))
        else:
            content.lines.append(DiffLine(DiffLineKind.CONTEXT, line[1:] if line.startswith(" ") else line))


def parse_show_git(output: str) -> DiffContent:
    lines = output.splitlines()
    content, body_start = _parse_header(lines)
    _append_git(content, lines[body_start:])
    return content


def parse_diff_body_git(output: str) -> DiffContent:
    content = DiffContent()
    _append_git(content, output.splitlines())
    return content
