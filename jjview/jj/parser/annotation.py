"""Parser for ``jj file annotate`` output."""

from __future__ import annotations

import re

from ...model import AnnotationContent, AnnotationLine

ANNOTATE_LINE_RE = re.compile(
    r"^(\S+)\s+(.+?)\s+(\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2})\s+(\d+):\s?(.*)$"
)


def parse_annotation_line(line: str, previous_change_id: str | None) -> AnnotationLine | None:
    match = ANNOTATE_LINE_RE.match(line)
    if match is None:
        return None
    change_id, author, timestamp, line_number, content = match.groups()
    return AnnotationLine(
        change_id=change_id,
        author=author.strip(),
        timestamp=timestamp,
        line_number=int(line_number),
        content=content,
        first_in_hunk=change_id != previous_change_id,
    )


def parse_annotation(output: str, file_path: str, revision: str | None = None) -> AnnotationContent:
    """Parse annotate rows in order.

    A line starts a new hunk when its change id differs from the line above.
    Lines that do not match the annotate layout are skipped.
    """
    content = AnnotationContent(file_path=file_path, revision=revision)
    previous: str | None = None
    for line in output.splitlines():
        if not line:
            continue
        parsed = parse_annotation_line(line, previous)
        if parsed is None:
            continue
        previous = parsed.change_id
        content.lines.append(parsed)
    return content
