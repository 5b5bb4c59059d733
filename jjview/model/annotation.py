"""Blame (``jj file annotate``) lines for one file."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..text import truncate_text

CONTINUATION_MARKER = "│"


@dataclass(frozen=True)
class AnnotationLine:
    """Attributed source line.

    ``first_in_hunk`` is false for lines that share attribution with the line
    above; renderers draw a continuation marker instead of repeating metadata.
    """

    change_id: str
    author: str
    timestamp: str
    line_number: int
    content: str
    first_in_hunk: bool = True

    def short_timestamp(self) -> str:
        """Return ``MM-DD`` from a ``YYYY-MM-DD HH:MM:SS`` timestamp."""
        date = self.timestamp.split()[0] if self.timestamp.strip() else ""
        parts = date.split("-")
        if len(parts) == 3:
            return f"{parts[1]}-{parts[2]}"
        return self.timestamp[:5]

    def short_author(self, max_len: int) -> str:
        """Return author clipped to ``max_len`` characters with a ``…`` marker."""
        if len(self.author) <= max_len:
            return self.author
        if max_len <= 1:
            return self.author[:max_len]
        return self.author[: max_len - 1] + "…"


@dataclass
class AnnotationContent:
    file_path: str
    revision: str | None = None
    lines: list[AnnotationLine] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def title(self, max_len: int = 60) -> str:
        label = self.file_path if self.revision is None else f"{self.file_path} @ {self.revision}"
        return truncate_text(label, max_len)
