"""Change rows parsed from the ``jj log`` graph.

A change is one row of the flat, pre-rendered log graph. Rows that only carry
connector glyphs are kept for display continuity but flagged ``is_graph_only``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ROOT_CHANGE_ID = "zzzzzzzz"
NO_DESCRIPTION_LABEL = "(no description set)"


@dataclass
class Change:
    """One log-graph row: a change record or a graph-only connector line."""

    change_id: str = ""
    commit_id: str = ""
    author: str = ""
    timestamp: str = ""
    description: str = ""
    bookmarks: list[str] = field(default_factory=list)
    is_working_copy: bool = False
    is_empty: bool = False
    has_conflict: bool = False
    graph_prefix: str = ""
    is_graph_only: bool = False

    @classmethod
    def graph_only(cls, prefix: str) -> Change:
        """Build a connector-only row carrying no change identity."""
        return cls(graph_prefix=prefix, is_graph_only=True)

    @property
    def display_description(self) -> str:
        """Return description text, or a placeholder when it is empty."""
        return self.description if self.description else NO_DESCRIPTION_LABEL

    @property
    def is_root(self) -> bool:
        return self.change_id == ROOT_CHANGE_ID

    def short_id(self, length: int = 8) -> str:
        """Return the first ``length`` characters of the change id."""
        return self.change_id[:length]

    def matches_query(self, query: str) -> bool:
        """Case-insensitive match on id, author, description, and bookmarks."""
        if self.is_graph_only or not query:
            return False
        needle = query.lower()
        haystacks = (self.change_id, self.commit_id, self.author, self.description, *self.bookmarks)
        return any(needle in item.lower() for item in haystacks)
