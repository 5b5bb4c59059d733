"""Rebase modes and their ``jj rebase`` source flags."""

from __future__ import annotations

from enum import Enum


class RebaseMode(Enum):
    REVISION = "-r"
    SOURCE = "-s"
    BRANCH = "-b"
    INSERT_AFTER = "-A"
    INSERT_BEFORE = "-B"

    @property
    def source_flag(self) -> str:
        """Flag naming what moves (``-r``/``-s``/``-b``); insert modes move ``-r``."""
        if self in (RebaseMode.INSERT_AFTER, RebaseMode.INSERT_BEFORE):
            return "-r"
        return self.value

    @property
    def destination_flag(self) -> str:
        """Flag naming where it goes: ``-d`` or the insert flag."""
        if self in (RebaseMode.INSERT_AFTER, RebaseMode.INSERT_BEFORE):
            return self.value
        return "-d"

    @property
    def label(self) -> str:
        return {
            RebaseMode.REVISION: "revision (-r)",
            RebaseMode.SOURCE: "source + descendants (-s)",
            RebaseMode.BRANCH: "branch (-b)",
            RebaseMode.INSERT_AFTER: "insert after (-A)",
            RebaseMode.INSERT_BEFORE: "insert before (-B)",
        }[self]
