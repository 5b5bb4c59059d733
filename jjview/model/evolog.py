"""Rewrite history entries for one change (``jj evolog``)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EvologEntry:
    """One historical commit of a change; lists are ordered newest first."""

    commit_id: str
    change_id: str
    author: str
    timestamp: str
    is_empty: bool
    description: str
