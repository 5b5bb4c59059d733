"""Conflicted files reported by ``jj resolve --list``."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConflictFile:
    path: str
    description: str
    sides: int | None = None
