"""Operation-log entries from ``jj op log``."""

from __future__ import annotations

from dataclasses import dataclass

OPERATION_SHORT_ID_LENGTH = 12


@dataclass(frozen=True)
class Operation:
    """One entry in the engine's append-only operation history."""

    id: str
    user: str
    timestamp: str
    description: str
    is_current: bool = False

    @property
    def short_id(self) -> str:
        return self.id[:OPERATION_SHORT_ID_LENGTH]
