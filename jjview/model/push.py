"""Push preview records parsed from ``jj git push --dry-run``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PushActionKind(Enum):
    MOVE_FORWARD = "move forward"
    MOVE_SIDEWAYS = "move sideways"
    MOVE_BACKWARD = "move backward"
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class PushPreviewAction:
    """Planned ref update; ``from_hash``/``to_hash`` are ``None`` where not applicable."""

    kind: PushActionKind
    bookmark: str
    from_hash: str | None = None
    to_hash: str | None = None

    @property
    def is_force(self) -> bool:
        """Anything other than a fast-forward, add, or delete rewrites remote history."""
        return self.kind not in (PushActionKind.MOVE_FORWARD, PushActionKind.ADD, PushActionKind.DELETE)


class PushPreviewStatus(Enum):
    CHANGES = "changes"
    NOTHING_CHANGED = "nothing_changed"
    UNPARSED = "unparsed"


@dataclass(frozen=True)
class PushPreviewResult:
    status: PushPreviewStatus
    actions: tuple[PushPreviewAction, ...] = field(default_factory=tuple)

    @classmethod
    def nothing_changed(cls) -> PushPreviewResult:
        return cls(PushPreviewStatus.NOTHING_CHANGED)

    @classmethod
    def unparsed(cls) -> PushPreviewResult:
        return cls(PushPreviewStatus.UNPARSED)

    @classmethod
    def changes(cls, actions: list[PushPreviewAction]) -> PushPreviewResult:
        return cls(PushPreviewStatus.CHANGES, tuple(actions))


class PushBulkMode(Enum):
    ALL = "all"
    TRACKED = "tracked"
    DELETED = "deleted"

    @property
    def flag(self) -> str:
        return f"--{self.value}"

    @property
    def label(self) -> str:
        return {
            PushBulkMode.ALL: "all bookmarks",
            PushBulkMode.TRACKED: "tracked bookmarks",
            PushBulkMode.DELETED: "deleted bookmarks",
        }[self]
