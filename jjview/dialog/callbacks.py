"""Typed completion callbacks carried by dialogs.

Each dialog purpose is one frozen dataclass holding exactly the data its
handler needs. The four base classes group callbacks by the controller
domain that dispatches them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..model import PushBulkMode


class DialogCallback:
    """Marker base for every dialog callback."""


class PushCallback(DialogCallback):
    pass


class FetchCallback(DialogCallback):
    pass


class BookmarkCallback(DialogCallback):
    pass


class MiscCallback(DialogCallback):
    pass


# Push


@dataclass(frozen=True)
class GitPush(PushCallback):
    """Push the confirmed values, or the staged bookmark list when none were selected."""


@dataclass(frozen=True)
class GitPushChange(PushCallback):
    change_id: str


@dataclass(frozen=True)
class GitPushRemoteSelect(PushCallback):
    pass


@dataclass(frozen=True)
class GitPushModeSelect(PushCallback):
    change_id: str


@dataclass(frozen=True)
class GitPushBulkConfirm(PushCallback):
    mode: PushBulkMode
    remote: str | None = None


@dataclass(frozen=True)
class GitPushRevisions(PushCallback):
    change_id: str
    bookmarks: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class GitPushMultiBookmarkMode(PushCallback):
    change_id: str
    bookmarks: tuple[str, ...] = field(default_factory=tuple)


# Fetch


@dataclass(frozen=True)
class GitFetch(FetchCallback):
    pass


@dataclass(frozen=True)
class GitFetchBranch(FetchCallback):
    pass


# Bookmarks


@dataclass(frozen=True)
class DeleteBookmarks(BookmarkCallback):
    pass


@dataclass(frozen=True)
class MoveBookmark(BookmarkCallback):
    name: str
    change_id: str


@dataclass(frozen=True)
class BookmarkJump(BookmarkCallback):
    pass


@dataclass(frozen=True)
class BookmarkForget(BookmarkCallback):
    """Forget the bookmark staged in ``pending_forget_bookmark``."""


@dataclass(frozen=True)
class BookmarkMoveToWc(BookmarkCallback):
    name: str


@dataclass(frozen=True)
class BookmarkMoveBackwards(BookmarkCallback):
    name: str


# Misc


@dataclass(frozen=True)
class OpRestore(MiscCallback):
    operation_id: str


@dataclass(frozen=True)
class Track(MiscCallback):
    pass


@dataclass(frozen=True)
class Untrack(MiscCallback):
    full_name: str


@dataclass(frozen=True)
class Abandon(MiscCallback):
    change_id: str


@dataclass(frozen=True)
class Revert(MiscCallback):
    change_id: str


@dataclass(frozen=True)
class RestoreFile(MiscCallback):
    file_path: str


@dataclass(frozen=True)
class RestoreAll(MiscCallback):
    pass


@dataclass(frozen=True)
class SimplifyParents(MiscCallback):
    change_id: str


@dataclass(frozen=True)
class Parallelize(MiscCallback):
    """Turn the linear chain ``from_id::to_id`` into siblings."""

    from_id: str
    to_id: str
