"""Modal dialogs and the typed callbacks that say what runs on completion."""

from .callbacks import (
    Abandon,
    BookmarkCallback,
    BookmarkForget,
    BookmarkJump,
    BookmarkMoveBackwards,
    BookmarkMoveToWc,
    DeleteBookmarks,
    DialogCallback,
    FetchCallback,
    GitFetch,
    GitFetchBranch,
    GitPush,
    GitPushBulkConfirm,
    GitPushChange,
    GitPushModeSelect,
    GitPushMultiBookmarkMode,
    GitPushRemoteSelect,
    GitPushRevisions,
    MiscCallback,
    MoveBookmark,
    OpRestore,
    Parallelize,
    PushCallback,
    RestoreAll,
    RestoreFile,
    Revert,
    SimplifyParents,
    Track,
    Untrack,
)
from .dialog import Dialog, DialogKind, DialogResult, SelectItem

__all__ = [
    "Abandon",
    "BookmarkCallback",
    "BookmarkForget",
    "BookmarkJump",
    "BookmarkMoveBackwards",
    "BookmarkMoveToWc",
    "DeleteBookmarks",
    "Dialog",
    "DialogCallback",
    "DialogKind",
    "DialogResult",
    "FetchCallback",
    "GitFetch",
    "GitFetchBranch",
    "GitPush",
    "GitPushBulkConfirm",
    "GitPushChange",
    "GitPushModeSelect",
    "GitPushMultiBookmarkMode",
    "GitPushRemoteSelect",
    "GitPushRevisions",
    "MiscCallback",
    "MoveBookmark",
    "OpRestore",
    "Parallelize",
    "PushCallback",
    "RestoreAll",
    "RestoreFile",
    "Revert",
    "SelectItem",
    "SimplifyParents",
    "Track",
    "Untrack",
]
