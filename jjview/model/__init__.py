"""Structured records produced by the ``jj`` output parsers."""

from .annotation import AnnotationContent, AnnotationLine
from .bookmark import Bookmark, BookmarkInfo
from .change import NO_DESCRIPTION_LABEL, ROOT_CHANGE_ID, Change
from .conflict import ConflictFile
from .diff import DiffContent, DiffDisplayFormat, DiffLine, DiffLineKind, FileOperation
from .evolog import EvologEntry
from .notification import NOTIFICATION_TTL_SECONDS, Notification, NotificationKind
from .operation import Operation
from .push import (
    PushActionKind,
    PushBulkMode,
    PushPreviewAction,
    PushPreviewResult,
    PushPreviewStatus,
)
from .rebase import RebaseMode
from .status import FileState, FileStatus, Status

__all__ = [
    "AnnotationContent",
    "AnnotationLine",
    "Bookmark",
    "BookmarkInfo",
    "Change",
    "ConflictFile",
    "DiffContent",
    "DiffDisplayFormat",
    "DiffLine",
    "DiffLineKind",
    "EvologEntry",
    "FileOperation",
    "FileState",
    "FileStatus",
    "NO_DESCRIPTION_LABEL",
    "NOTIFICATION_TTL_SECONDS",
    "Notification",
    "NotificationKind",
    "Operation",
    "PushActionKind",
    "PushBulkMode",
    "PushPreviewAction",
    "PushPreviewResult",
    "PushPreviewStatus",
    "ROOT_CHANGE_ID",
    "RebaseMode",
    "Status",
]
