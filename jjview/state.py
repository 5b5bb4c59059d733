"""Single mutable application state shared by the loop, controller and renderer.

The loop is single-threaded, so every field has exactly one writer at a time.
The loop writes ``last_frame_height`` and the scroll offsets; renderers only read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .cache import DirtyFlags, PreviewCache
from .dialog import Dialog
from .jj.constants import DEFAULT_PROTECTED_BOOKMARKS
from .model import Notification
from .view_state import (
    BlameViewState,
    BookmarkViewState,
    DiffViewState,
    EvologViewState,
    LogViewState,
    OperationViewState,
    ResolveViewState,
    StatusViewState,
)


class View(Enum):
    LOG = "log"
    DIFF = "diff"
    STATUS = "status"
    OPERATION = "operation"
    BLAME = "blame"
    BOOKMARK = "bookmark"
    RESOLVE = "resolve"
    EVOLOG = "evolog"
    HELP = "help"


# Tab cycles through these; the others are reached from a selection.
TAB_ORDER: tuple[View, ...] = (View.LOG, View.STATUS, View.BOOKMARK, View.OPERATION)


class PromptKind(Enum):
    REVSET = "revset"
    SEARCH = "search"
    DESCRIBE = "describe"
    BOOKMARK_NAME = "bookmark_name"
    RENAME = "rename"
    COMMIT = "commit"


@dataclass
class PromptState:
    """One-line text input shown in the footer."""

    kind: PromptKind
    label: str
    buffer: str = ""
    target: str | None = None


@dataclass
class AppState:
    current_view: View = View.LOG
    previous_view: View | None = None
    log: LogViewState = field(default_factory=LogViewState)
    status: StatusViewState = field(default_factory=StatusViewState)
    operations: OperationViewState = field(default_factory=OperationViewState)
    bookmarks: BookmarkViewState = field(default_factory=BookmarkViewState)
    diff_view: DiffViewState | None = None
    blame_view: BlameViewState | None = None
    resolve_view: ResolveViewState | None = None
    evolog_view: EvologViewState | None = None
    help_scroll: int = 0
    dirty_flags: DirtyFlags = field(default_factory=DirtyFlags)
    preview_enabled: bool = True
    preview_cache: PreviewCache = field(default_factory=PreviewCache)
    preview_pending_id: str | None = None
    active_dialog: Dialog | None = None
    prompt: PromptState | None = None
    notification: Notification | None = None
    error_message: str | None = None
    pending_jump_change_id: str | None = None
    pending_push_bookmarks: list[str] = field(default_factory=list)
    push_target_remote: str | None = None
    pending_forget_bookmark: str | None = None
    protected_bookmarks: tuple[str, ...] = DEFAULT_PROTECTED_BOOKMARKS
    default_revset: str | None = None
    last_frame_height: int = 24
    dirty: bool = True
    skip_next_lf: bool = False
    should_quit: bool = False
