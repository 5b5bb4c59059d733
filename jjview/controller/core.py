"""Action controller: runs ``jj`` commands and keeps views consistent.

Every mutation ends in exactly one outcome: a notification, an error banner,
or a follow-up dialog. Successful mutations mark the views they touched dirty
and only the visible dirty views are re-read right away; the others are
re-read when the user switches to them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext

from ..cache import DirtyFlags
from ..clipboard import copy_text_to_clipboard
from ..dialog import Dialog
from ..jj import JjError, JjExecutor
from ..model import Notification
from ..state import TAB_ORDER, AppState, View
from .bookmarks import BookmarkActions
from .changes import ChangeActions
from .conflicts import ConflictActions
from .dispatch import DialogDispatcher
from .fetch import FetchActions
from .navigation import NavigationActions
from .preview import PreviewActions
from .push import PushActions

logger = logging.getLogger(__name__)

SuspendFactory = Callable[[], AbstractContextManager[object]]


class ActionController:
    """Owns every user-triggered flow over one ``AppState`` and one executor."""

    def __init__(
        self,
        state: AppState,
        jj: JjExecutor,
        suspend: SuspendFactory | None = None,
        copy_text: Callable[[str], bool] | None = None,
    ) -> None:
        self.state = state
        self.jj = jj
        # Interactive jj commands run inside this context with the TUI released.
        self.suspend: SuspendFactory = suspend if suspend is not None else nullcontext
        self.copy_text = copy_text if copy_text is not None else copy_text_to_clipboard
        self.bookmarks = BookmarkActions(self)
        self.push = PushActions(self)
        self.fetch = FetchActions(self)
        self.changes = ChangeActions(self)
        self.conflicts = ConflictActions(self)
        self.navigation = NavigationActions(self)
        self.preview = PreviewActions(self)
        self.dialogs = DialogDispatcher(self)

    # Outcome reporting

    def notify_success(self, message: str) -> None:
        self.state.notification = Notification.success(message)

    def notify_info(self, message: str) -> None:
        self.state.notification = Notification.info(message)

    def notify_warning(self, message: str) -> None:
        self.state.notification = Notification.warning(message)

    def set_error(self, message: str) -> None:
        logger.info("%s", message)
        self.state.error_message = message

    def clear_expired_notification(self, now: float | None = None) -> bool:
        """Drop the notification once it has been shown long enough."""
        notification = self.state.notification
        if notification is not None and notification.is_expired(now):
            self.state.notification = None
            return True
        return False

    def run_jj_action(
        self,
        call: Callable[[], object],
        err_prefix: str,
        success_msg: str,
        dirty: DirtyFlags,
    ) -> bool:
        """Run one mutation; notify and refresh on success, set the banner on failure."""
        try:
            call()
        except JjError as exc:
            self.set_error(f"{err_prefix}: {exc}")
            return False
        self.notify_success(success_msg)
        self.mark_dirty_and_refresh_current(dirty)
        return True

    def open_dialog(self, dialog: Dialog) -> None:
        self.state.active_dialog = dialog

    # Dirty tracking

    def mark_dirty_and_refresh_current(self, flags: DirtyFlags) -> None:
        """Record ``flags`` and re-read the dirty views that are on screen."""
        self.state.dirty_flags.merge(flags)
        self.refresh_dirty_views()

    def refresh_dirty_views(self) -> None:
        """Re-read the log when dirty, and any other dirty view that is current.

        The log backs the preview and every change lookup, so it is refreshed
        regardless of the current view.
        """
        flags = self.state.dirty_flags
        current = self.state.current_view
        if flags.log:
            self.refresh_log(self.state.log.current_revset)
        if flags.status and current is View.STATUS:
            self.refresh_status()
        if flags.op_log and current is View.OPERATION:
            self.refresh_op_log()
        if flags.bookmarks and current is View.BOOKMARK:
            self.refresh_bookmarks()

    def refresh_log(self, revset: str | None = None) -> bool:
        """Reload the log for ``revset``; keeps the previous rows on failure."""
        log = self.state.log
        try:
            changes = self.jj.log(revset, log.reversed)
        except JjError as exc:
            self.set_error(f"jj error: {exc}")
            return False
        log.set_changes(changes)
        log.current_revset = revset
        self.state.dirty_flags.log = False
        self.state.preview_cache.validate(changes)
        pending = self.state.preview_pending_id
        if pending is not None and log.find_change(pending) is None:
            self.state.preview_pending_id = None
        return True

    def refresh_status(self) -> bool:
        try:
            status = self.jj.status()
        except JjError as exc:
            self.set_error(f"jj status error: {exc}")
            return False
        self.state.status.set_status(status)
        self.state.dirty_flags.status = False
        return True

    def refresh_op_log(self) -> bool:
        try:
            operations = self.jj.op_log()
        except JjError as exc:
            self.set_error(f"jj op log error: {exc}")
            return False
        self.state.operations.set_operations(operations)
        self.state.dirty_flags.op_log = False
        return True

    def refresh_bookmarks(self) -> bool:
        try:
            infos = self.jj.bookmark_list_with_info()
        except JjError as exc:
            self.set_error(f"Failed to list bookmarks: {exc}")
            return False
        self.state.bookmarks.set_bookmarks(infos)
        self.state.dirty_flags.bookmarks = False
        return True

    def execute_refresh(self) -> None:
        """Explicit reload of whatever is on screen."""
        self.navigation.refresh_current_view()

    # View switching

    def go_to_view(self, view: View) -> None:
        """Switch views, remembering where we came from.

        Status and the operation history are always re-read on entry; the
        bookmark list only when it is dirty.
        """
        state = self.state
        if state.current_view is view:
            return
        state.previous_view = state.current_view
        state.current_view = view
        if view is View.STATUS:
            self.refresh_status()
        elif view is View.OPERATION:
            self.refresh_op_log()
        elif view is View.BOOKMARK and state.dirty_flags.bookmarks:
            self.refresh_bookmarks()

    def go_back(self) -> None:
        state = self.state
        state.current_view = state.previous_view if state.previous_view is not None else View.LOG
        state.previous_view = None
        self.refresh_dirty_views()

    def next_view(self) -> None:
        current = self.state.current_view
        if current in TAB_ORDER:
            target = TAB_ORDER[(TAB_ORDER.index(current) + 1) % len(TAB_ORDER)]
        else:
            target = View.LOG
        if target is View.BOOKMARK:
            self.navigation.open_bookmark_view()
        else:
            self.go_to_view(target)

    def quit(self) -> None:
        self.state.should_quit = True

    # Preview hooks for the loop

    def update_preview_if_needed(self) -> None:
        self.preview.update_if_needed()

    def resolve_pending_preview(self) -> bool:
        """Idle work: fetch at most one deferred preview."""
        return self.preview.resolve_pending()
