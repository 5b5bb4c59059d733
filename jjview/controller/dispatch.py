"""Route finished dialogs to the flow that opened them.

Dispatch is by callback group first (push, fetch, bookmark, misc) and then by
concrete callback type.
"""

from __future__ import annotations

from ..dialog import (
    Abandon,
    BookmarkCallback,
    BookmarkForget,
    BookmarkJump,
    BookmarkMoveBackwards,
    BookmarkMoveToWc,
    DeleteBookmarks,
    DialogCallback,
    DialogResult,
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
from ..model import PushBulkMode
from .base import ActionGroup
from .fetch import BRANCH_OPTION

Values = tuple[str, ...]

_BULK_MODES = {
    "all": PushBulkMode.ALL,
    "tracked": PushBulkMode.TRACKED,
    "deleted": PushBulkMode.DELETED,
}


def _first(values: Values) -> str | None:
    return values[0] if values else None


class DialogDispatcher(ActionGroup):
    def handle_key(self, key: str) -> bool:
        """Feed a key to the active dialog; return whether a dialog consumed it."""
        dialog = self.state.active_dialog
        if dialog is None:
            return False
        result = dialog.handle_key(key)
        if result is not None:
            self.handle_result(result)
        return True

    def handle_result(self, result: DialogResult) -> None:
        """Close the active dialog and run its confirm or cancel path."""
        dialog = self.state.active_dialog
        self.state.active_dialog = None
        if dialog is None:
            return
        callback = dialog.callback
        if not result.confirmed:
            self.handle_cancel(callback)
            return
        if isinstance(callback, PushCallback):
            self._handle_push(callback, result.values)
        elif isinstance(callback, FetchCallback):
            self._handle_fetch(callback, result.values)
        elif isinstance(callback, BookmarkCallback):
            self._handle_bookmark(callback, result.values)
        elif isinstance(callback, MiscCallback):
            self._handle_misc(callback, result.values)

    def handle_cancel(self, callback: DialogCallback) -> None:
        """Drop the staged data a cancelled flow would otherwise leave behind."""
        state = self.state
        if isinstance(callback, GitPush):
            state.pending_push_bookmarks = []
            state.push_target_remote = None
        elif isinstance(callback, PushCallback):
            state.push_target_remote = None
        elif isinstance(callback, BookmarkForget):
            state.pending_forget_bookmark = None

    def _handle_push(self, callback: DialogCallback, values: Values) -> None:
        push = self.ctl.push
        if isinstance(callback, GitPush):
            if values:
                push.execute(list(values))
            else:
                staged = self.state.pending_push_bookmarks
                self.state.pending_push_bookmarks = []
                push.execute(staged)
        elif isinstance(callback, GitPushChange):
            push.execute_change(callback.change_id)
        elif isinstance(callback, GitPushRemoteSelect):
            remote = _first(values)
            if remote is not None:
                self.state.push_target_remote = remote
                push.start()
        elif isinstance(callback, GitPushModeSelect):
            choice = _first(values)
            if choice == "change":
                push.start_change(callback.change_id)
            elif choice in _BULK_MODES:
                push.start_bulk(_BULK_MODES[choice])
        elif isinstance(callback, GitPushBulkConfirm):
            push.execute_bulk(callback.mode, callback.remote)
        elif isinstance(callback, GitPushRevisions):
            push.execute_revisions(callback.change_id, callback.bookmarks)
        elif isinstance(callback, GitPushMultiBookmarkMode):
            choice = _first(values)
            if choice == "revisions":
                push.start_revisions(callback.change_id, callback.bookmarks)
            elif choice == "individual":
                push.show_individual_select(callback.change_id, callback.bookmarks)

    def _handle_fetch(self, callback: DialogCallback, values: Values) -> None:
        choice = _first(values)
        if choice is None:
            return
        fetch = self.ctl.fetch
        if isinstance(callback, GitFetch):
            if choice == BRANCH_OPTION:
                fetch.start_branch_select()
            else:
                fetch.execute_with_option(choice)
        elif isinstance(callback, GitFetchBranch):
            fetch.execute_branch(choice)

    def _handle_bookmark(self, callback: DialogCallback, values: Values) -> None:
        bookmarks = self.ctl.bookmarks
        if isinstance(callback, DeleteBookmarks):
            bookmarks.execute_delete(values)
        elif isinstance(callback, MoveBookmark):
            bookmarks.execute_move(callback.name, callback.change_id)
        elif isinstance(callback, BookmarkJump):
            change_id = _first(values)
            if change_id is not None:
                bookmarks.execute_jump(change_id)
        elif isinstance(callback, BookmarkForget):
            bookmarks.execute_forget()
        elif isinstance(callback, BookmarkMoveToWc):
            bookmarks.execute_move_to_wc(callback.name)
        elif isinstance(callback, BookmarkMoveBackwards):
            bookmarks.execute_move_backwards(callback.name)

    def _handle_misc(self, callback: DialogCallback, values: Values) -> None:
        if isinstance(callback, OpRestore):
            self.ctl.changes.op_restore(callback.operation_id)
        elif isinstance(callback, Track):
            self.ctl.bookmarks.execute_track(values)
        elif isinstance(callback, Untrack):
            self.ctl.bookmarks.execute_untrack(callback.full_name)
        elif isinstance(callback, Abandon):
            self.ctl.changes.abandon(callback.change_id)
        elif isinstance(callback, Revert):
            self.ctl.changes.revert(callback.change_id)
        elif isinstance(callback, RestoreFile):
            self.ctl.changes.restore_file(callback.file_path)
        elif isinstance(callback, RestoreAll):
            self.ctl.changes.restore_all()
        elif isinstance(callback, SimplifyParents):
            self.ctl.changes.simplify_parents(callback.change_id)
        elif isinstance(callback, Parallelize):
            self.ctl.changes.parallelize(callback.from_id, callback.to_id)
