"""Key routing for every view.

Order of precedence for one key: an open dialog, then an open prompt, then
the global shortcuts (Ctrl+C, Ctrl+R, Ctrl+L), then log sub-modes, then the
view-independent keys, and finally the current view's own table.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..controller import ActionController
from ..model import Change, FileState, RebaseMode
from ..render.help import help_line_count
from ..state import PromptKind, View
from ..view_state import ListCursor, LogMode
from .key_registry import KeyComboBinding, KeyComboRegistry
from .prompt import BOOKMARK_LABEL, REVSET_LABEL, SEARCH_LABEL, handle_prompt_key, open_prompt

logger = logging.getLogger(__name__)

DOWN_KEYS = ("j", "DOWN")
UP_KEYS = ("k", "UP")
TOP_KEYS = ("g", "HOME")
BOTTOM_KEYS = ("G", "END")
HALF_PAGE_DOWN_KEYS = ("CTRL_D", "PAGE_DOWN")
HALF_PAGE_UP_KEYS = ("CTRL_U", "PAGE_UP")

REBASE_MODE_KEYS = {
    "r": RebaseMode.REVISION,
    "s": RebaseMode.SOURCE,
    "b": RebaseMode.BRANCH,
    "A": RebaseMode.INSERT_AFTER,
    "B": RebaseMode.INSERT_BEFORE,
}


class KeyRouter:
    """Turn key tokens into controller calls for the current view."""

    def __init__(self, ctl: ActionController) -> None:
        self.ctl = ctl
        self.state = ctl.state
        self._view_tables: dict[View, KeyComboRegistry] = {
            View.LOG: self._log_table(),
            View.STATUS: self._status_table(),
            View.DIFF: self._diff_table(),
            View.OPERATION: self._operation_table(),
            View.BOOKMARK: self._bookmark_table(),
            View.BLAME: self._blame_table(),
            View.RESOLVE: self._resolve_table(),
            View.EVOLOG: self._evolog_table(),
            View.HELP: self._help_table(),
        }
        self._global_table = self._global_bindings()
        self._destination_table = self._destination_select_table()

    # Entry point

    def handle_key(self, key: str) -> None:
        state = self.state
        ctl = self.ctl
        state.dirty = True
        view = state.current_view
        if not (view is View.BLAME and key == "J"):
            ctl.navigation.clear_pending_jump()
        if ctl.dialogs.handle_key(key):
            return

        state.error_message = None
        ctl.clear_expired_notification()

        if key == "CTRL_C":
            ctl.quit()
            return
        if state.prompt is not None:
            handle_prompt_key(ctl, key)
            return

        in_log_mode = view is View.LOG and state.log.mode != LogMode.NORMAL
        if key == "CTRL_R" and view is View.LOG and not in_log_mode:
            state.notification = None
            ctl.changes.redo()
            return
        if key == "CTRL_L" and not in_log_mode:
            ctl.execute_refresh()
            return
        if in_log_mode:
            self._handle_log_mode_key(key)
            self._after_log_key()
            return

        if self._global_table.dispatch(key):
            return
        table = self._view_tables.get(state.current_view)
        if table is not None and table.dispatch(key):
            if view is View.LOG:
                self._after_log_key()
            return
        logger.debug("unbound key %r in %s view", key, view.value)

    def _after_log_key(self) -> None:
        if self.state.preview_enabled and self.state.current_view is View.LOG:
            self.ctl.update_preview_if_needed()

    # Helpers shared by the tables

    def _selected(self) -> Change | None:
        return self.state.log.selected_change()

    def _with_selected(self, action: Callable[[Change], object]) -> Callable[[], None]:
        def run() -> None:
            change = self._selected()
            if change is not None:
                action(change)

        return run

    def _half_page(self) -> int:
        return max(1, self.state.last_frame_height // 2)

    def _list_bindings(
        self,
        cursor: Callable[[], ListCursor | None],
        size: Callable[[], int],
    ) -> list[KeyComboBinding]:
        """j/k/g/G and half-page moves over a plain list view."""

        def move(delta: int) -> None:
            current = cursor()
            if current is not None:
                current.move_within(delta, size())

        def top() -> None:
            current = cursor()
            if current is not None:
                current.to_top()

        def bottom() -> None:
            current = cursor()
            if current is not None:
                current.to_bottom(size())

        return [
            KeyComboBinding(DOWN_KEYS, lambda: move(1)),
            KeyComboBinding(UP_KEYS, lambda: move(-1)),
            KeyComboBinding(TOP_KEYS, top),
            KeyComboBinding(BOTTOM_KEYS, bottom),
            KeyComboBinding(HALF_PAGE_DOWN_KEYS, lambda: move(self._half_page())),
            KeyComboBinding(HALF_PAGE_UP_KEYS, lambda: move(-self._half_page())),
        ]

    # Global

    def _global_bindings(self) -> KeyComboRegistry:
        ctl = self.ctl
        state = self.state

        def leave_view() -> None:
            if state.current_view is View.RESOLVE:
                ctl.navigation.close_resolve_view()
            else:
                ctl.go_back()

        def quit_or_back() -> None:
            if state.current_view is View.LOG:
                ctl.quit()
            else:
                leave_view()

        def back() -> None:
            if state.current_view is not View.LOG:
                leave_view()

        def status_view() -> bool:
            if state.current_view is not View.LOG:
                return False
            ctl.go_to_view(View.STATUS)
            return True

        def undo() -> bool:
            if state.current_view not in (View.LOG, View.BOOKMARK):
                return False
            state.notification = None
            ctl.changes.undo()
            return True

        def operation_history() -> bool:
            if state.current_view is not View.LOG:
                return False
            ctl.navigation.open_operation_history()
            return True

        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("q",), quit_or_back),
            KeyComboBinding(("ESC",), back),
            KeyComboBinding(("?",), ctl.navigation.open_help),
            KeyComboBinding(("TAB",), ctl.next_view),
            KeyComboBinding(("s",), status_view),
            KeyComboBinding(("u",), undo),
            KeyComboBinding(("o",), operation_history),
        )

    # Log

    def _log_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        log = self.state.log
        nav = ctl.navigation
        changes = ctl.changes
        bookmarks = ctl.bookmarks

        def revset_prompt() -> None:
            open_prompt(ctl, PromptKind.REVSET, REVSET_LABEL, log.current_revset or "")

        def search_prompt() -> None:
            open_prompt(ctl, PromptKind.SEARCH, SEARCH_LABEL)

        def bookmark_prompt(change: Change) -> None:
            open_prompt(ctl, PromptKind.BOOKMARK_NAME, BOOKMARK_LABEL, "", change.change_id)

        def new_from(change: Change) -> None:
            if change.is_working_copy:
                ctl.notify_info("Use 'c' to create from current change")
            else:
                changes.new_change_from(change)

        def half_page(delta: int) -> None:
            log.move_by(delta)

        return KeyComboRegistry().register_bindings(
            KeyComboBinding(DOWN_KEYS, lambda: log.move_by(1)),
            KeyComboBinding(UP_KEYS, lambda: log.move_by(-1)),
            KeyComboBinding(TOP_KEYS, log.move_to_top),
            KeyComboBinding(BOTTOM_KEYS, log.move_to_bottom),
            KeyComboBinding(HALF_PAGE_DOWN_KEYS, lambda: half_page(self._half_page())),
            KeyComboBinding(HALF_PAGE_UP_KEYS, lambda: half_page(-self._half_page())),
            KeyComboBinding(("ENTER",), self._with_selected(lambda c: nav.open_diff(c.change_id))),
            KeyComboBinding(("r",), revset_prompt),
            KeyComboBinding(("/",), search_prompt),
            KeyComboBinding(("n",), lambda: nav.search(forward=True)),
            KeyComboBinding(("N",), lambda: nav.search(forward=False)),
            KeyComboBinding(("p",), ctl.preview.toggle),
            KeyComboBinding(("~",), nav.toggle_reversed),
            KeyComboBinding(("M",), nav.open_bookmark_view),
            KeyComboBinding(("y",), nav.copy_change_id),
            KeyComboBinding(("v",), self._with_selected(lambda c: nav.open_evolog(c.change_id))),
            KeyComboBinding(
                ("X",),
                self._with_selected(lambda c: nav.open_resolve_view(c.change_id, c.is_working_copy)),
            ),
            KeyComboBinding(("d",), self._with_selected(lambda c: changes.start_describe_input(c.change_id))),
            KeyComboBinding(("E",), self._with_selected(lambda c: changes.describe_external(c.change_id))),
            KeyComboBinding(("e",), self._with_selected(lambda c: changes.edit(c.change_id))),
            KeyComboBinding(("c",), changes.new_change),
            KeyComboBinding(("C",), self._with_selected(new_from)),
            KeyComboBinding(("S",), changes.start_squash),
            KeyComboBinding(("A",), changes.start_abandon),
            KeyComboBinding(("x",), self._with_selected(changes.split)),
            KeyComboBinding(("Y",), self._with_selected(lambda c: changes.duplicate(c.change_id))),
            KeyComboBinding(("V",), changes.start_revert),
            KeyComboBinding(("]",), changes.next),
            KeyComboBinding(("[",), changes.prev),
            KeyComboBinding(("a",), changes.absorb),
            KeyComboBinding(("R",), changes.start_rebase),
            KeyComboBinding(("I",), self._with_selected(lambda c: changes.diffedit(c.change_id))),
            KeyComboBinding(("z",), changes.start_simplify_parents),
            KeyComboBinding(("|",), changes.start_parallelize),
            KeyComboBinding(("b",), self._with_selected(bookmark_prompt)),
            KeyComboBinding(("D",), bookmarks.start_delete),
            KeyComboBinding(("T",), bookmarks.start_track),
            KeyComboBinding(("B",), bookmarks.start_jump),
            KeyComboBinding(("f",), ctl.fetch.start),
            KeyComboBinding(("P",), ctl.push.start),
        )

    def _destination_select_table(self) -> KeyComboRegistry:
        log = self.state.log
        changes = self.ctl.changes
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(DOWN_KEYS, lambda: log.move_by(1)),
            KeyComboBinding(UP_KEYS, lambda: log.move_by(-1)),
            KeyComboBinding(TOP_KEYS, log.move_to_top),
            KeyComboBinding(BOTTOM_KEYS, log.move_to_bottom),
            KeyComboBinding(("ENTER",), changes.confirm_destination),
            KeyComboBinding(("ESC", "q"), changes.cancel_mode),
        )

    def _handle_log_mode_key(self, key: str) -> None:
        """Keys while a rebase or squash is waiting for a mode or destination."""
        log = self.state.log
        changes = self.ctl.changes
        if log.mode == LogMode.REBASE_MODE_SELECT:
            if key in REBASE_MODE_KEYS:
                changes.choose_rebase_mode(REBASE_MODE_KEYS[key])
            elif key == "S":
                changes.toggle_skip_emptied()
            elif key in ("ESC", "q"):
                changes.cancel_mode()
            return
        self._destination_table.dispatch(key)

    # Status

    def _status_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        status_view = self.state.status

        def open_file_diff() -> None:
            path = status_view.selected_path()
            if path is None:
                return
            change_id = status_view.status.working_copy_change_id or "@"
            ctl.navigation.open_diff(change_id, path)

        def open_blame() -> None:
            path = status_view.selected_path()
            if path is not None:
                ctl.navigation.open_blame(path)

        def commit_prompt() -> None:
            ctl.changes.start_commit_input()

        def restore_file() -> None:
            path = status_view.selected_path()
            if path is not None:
                ctl.changes.start_restore_file(path)

        def diffedit_file() -> None:
            path = status_view.selected_path()
            if path is not None:
                ctl.changes.diffedit("@", path)

        def jump_to_conflict() -> None:
            files = status_view.status.files
            count = len(files)
            for offset in range(1, count + 1):
                idx = (status_view.selected_index + offset) % count
                if files[idx].state is FileState.CONFLICTED:
                    status_view.selected_index = idx
                    return
            ctl.notify_info("No conflicted files")

        return KeyComboRegistry().register_bindings(
            *self._list_bindings(lambda: status_view, lambda: len(status_view.status.files)),
            KeyComboBinding(("ENTER",), open_file_diff),
            KeyComboBinding(("a",), open_blame),
            KeyComboBinding(("C",), commit_prompt),
            KeyComboBinding(("r",), restore_file),
            KeyComboBinding(("R",), ctl.changes.start_restore_all),
            KeyComboBinding(("D",), diffedit_file),
            KeyComboBinding(("x",), jump_to_conflict),
        )

    # Diff

    def _diff_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        state = self.state

        def scroll(delta: int) -> None:
            if state.diff_view is not None:
                state.diff_view.scroll(delta, state.last_frame_height)

        def to_top() -> None:
            if state.diff_view is not None:
                state.diff_view.scroll_offset = 0

        def to_bottom() -> None:
            if state.diff_view is not None:
                state.diff_view.scroll(len(state.diff_view.content.lines), state.last_frame_height)

        def next_file() -> None:
            if state.diff_view is not None and not state.diff_view.next_file():
                ctl.notify_info("Last file")

        def prev_file() -> None:
            if state.diff_view is not None and not state.diff_view.prev_file():
                ctl.notify_info("First file")

        def open_blame() -> None:
            diff_view = state.diff_view
            if diff_view is None:
                return
            path = diff_view.current_file()
            if path is None:
                ctl.notify_info("No file at cursor")
                return
            ctl.navigation.open_blame(path, diff_view.change_id)

        return KeyComboRegistry().register_bindings(
            KeyComboBinding(DOWN_KEYS, lambda: scroll(1)),
            KeyComboBinding(UP_KEYS, lambda: scroll(-1)),
            KeyComboBinding(HALF_PAGE_DOWN_KEYS, lambda: scroll(self._half_page())),
            KeyComboBinding(HALF_PAGE_UP_KEYS, lambda: scroll(-self._half_page())),
            KeyComboBinding(TOP_KEYS, to_top),
            KeyComboBinding(BOTTOM_KEYS, to_bottom),
            KeyComboBinding(("]", "n"), next_file),
            KeyComboBinding(("[", "N"), prev_file),
            KeyComboBinding(("a",), open_blame),
            KeyComboBinding(("w",), ctl.navigation.cycle_diff_format),
        )

    # Operation history

    def _operation_table(self) -> KeyComboRegistry:
        operations = self.state.operations
        return KeyComboRegistry().register_bindings(
            *self._list_bindings(lambda: operations, lambda: len(operations.operations)),
            KeyComboBinding(("ENTER",), self.ctl.changes.start_op_restore),
        )

    # Bookmarks

    def _bookmark_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        view = self.state.bookmarks
        actions = ctl.bookmarks

        def jump() -> None:
            info = view.selected_bookmark()
            if info is None:
                return
            if info.change_id is None:
                ctl.notify_info("Bookmark has no target change")
                return
            actions.execute_jump(info.change_id)
            ctl.go_to_view(View.LOG)

        def track() -> None:
            info = view.selected_bookmark()
            if info is None:
                return
            if info.bookmark.is_untracked_remote:
                actions.execute_track([info.bookmark.full_name])
            else:
                ctl.notify_info("Only untracked remote bookmarks can be tracked")

        def untrack() -> None:
            info = view.selected_bookmark()
            if info is None:
                return
            bookmark = info.bookmark
            if bookmark.remote is not None and bookmark.is_tracked:
                actions.start_untrack(bookmark.full_name)
            else:
                ctl.notify_info("Only tracked remote bookmarks can be untracked")

        def local_only(action: Callable[[str], None]) -> Callable[[], None]:
            def run() -> None:
                info = view.selected_bookmark()
                if info is None:
                    return
                if not info.bookmark.is_local:
                    ctl.notify_info("Available only for local bookmarks")
                    return
                action(info.name)

            return run

        def move() -> None:
            info = view.selected_bookmark()
            if info is None:
                return
            if not info.bookmark.is_local:
                ctl.notify_info("Move is available only for local bookmarks")
                return
            actions.start_move_to_wc(info.name)

        def forget() -> None:
            info = view.selected_bookmark()
            if info is not None:
                actions.start_forget(info.name)

        return KeyComboRegistry().register_bindings(
            *self._list_bindings(lambda: view, lambda: len(view.bookmarks)),
            KeyComboBinding(("ENTER", "J"), jump),
            KeyComboBinding(("T",), track),
            KeyComboBinding(("U",), untrack),
            KeyComboBinding(("D",), local_only(lambda name: actions.execute_delete([name]))),
            KeyComboBinding(("r",), local_only(actions.start_rename)),
            KeyComboBinding(("F",), forget),
            KeyComboBinding(("m",), move),
        )

    # Blame, resolve, evolog

    def _blame_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        state = self.state

        def selected_change_id() -> str | None:
            blame_view = state.blame_view
            return blame_view.selected_change_id() if blame_view is not None else None

        def open_diff() -> None:
            change_id = selected_change_id()
            if change_id:
                ctl.navigation.open_diff(change_id)

        def jump() -> None:
            change_id = selected_change_id()
            if change_id:
                ctl.navigation.jump_to_log(change_id)

        return KeyComboRegistry().register_bindings(
            *self._list_bindings(
                lambda: state.blame_view,
                lambda: len(state.blame_view.content.lines) if state.blame_view is not None else 0,
            ),
            KeyComboBinding(("ENTER",), open_diff),
            KeyComboBinding(("J",), jump),
        )

    def _resolve_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        state = self.state
        conflicts = ctl.conflicts

        def with_file(action: Callable[[str], None]) -> Callable[[], None]:
            def run() -> None:
                view = state.resolve_view
                selected = view.selected_file() if view is not None else None
                if selected is not None:
                    action(selected.path)

            return run

        def show_diff(path: str) -> None:
            if state.resolve_view is not None:
                ctl.navigation.open_diff(state.resolve_view.change_id, path)

        return KeyComboRegistry().register_bindings(
            *self._list_bindings(
                lambda: state.resolve_view,
                lambda: len(state.resolve_view.files) if state.resolve_view is not None else 0,
            ),
            KeyComboBinding(("ENTER",), with_file(conflicts.resolve_external)),
            KeyComboBinding(("o",), with_file(conflicts.resolve_ours)),
            KeyComboBinding(("t",), with_file(conflicts.resolve_theirs)),
            KeyComboBinding(("d",), with_file(show_diff)),
        )

    def _evolog_table(self) -> KeyComboRegistry:
        ctl = self.ctl
        state = self.state

        def open_diff() -> None:
            view = state.evolog_view
            entry = view.selected_entry() if view is not None else None
            if entry is not None:
                ctl.navigation.open_diff(entry.commit_id)

        return KeyComboRegistry().register_bindings(
            *self._list_bindings(
                lambda: state.evolog_view,
                lambda: len(state.evolog_view.entries) if state.evolog_view is not None else 0,
            ),
            KeyComboBinding(("ENTER",), open_diff),
        )

    # Help

    def _help_table(self) -> KeyComboRegistry:
        state = self.state

        def max_scroll() -> int:
            return max(0, help_line_count() - max(1, state.last_frame_height))

        def scroll(delta: int) -> None:
            state.help_scroll = max(0, min(state.help_scroll + delta, max_scroll()))

        def to_bottom() -> None:
            state.help_scroll = max_scroll()

        def to_top() -> None:
            state.help_scroll = 0

        return KeyComboRegistry().register_bindings(
            KeyComboBinding(DOWN_KEYS, lambda: scroll(1)),
            KeyComboBinding(UP_KEYS, lambda: scroll(-1)),
            KeyComboBinding(HALF_PAGE_DOWN_KEYS, lambda: scroll(self._half_page())),
            KeyComboBinding(HALF_PAGE_UP_KEYS, lambda: scroll(-self._half_page())),
            KeyComboBinding(TOP_KEYS, to_top),
            KeyComboBinding(BOTTOM_KEYS, to_bottom),
        )
