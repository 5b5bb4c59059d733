"""Opening detail views, jumping to changes, and explicit refresh."""

from __future__ import annotations

from ..jj import JjError
from ..model import DiffDisplayFormat
from ..state import View
from ..text import short_id
from ..view_state import BlameViewState, DiffViewState, EvologViewState, ResolveViewState
from .base import ActionGroup


class NavigationActions(ActionGroup):
    """Flows that change what is on screen without touching the repository."""

    def open_diff(
        self,
        change_id: str,
        file_path: str | None = None,
        display: DiffDisplayFormat = DiffDisplayFormat.COLOR_WORDS,
    ) -> bool:
        try:
            content = self.jj.show(change_id, display)
        except JjError as exc:
            self.ctl.set_error(f"Failed to load diff: {exc}")
            return False
        diff_view = DiffViewState(change_id=change_id, content=content, display_format=display)
        if file_path is not None:
            diff_view.jump_to_file(file_path)
        self.state.diff_view = diff_view
        self.ctl.go_to_view(View.DIFF)
        return True

    def cycle_diff_format(self) -> None:
        """Reload the open diff in the next display format, keeping the current file."""
        diff_view = self.state.diff_view
        if diff_view is None:
            return
        display = diff_view.display_format.next()
        current_file = diff_view.current_file()
        try:
            content = self.jj.show(diff_view.change_id, display)
        except JjError as exc:
            self.ctl.set_error(f"Failed to load diff: {exc}")
            return
        self.state.diff_view = DiffViewState(change_id=diff_view.change_id, content=content, display_format=display)
        if current_file is not None:
            self.state.diff_view.jump_to_file(current_file)
        self.ctl.notify_info(f"Diff format: {display.label}")

    def open_blame(self, file_path: str, revision: str | None = None) -> bool:
        try:
            content = self.jj.file_annotate(file_path, revision)
        except JjError as exc:
            self.ctl.set_error(f"Failed to load blame: {exc}")
            return False
        self.state.blame_view = BlameViewState(content=content)
        self.ctl.go_to_view(View.BLAME)
        return True

    def open_evolog(self, change_id: str) -> None:
        try:
            entries = self.jj.evolog(change_id)
        except JjError as exc:
            self.ctl.set_error(f"Failed to load evolog: {exc}")
            return
        if not entries:
            self.ctl.notify_info("No evolution history for this change")
            return
        self.state.evolog_view = EvologViewState(change_id=change_id, entries=entries)
        self.ctl.go_to_view(View.EVOLOG)

    def open_resolve_view(self, change_id: str, is_working_copy: bool) -> None:
        try:
            files = self.jj.resolve_list(change_id)
        except JjError as exc:
            self.ctl.set_error(f"Failed to list conflicts: {exc}")
            return
        if not files:
            self.ctl.notify_info("No conflicts in this change")
            return
        self.state.resolve_view = ResolveViewState(change_id=change_id, is_working_copy=is_working_copy, files=files)
        self.ctl.go_to_view(View.RESOLVE)

    def close_resolve_view(self) -> None:
        self.state.resolve_view = None
        self.ctl.go_back()
        self.ctl.refresh_log(self.state.log.current_revset)

    def open_bookmark_view(self) -> None:
        """Enter the bookmark list; stays put when listing fails."""
        if self.ctl.refresh_bookmarks():
            self.ctl.go_to_view(View.BOOKMARK)

    def open_operation_history(self) -> None:
        self.ctl.go_to_view(View.OPERATION)

    def open_help(self) -> None:
        self.state.help_scroll = 0
        self.ctl.go_to_view(View.HELP)

    # Log navigation

    def apply_revset(self, revset: str | None) -> None:
        """Reload the log for a typed revset; an empty one restores the default."""
        revset = (revset or "").strip() or self.state.default_revset
        log = self.state.log
        if self.ctl.refresh_log(revset) and revset and revset not in log.revset_history:
            log.revset_history.append(revset)

    def toggle_reversed(self) -> None:
        log = self.state.log
        selected = log.selected_change()
        log.reversed = not log.reversed
        self.ctl.refresh_log(log.current_revset)
        if selected is not None and not log.select_change_by_id(selected.change_id):
            log.select_working_copy()
        label = "oldest first" if log.reversed else "newest first"
        self.ctl.notify_info(f"Log order: {label}")

    def search(self, query: str | None = None, forward: bool = True) -> None:
        log = self.state.log
        if query is not None:
            log.last_search_query = query or None
        needle = log.last_search_query
        if not needle:
            return
        if not log.search(needle, forward):
            self.ctl.notify_info(f"No match for: {needle}")

    def clear_pending_jump(self) -> None:
        self.state.pending_jump_change_id = None

    def jump_to_log(self, change_id: str) -> None:
        """Select ``change_id`` in the log, widening the revset on a second request.

        The first request for a change outside the loaded revset only arms
        ``pending_jump_change_id``; repeating it for the same change reloads
        the log with that change added to the current revset.
        """
        state = self.state
        log = state.log
        short = short_id(change_id)
        if log.select_change_by_prefix(change_id):
            self.ctl.notify_success(f"Jumped to {short} in log")
            state.pending_jump_change_id = None
            state.previous_view = None
            state.current_view = View.LOG
            return
        if state.pending_jump_change_id == change_id:
            state.pending_jump_change_id = None
            if log.current_revset:
                expanded = f"{log.current_revset} | {change_id}"
            else:
                expanded = f"ancestors({change_id}) | {change_id}"
            if self.ctl.refresh_log(expanded) and log.select_change_by_prefix(change_id):
                self.ctl.notify_success(f"Jumped to {short} (revset expanded, r+Enter to reset)")
                state.previous_view = None
                state.current_view = View.LOG
            else:
                self.ctl.notify_warning("Change not found in repository")
            return
        state.pending_jump_change_id = change_id
        self.ctl.notify_info("Change not in current revset. Press J again to search full log")

    def copy_change_id(self) -> None:
        change = self.state.log.selected_change()
        if change is None:
            return
        if self.ctl.copy_text(change.change_id):
            self.ctl.notify_success(f"Copied {change.short_id()} to clipboard")
        else:
            self.ctl.notify_warning("No clipboard tool found (install pbcopy, xclip, or wl-copy)")

    def refresh_current_view(self) -> None:
        """Reload the current view from ``jj`` and report it."""
        state = self.state
        view = state.current_view
        refreshed = True
        if view is View.LOG:
            self.ctl.refresh_log(state.log.current_revset)
        elif view is View.STATUS:
            self.ctl.refresh_status()
        elif view is View.OPERATION:
            self.ctl.refresh_op_log()
        elif view is View.BOOKMARK:
            self.ctl.refresh_bookmarks()
        elif view is View.DIFF and state.diff_view is not None:
            diff_view = state.diff_view
            try:
                content = self.jj.show(diff_view.change_id, diff_view.display_format)
            except JjError as exc:
                self.ctl.set_error(f"Failed to load diff: {exc}")
                return
            diff_view.content = content
            diff_view.scroll(0, state.last_frame_height)
        elif view is View.BLAME and state.blame_view is not None:
            content = state.blame_view.content
            try:
                state.blame_view.content = self.jj.file_annotate(content.file_path, content.revision)
            except JjError as exc:
                self.ctl.set_error(f"Failed to load blame: {exc}")
                return
        elif view is View.RESOLVE and state.resolve_view is not None:
            resolve_view = state.resolve_view
            self.ctl.conflicts.refresh_resolve_list(resolve_view.change_id, resolve_view.is_working_copy)
            if state.resolve_view is None:
                return
        elif view is View.EVOLOG and state.evolog_view is not None:
            try:
                state.evolog_view.entries = self.jj.evolog(state.evolog_view.change_id)
            except JjError as exc:
                self.ctl.set_error(f"Failed to load evolog: {exc}")
                return
        else:
            refreshed = False
        if refreshed:
            self.ctl.notify_info("Refreshed")
