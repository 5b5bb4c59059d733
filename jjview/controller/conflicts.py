"""Conflict resolution from the resolve view."""

from __future__ import annotations

from ..cache import DirtyFlags
from ..jj import JjError, JjNotFound
from ..model import Notification
from ..view_state import ResolveViewState
from .base import ActionGroup

NO_CONFLICTS_MARKER = "No conflicts"


class ConflictActions(ActionGroup):
    def _target(self) -> tuple[str, bool] | None:
        view = self.state.resolve_view
        if view is None:
            return None
        return view.change_id, view.is_working_copy

    def resolve_with_tool(self, file_path: str, tool: str) -> None:
        """Take one side of a conflict (``:ours`` / ``:theirs``)."""
        target = self._target()
        if target is None:
            return
        change_id, is_working_copy = target
        try:
            self.jj.resolve_with_tool(file_path, tool, change_id)
        except JjError as exc:
            self.ctl.set_error(f"Resolve failed: {exc}")
            return
        self.ctl.notify_success(f"Resolved {file_path} with {tool}")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        self.refresh_resolve_list(change_id, is_working_copy)

    def resolve_ours(self, file_path: str) -> None:
        self.resolve_with_tool(file_path, ":ours")

    def resolve_theirs(self, file_path: str) -> None:
        self.resolve_with_tool(file_path, ":theirs")

    def resolve_external(self, file_path: str) -> None:
        target = self._target()
        if target is None:
            return
        change_id, is_working_copy = target
        if not is_working_copy:
            self.ctl.notify_warning("External merge tool only works for working copy (@)")
            return
        try:
            with self.ctl.suspend():
                code = self.jj.resolve(file_path, change_id)
        except (JjNotFound, OSError) as exc:
            self.ctl.set_error(f"Resolve failed: {exc}")
        else:
            if code == 0:
                self.ctl.notify_success(f"Resolved {file_path}")
                self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
            else:
                self.ctl.notify_info("Resolve cancelled or failed")
        self.refresh_resolve_list(change_id, is_working_copy)

    def _all_resolved(self) -> None:
        self.state.notification = Notification.success("All conflicts resolved!")
        self.ctl.navigation.close_resolve_view()

    def refresh_resolve_list(self, change_id: str, is_working_copy: bool) -> None:
        """Reload the conflict list; leave the view once nothing is left."""
        try:
            files = self.jj.resolve_list(change_id)
        except JjError as exc:
            if NO_CONFLICTS_MARKER in str(exc):
                self._all_resolved()
            else:
                self.ctl.set_error(f"Failed to refresh conflicts: {exc}")
            return
        if not files:
            self._all_resolved()
            return
        if self.state.resolve_view is None:
            self.state.resolve_view = ResolveViewState(change_id=change_id, is_working_copy=is_working_copy, files=files)
        else:
            self.state.resolve_view.set_files(files)
