"""Diff preview for the selected log row.

Selection changes only record which change wants a preview; the fetch itself
happens on the next idle tick so that holding ``j`` does not run ``jj show``
for every row passed over.
"""

from __future__ import annotations

from ..cache import PreviewCacheEntry
from ..jj import JjError
from .base import ActionGroup


class PreviewActions(ActionGroup):
    def update_if_needed(self) -> None:
        """Reuse a cached preview for the selection, or schedule a fetch."""
        state = self.state
        if not state.preview_enabled:
            return
        change = state.log.selected_change()
        if change is None:
            return
        entry = state.preview_cache.peek(change.change_id)
        if entry is not None and entry.commit_id == change.commit_id:
            state.preview_cache.touch(change.change_id)
            return
        state.preview_pending_id = change.change_id

    def fetch(self, change_id: str) -> None:
        state = self.state
        state.preview_pending_id = None
        change = state.log.selected_change()
        commit_id = ""
        bookmarks: list[str] = []
        if change is not None and change.change_id == change_id:
            commit_id = change.commit_id
            bookmarks = list(change.bookmarks)
        try:
            content = self.jj.show(change_id)
        except JjError:
            state.preview_cache.remove(change_id)
            return
        state.preview_cache.insert(
            PreviewCacheEntry(change_id=change_id, commit_id=commit_id, content=content, bookmarks=bookmarks)
        )
        state.dirty = True

    def resolve_pending(self) -> bool:
        """Idle hook: fetch the pending preview if its change is still selected."""
        state = self.state
        if not state.preview_enabled:
            return False
        pending = state.preview_pending_id
        if pending is None:
            return False
        change = state.log.selected_change()
        if change is None or change.change_id != pending:
            state.preview_pending_id = None
            return False
        self.fetch(pending)
        return True

    def toggle(self) -> None:
        state = self.state
        state.preview_enabled = not state.preview_enabled
        if state.preview_enabled:
            self.update_if_needed()
            self.resolve_pending()
        else:
            state.preview_pending_id = None
            state.preview_cache.clear()

    def current_entry(self) -> PreviewCacheEntry | None:
        """Cached preview for the selection, when it is still valid."""
        change = self.state.log.selected_change()
        if change is None:
            return None
        entry = self.state.preview_cache.peek(change.change_id)
        if entry is None or entry.commit_id != change.commit_id:
            return None
        return entry
