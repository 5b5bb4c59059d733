"""Bookmark create, move, delete, rename, forget, track, and jump flows."""

from __future__ import annotations

from ..cache import DirtyFlags
from ..dialog import (
    BookmarkForget,
    BookmarkJump,
    BookmarkMoveBackwards,
    BookmarkMoveToWc,
    DeleteBookmarks,
    Dialog,
    MoveBookmark,
    SelectItem,
    Track,
    Untrack,
)
from ..jj import CommandFailed, JjError
from ..jj.parser import jumpable_bookmarks, untracked_remote_bookmarks
from ..state import PromptKind, PromptState
from ..text import short_id, truncate_text
from .base import ActionGroup

UNDO_HINT = "Can be undone with 'u'."
MOVE_DETAIL_WIDTH = 40
JUMP_LABEL_WIDTH = 40


def is_bookmark_exists_error(error: JjError) -> bool:
    """Whether ``bookmark create`` failed only because the name is taken."""
    if not isinstance(error, CommandFailed):
        return False
    stderr = error.stderr.lower()
    return "already exists" in stderr or "bookmark already" in stderr


def is_backwards_move_error(error: JjError) -> bool:
    return "backwards or sideways" in str(error).lower()


def _local_name(full_name: str) -> str:
    return full_name.split("@", 1)[0]


class BookmarkActions(ActionGroup):
    def execute_create(self, change_id: str, name: str) -> None:
        """Create ``name`` at ``change_id``, offering a move when it already exists."""
        name = name.strip()
        if not name:
            self.ctl.notify_warning("Bookmark name cannot be empty")
            return
        try:
            self.jj.bookmark_create(name, change_id)
        except JjError as exc:
            if is_bookmark_exists_error(exc):
                self.ctl.open_dialog(
                    Dialog.confirm(
                        "Move Bookmark",
                        f'Move bookmark "{name}" to this change?',
                        self.build_move_detail(name, change_id),
                        MoveBookmark(name=name, change_id=change_id),
                    )
                )
            else:
                self.ctl.set_error(f"Failed to create bookmark: {exc}")
            return
        self.ctl.notify_success(f"Created bookmark: {name}")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_bookmarks())

    def build_move_detail(self, name: str, to_change_id: str) -> str:
        """Describe where ``name`` sits now and where the move takes it."""
        owner = self.state.log.find_bookmark_owner(name)
        from_info: tuple[str, str] | None = None
        if owner is not None:
            from_info = (owner.change_id, owner.description)
        else:
            try:
                from_info = self.jj.get_change_info(name)
            except JjError:
                from_info = None
        if from_info is None:
            return UNDO_HINT
        selected = self.state.log.selected_change()
        to_desc = selected.display_description if selected is not None else ""
        from_id, from_desc = from_info
        return (
            f"From: {from_id}  {truncate_text(from_desc, MOVE_DETAIL_WIDTH)}\n"
            f"  To: {short_id(to_change_id)}  {truncate_text(to_desc, MOVE_DETAIL_WIDTH)}\n\n"
            f"{UNDO_HINT}"
        )

    def execute_move(self, name: str, change_id: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_set(name, change_id),
            "Failed to move bookmark",
            f"Moved bookmark: {name}",
            DirtyFlags.log_and_bookmarks(),
        )

    def start_delete(self) -> None:
        change = self.state.log.selected_change()
        if change is None:
            return
        if not change.bookmarks:
            self.ctl.notify_info("No bookmarks to delete")
            return
        items = [SelectItem(label=name, value=name) for name in change.bookmarks]
        self.ctl.open_dialog(
            Dialog.select(
                "Delete Bookmarks",
                f"Select bookmarks to delete from {change.short_id()}:",
                items,
                "Deletions will propagate to remotes on push.",
                DeleteBookmarks(),
            )
        )

    def execute_delete(self, names: list[str] | tuple[str, ...]) -> None:
        if not names:
            return
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_delete(list(names)),
            "Failed to delete bookmarks",
            f"Deleted bookmarks: {', '.join(names)}",
            DirtyFlags.log_and_bookmarks(),
        )

    def start_rename(self, old_name: str) -> None:
        self.state.bookmarks.rename_from = old_name
        self.state.prompt = PromptState(PromptKind.RENAME, f"Rename {old_name} to: ", old_name, old_name)

    def execute_rename(self, old_name: str, new_name: str) -> None:
        self.state.bookmarks.rename_from = None
        new_name = new_name.strip()
        if new_name == old_name:
            self.ctl.notify_info("Name unchanged")
            return
        if not new_name:
            self.ctl.notify_warning("Bookmark name cannot be empty")
            return
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_rename(old_name, new_name),
            "Rename failed",
            f"Renamed bookmark: {old_name} → {new_name}",
            DirtyFlags.log_and_bookmarks(),
        )

    def start_forget(self, name: str) -> None:
        self.ctl.open_dialog(
            Dialog.confirm(
                "Forget Bookmark",
                f"Forget bookmark '{name}'?\n\n"
                "This removes remote tracking.\n"
                "Use 'D' for local delete only.\n"
                "Undo with 'u' if needed.",
                None,
                BookmarkForget(),
            )
        )
        self.state.pending_forget_bookmark = name

    def execute_forget(self) -> None:
        name = self.state.pending_forget_bookmark
        self.state.pending_forget_bookmark = None
        if name is None:
            return
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_forget([name]),
            "Forget failed",
            f"Forgot bookmark: {name} (remote tracking removed)",
            DirtyFlags.log_and_bookmarks(),
        )

    # Move to the working copy

    def start_move_to_wc(self, name: str) -> None:
        self.ctl.open_dialog(
            Dialog.confirm(
                "Move Bookmark",
                f"Move bookmark '{name}' to @?",
                self._move_to_wc_detail(),
                BookmarkMoveToWc(name=name),
            )
        )

    def _move_to_wc_detail(self) -> str:
        info = self.state.bookmarks.selected_bookmark()
        if info is None:
            from_text = "?"
        else:
            from_text = f"{short_id(info.change_id or '?')} {info.description or '(no description)'}"
        working_copy = self.state.log.working_copy()
        if working_copy is None:
            to_text = "@"
        else:
            to_text = f"{working_copy.short_id()} {working_copy.description or '(no description)'}"
        return f"From: {from_text}\n  To: {to_text}\n\n{UNDO_HINT}"

    def execute_move_to_wc(self, name: str) -> None:
        try:
            self.jj.bookmark_move(name, "@")
        except JjError as exc:
            if is_backwards_move_error(exc):
                self.ctl.open_dialog(
                    Dialog.confirm(
                        "Move Bookmark (Force)",
                        f"Bookmark '{name}' requires backwards/sideways move.\nAllow --allow-backwards?",
                        "This moves the bookmark in a non-forward direction.",
                        BookmarkMoveBackwards(name=name),
                    )
                )
            else:
                self.ctl.set_error(f"Move failed: {exc}\nTry: jj bookmark move {name} --to @ --allow-backwards")
            return
        self.ctl.notify_success(f"Moved bookmark '{name}' to @")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_bookmarks())

    def execute_move_backwards(self, name: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_move(name, "@", allow_backwards=True),
            "Move failed",
            f"Moved bookmark '{name}' to @ (backwards)",
            DirtyFlags.log_and_bookmarks(),
        )

    # Tracking

    def start_track(self) -> None:
        try:
            bookmarks = untracked_remote_bookmarks(self.jj.bookmark_list_all())
        except JjError as exc:
            self.ctl.set_error(f"Failed to list bookmarks: {exc}")
            return
        if not bookmarks:
            self.ctl.notify_info("No untracked remote bookmarks")
            return
        items = [SelectItem(label=bookmark.full_name, value=bookmark.full_name) for bookmark in bookmarks]
        self.ctl.open_dialog(Dialog.select("Track Remote Bookmarks", "Select bookmarks to track:", items, None, Track()))

    def execute_track(self, names: list[str] | tuple[str, ...]) -> None:
        if not names:
            return
        display = _local_name(names[0]) if len(names) == 1 else f"{len(names)} bookmarks"
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_track(list(names)),
            "Failed to track",
            f"Started tracking: {display}",
            DirtyFlags.everything(),
        )

    def start_untrack(self, full_name: str) -> None:
        self.ctl.open_dialog(
            Dialog.confirm(
                "Untrack Bookmark",
                f"Stop tracking '{full_name}'?",
                "The local bookmark is kept. Undo with 'u' if needed.",
                Untrack(full_name=full_name),
            )
        )

    def execute_untrack(self, full_name: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.bookmark_untrack([full_name]),
            "Failed to untrack",
            f"Stopped tracking: {_local_name(full_name)}",
            DirtyFlags.everything(),
        )

    # Jump

    def start_jump(self) -> None:
        try:
            infos = jumpable_bookmarks(self.jj.bookmark_list_with_info())
        except JjError as exc:
            self.ctl.set_error(f"Failed to list bookmarks: {exc}")
            return
        if not infos:
            self.ctl.notify_info("No bookmarks available")
            return
        items = [SelectItem(label=info.display_label(JUMP_LABEL_WIDTH), value=info.change_id or "") for info in infos]
        self.ctl.open_dialog(Dialog.select_single("Jump to Bookmark", "Select bookmark:", items, None, BookmarkJump()))

    def execute_jump(self, change_id: str) -> None:
        if self.state.log.select_change_by_id(change_id):
            self.ctl.notify_success(f"Jumped to {short_id(change_id)}")
        else:
            self.ctl.notify_warning("Bookmark target not visible in current revset")
