from __future__ import annotations

import unittest
from unittest import mock

from jjview.cache import DirtyFlags, PreviewCacheEntry
from jjview.controller import ActionController, is_backwards_move_error, is_bookmark_exists_error
from jjview.controller.changes import (
    NO_REDUNDANT_PARENTS,
    NOTHING_TO_PARALLELIZE,
    NOTHING_TO_REDO,
    SKIP_EMPTIED_UNSUPPORTED_SUFFIX,
    format_next_prev_error,
    parse_duplicate_output,
    rebase_success_message,
)
from jjview.dialog import (
    Abandon,
    BookmarkMoveBackwards,
    Dialog,
    GitPush,
    GitPushRemoteSelect,
    MoveBookmark,
    SelectItem,
)
from jjview.jj import CommandFailed, JjError, JjExecutor, NotARepository
from jjview.model import Change, DiffContent, NotificationKind, RebaseMode, Status
from jjview.state import AppState, View
from jjview.view_state import LogMode


def _change(change_id: str, **kwargs: object) -> Change:
    return Change(change_id=change_id, commit_id=f"c-{change_id}", **kwargs)


def _log() -> list[Change]:
    return [
        _change("aaaaaaaa", is_working_copy=True, description="wip"),
        Change.graph_only("│"),
        _change("bbbbbbbb", bookmarks=["main"], description="Base"),
    ]


def make_controller(changes: list[Change] | None = None) -> tuple[ActionController, AppState, mock.Mock]:
    changes = _log() if changes is None else changes
    jj = mock.create_autospec(JjExecutor, instance=True)
    jj.log.return_value = list(changes)
    state = AppState()
    state.log.set_changes(list(changes))
    ctl = ActionController(state, jj, copy_text=mock.Mock(return_value=True))
    return ctl, state, jj


class ErrorClassificationTests(unittest.TestCase):
    def test_bookmark_exists_matches_case_insensitively(self) -> None:
        for stderr in (
            "Error: Bookmark 'main' already exists",
            "bookmark already exists: feature",
            "BOOKMARK ALREADY EXISTS",
        ):
            with self.subTest(stderr=stderr):
                self.assertTrue(is_bookmark_exists_error(CommandFailed(stderr, 1)))

    def test_other_failures_are_not_exists_errors(self) -> None:
        self.assertFalse(is_bookmark_exists_error(CommandFailed("Error: Invalid revision", 1)))
        self.assertFalse(is_bookmark_exists_error(NotARepository()))
        self.assertFalse(is_bookmark_exists_error(JjError("already exists")))

    def test_backwards_move(self) -> None:
        self.assertTrue(is_backwards_move_error(CommandFailed("Error: Refusing to move bookmark backwards or sideways", 1)))
        self.assertFalse(is_backwards_move_error(CommandFailed("Error: No such bookmark", 1)))


class RunJjActionTests(unittest.TestCase):
    def test_success_notifies_and_refreshes_log(self) -> None:
        ctl, state, jj = make_controller()
        state.log.current_revset = "all()"

        ctl.changes.describe("aaaaaaaa", "msg")

        jj.describe.assert_called_once_with("aaaaaaaa", "msg")
        self.assertEqual(state.notification.message, "Description updated")
        self.assertEqual(state.notification.kind, NotificationKind.SUCCESS)
        jj.log.assert_called_once_with("all()", False)
        self.assertFalse(state.dirty_flags.log)
        # The op log is not on screen, so it stays dirty until visited.
        self.assertTrue(state.dirty_flags.op_log)
        jj.op_log.assert_not_called()

    def test_failure_sets_error_without_refresh(self) -> None:
        ctl, state, jj = make_controller()
        jj.describe.side_effect = CommandFailed("boom", 1)

        ctl.changes.describe("aaaaaaaa", "msg")

        self.assertEqual(state.error_message, "Failed to update description: boom")
        self.assertIsNone(state.notification)
        jj.log.assert_not_called()

    def test_current_status_view_is_reread(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.STATUS
        jj.status.return_value = Status()

        ctl.changes.new_change()

        jj.new_change.assert_called_once_with()
        jj.status.assert_called_once_with()
        self.assertFalse(state.dirty_flags.status)

    def test_go_back_refreshes_pending_dirty_view(self) -> None:
        ctl, state, jj = make_controller()
        state.dirty_flags = DirtyFlags(op_log=True)
        state.current_view = View.DIFF
        state.previous_view = View.OPERATION
        jj.op_log.return_value = []

        ctl.go_back()

        self.assertIs(state.current_view, View.OPERATION)
        jj.op_log.assert_called_once_with()
        self.assertFalse(state.dirty_flags.op_log)

    def test_failed_log_refresh_keeps_rows(self) -> None:
        ctl, state, jj = make_controller()
        jj.log.side_effect = CommandFailed("bad revset", 1)

        self.assertFalse(ctl.refresh_log("nonsense("))

        self.assertEqual(state.error_message, "jj error: bad revset")
        self.assertEqual(len(state.log.changes), 3)
        self.assertIsNone(state.log.current_revset)

    def test_undo_marks_everything_dirty(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.OPERATION
        jj.op_log.return_value = []

        ctl.changes.undo()

        jj.undo.assert_called_once_with()
        self.assertFalse(state.dirty_flags.op_log)
        self.assertTrue(state.dirty_flags.status)
        self.assertTrue(state.dirty_flags.bookmarks)

    def test_redo_without_target(self) -> None:
        ctl, state, jj = make_controller()
        jj.get_redo_target.return_value = None

        ctl.changes.redo()

        self.assertEqual(state.notification.message, NOTHING_TO_REDO)
        jj.redo.assert_not_called()

    def test_notification_expires(self) -> None:
        ctl, state, _ = make_controller()
        ctl.notify_info("hello")
        created = state.notification.created_at

        self.assertFalse(ctl.clear_expired_notification(now=created + 1))
        self.assertTrue(ctl.clear_expired_notification(now=created + 5))
        self.assertIsNone(state.notification)


class JumpToLogTests(unittest.TestCase):
    def test_loaded_change_is_selected(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.BLAME

        ctl.navigation.jump_to_log("bbbbbbbb")

        self.assertIs(state.current_view, View.LOG)
        self.assertEqual(state.log.selected_change().change_id, "bbbbbbbb")
        self.assertEqual(state.notification.message, "Jumped to bbbbbbbb in log")
        jj.log.assert_not_called()

    def test_first_miss_only_arms_pending(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.BLAME

        ctl.navigation.jump_to_log("wwwwwwww")

        self.assertEqual(state.pending_jump_change_id, "wwwwwwww")
        self.assertIs(state.current_view, View.BLAME)
        self.assertEqual(state.notification.message, "Change not in current revset. Press J again to search full log")
        jj.log.assert_not_called()

    def test_second_press_expands_revset(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.BLAME
        ctl.navigation.jump_to_log("wwwwwwww")
        jj.log.return_value = _log() + [_change("wwwwwwww")]

        ctl.navigation.jump_to_log("wwwwwwww")

        jj.log.assert_called_once_with("ancestors(wwwwwwww) | wwwwwwww", False)
        self.assertIs(state.current_view, View.LOG)
        self.assertEqual(state.log.selected_change().change_id, "wwwwwwww")
        self.assertIsNone(state.pending_jump_change_id)
        self.assertTrue(state.notification.message.startswith("Jumped to wwwwwwww"))

    def test_expansion_keeps_current_revset(self) -> None:
        ctl, state, jj = make_controller()
        state.log.current_revset = "mine()"
        jj.log.return_value = _log() + [_change("wwwwwwww")]

        ctl.navigation.jump_to_log("wwwwwwww")
        ctl.navigation.jump_to_log("wwwwwwww")

        jj.log.assert_called_once_with("mine() | wwwwwwww", False)

    def test_different_target_rearms(self) -> None:
        ctl, state, jj = make_controller()

        ctl.navigation.jump_to_log("wwwwwwww")
        ctl.navigation.jump_to_log("vvvvvvvv")

        self.assertEqual(state.pending_jump_change_id, "vvvvvvvv")
        jj.log.assert_not_called()

    def test_missing_after_expansion_warns(self) -> None:
        ctl, state, jj = make_controller()
        state.current_view = View.BLAME

        ctl.navigation.jump_to_log("wwwwwwww")
        ctl.navigation.jump_to_log("wwwwwwww")

        self.assertEqual(state.notification.message, "Change not found in repository")
        self.assertEqual(state.notification.kind, NotificationKind.WARNING)
        self.assertIs(state.current_view, View.BLAME)
        self.assertIsNone(state.pending_jump_change_id)


class DialogDispatchTests(unittest.TestCase):
    def test_no_dialog_does_not_consume(self) -> None:
        ctl, _, _ = make_controller()

        self.assertFalse(ctl.dialogs.handle_key("y"))

    def test_unrelated_key_keeps_dialog_open(self) -> None:
        ctl, state, _ = make_controller()
        ctl.bookmarks.start_forget("feature")

        self.assertTrue(ctl.dialogs.handle_key("x"))
        self.assertIsNotNone(state.active_dialog)

    def test_forget_cancel_clears_staged_name(self) -> None:
        ctl, state, jj = make_controller()
        ctl.bookmarks.start_forget("feature")
        self.assertEqual(state.pending_forget_bookmark, "feature")

        self.assertTrue(ctl.dialogs.handle_key("n"))

        self.assertIsNone(state.active_dialog)
        self.assertIsNone(state.pending_forget_bookmark)
        jj.bookmark_forget.assert_not_called()

    def test_forget_confirm_runs_command(self) -> None:
        ctl, state, jj = make_controller()
        ctl.bookmarks.start_forget("feature")

        ctl.dialogs.handle_key("y")

        jj.bookmark_forget.assert_called_once_with(["feature"])
        self.assertEqual(state.notification.message, "Forgot bookmark: feature (remote tracking removed)")
        self.assertIsNone(state.pending_forget_bookmark)

    def test_remote_select_cancel_clears_remote(self) -> None:
        ctl, state, _ = make_controller()
        state.push_target_remote = "origin"
        items = [SelectItem("origin", "origin"), SelectItem("upstream", "upstream")]
        ctl.open_dialog(Dialog.select_single("Push to Remote", "Select remote:", items, None, GitPushRemoteSelect()))

        ctl.dialogs.handle_key("ESC")

        self.assertIsNone(state.push_target_remote)

    def test_push_cancel_clears_staged_bookmarks(self) -> None:
        ctl, state, jj = make_controller()
        state.pending_push_bookmarks = ["main"]
        state.push_target_remote = "origin"
        ctl.open_dialog(Dialog.confirm("Push to Remote", 'Push bookmark "main"?', None, GitPush()))

        ctl.dialogs.handle_key("N")

        self.assertEqual(state.pending_push_bookmarks, [])
        self.assertIsNone(state.push_target_remote)
        jj.git_push_bookmark.assert_not_called()

    def test_other_cancel_leaves_staged_data(self) -> None:
        ctl, state, jj = make_controller()
        state.pending_forget_bookmark = "feature"
        state.push_target_remote = "origin"
        state.pending_push_bookmarks = ["main"]
        ctl.open_dialog(Dialog.confirm("Abandon", "Abandon change?", None, Abandon(change_id="aaaaaaaa")))

        ctl.dialogs.handle_key("ESC")

        self.assertEqual(state.pending_forget_bookmark, "feature")
        self.assertEqual(state.push_target_remote, "origin")
        self.assertEqual(state.pending_push_bookmarks, ["main"])
        jj.abandon.assert_not_called()


class BookmarkFlowTests(unittest.TestCase):
    def test_empty_name_warns(self) -> None:
        ctl, state, jj = make_controller()

        ctl.bookmarks.execute_create("aaaaaaaa", "   ")

        self.assertEqual(state.notification.message, "Bookmark name cannot be empty")
        jj.bookmark_create.assert_not_called()

    def test_create_success(self) -> None:
        ctl, state, jj = make_controller()

        ctl.bookmarks.execute_create("aaaaaaaa", "feat")

        jj.bookmark_create.assert_called_once_with("feat", "aaaaaaaa")
        self.assertEqual(state.notification.message, "Created bookmark: feat")
        jj.log.assert_called_once()
        self.assertTrue(state.dirty_flags.bookmarks)

    def test_existing_name_offers_move_from_loaded_owner(self) -> None:
        ctl, state, jj = make_controller()
        jj.bookmark_create.side_effect = CommandFailed("Error: Bookmark 'main' already exists", 1)

        ctl.bookmarks.execute_create("aaaaaaaa", "main")

        dialog = state.active_dialog
        self.assertIsNotNone(dialog)
        self.assertEqual(dialog.title, "Move Bookmark")
        self.assertEqual(dialog.callback, MoveBookmark(name="main", change_id="aaaaaaaa"))
        self.assertIn("From: bbbbbbbb  Base", dialog.detail)
        self.assertIn("To: aaaaaaaa  wip", dialog.detail)
        jj.get_change_info.assert_not_called()
        self.assertIsNone(state.error_message)

    def test_existing_name_outside_log_is_looked_up(self) -> None:
        ctl, state, jj = make_controller()
        jj.bookmark_create.side_effect = CommandFailed("bookmark already exists: release", 1)
        jj.get_change_info.return_value = ("cccccccc", "Release prep")

        ctl.bookmarks.execute_create("aaaaaaaa", "release")

        jj.get_change_info.assert_called_once_with("release")
        self.assertIn("From: cccccccc  Release prep", state.active_dialog.detail)

    def test_confirmed_move_sets_bookmark(self) -> None:
        ctl, state, jj = make_controller()
        jj.bookmark_create.side_effect = CommandFailed("Error: Bookmark 'main' already exists", 1)
        ctl.bookmarks.execute_create("aaaaaaaa", "main")

        ctl.dialogs.handle_key("ENTER")

        jj.bookmark_set.assert_called_once_with("main", "aaaaaaaa")
        self.assertEqual(state.notification.message, "Moved bookmark: main")

    def test_other_create_error_sets_banner(self) -> None:
        ctl, state, jj = make_controller()
        jj.bookmark_create.side_effect = CommandFailed("Error: Invalid revision", 1)

        ctl.bookmarks.execute_create("aaaaaaaa", "feat")

        self.assertEqual(state.error_message, "Failed to create bookmark: Error: Invalid revision")
        self.assertIsNone(state.active_dialog)

    def test_backwards_move_to_working_copy_asks_again(self) -> None:
        ctl, state, jj = make_controller()
        jj.bookmark_move.side_effect = [
            CommandFailed("Error: Refusing to move bookmark backwards or sideways", 1),
            "",
        ]

        ctl.bookmarks.execute_move_to_wc("main")

        self.assertEqual(state.active_dialog.callback, BookmarkMoveBackwards(name="main"))
        ctl.dialogs.handle_key("y")
        jj.bookmark_move.assert_called_with("main", "@", allow_backwards=True)
        self.assertEqual(state.notification.message, "Moved bookmark 'main' to @ (backwards)")


class RebaseAndSquashTests(unittest.TestCase):
    def test_rebase_flow_runs_selected_mode(self) -> None:
        ctl, state, jj = make_controller()
        jj.rebase.return_value = "Rebased 1 commits"

        ctl.changes.start_rebase()
        self.assertEqual(state.log.mode, LogMode.REBASE_MODE_SELECT)
        ctl.changes.choose_rebase_mode(RebaseMode.SOURCE)
        self.assertEqual(state.log.mode, LogMode.REBASE_SELECT)
        state.log.select_change_by_id("bbbbbbbb")
        ctl.changes.confirm_destination()

        jj.rebase.assert_called_once_with("aaaaaaaa", "bbbbbbbb", RebaseMode.SOURCE, [])
        self.assertEqual(state.notification.message, "Rebased source and descendants successfully")
        self.assertEqual(state.log.mode, LogMode.NORMAL)

    def test_rebase_onto_itself_is_refused(self) -> None:
        ctl, state, jj = make_controller()

        ctl.changes.rebase("aaaaaaaa", "aaaaaaaa", RebaseMode.REVISION)

        self.assertEqual(state.notification.message, "Cannot rebase to itself")
        jj.rebase.assert_not_called()

    def test_unsupported_skip_emptied_retries_without_flag(self) -> None:
        ctl, state, jj = make_controller()
        jj.rebase.side_effect = [CommandFailed("error: unexpected argument '--skip-emptied' found", 2), "Rebased"]

        ctl.changes.rebase("aaaaaaaa", "bbbbbbbb", RebaseMode.REVISION, skip_emptied=True)

        self.assertEqual(jj.rebase.call_count, 2)
        self.assertEqual(jj.rebase.call_args_list[0].args[3], ["--skip-emptied"])
        self.assertEqual(state.notification.message, "Rebased successfully" + SKIP_EMPTIED_UNSUPPORTED_SUFFIX)

    def test_rebase_with_conflicts_warns(self) -> None:
        ctl, state, jj = make_controller()
        jj.rebase.return_value = "Rebased 1 commits\nNew conflicts appeared in 1 commits"

        ctl.changes.rebase("aaaaaaaa", "bbbbbbbb", RebaseMode.REVISION)

        self.assertEqual(state.notification.kind, NotificationKind.WARNING)

    def test_squash_into_itself_is_refused(self) -> None:
        ctl, state, jj = make_controller()

        ctl.changes.start_squash()
        self.assertEqual(state.log.mode, LogMode.SQUASH_SELECT)
        ctl.changes.confirm_destination()

        self.assertEqual(state.notification.message, "Cannot squash into itself")
        jj.squash_into.assert_not_called()
        self.assertEqual(state.log.mode, LogMode.NORMAL)

    def test_squash_runs_interactively(self) -> None:
        ctl, state, jj = make_controller()
        jj.squash_into.return_value = 0

        ctl.changes.start_squash()
        state.log.select_change_by_id("bbbbbbbb")
        ctl.changes.confirm_destination()

        jj.squash_into.assert_called_once_with("aaaaaaaa", "bbbbbbbb")
        self.assertEqual(state.notification.message, "Squashed aaaaaaaa into bbbbbbbb (undo: u)")


class RestoreAndRewriteTests(unittest.TestCase):
    def test_restore_file_after_confirmation(self) -> None:
        ctl, state, jj = make_controller()
        jj.restore_file.return_value = ""

        ctl.changes.start_restore_file("README.md")
        ctl.dialogs.handle_key("y")

        jj.restore_file.assert_called_once_with("README.md")
        self.assertEqual(state.notification.message, "Restored: README.md")
        jj.log.assert_called_once_with(None, False)
        self.assertTrue(state.dirty_flags.status)

    def test_restore_all_cancelled(self) -> None:
        ctl, state, jj = make_controller()

        ctl.changes.start_restore_all()
        self.assertEqual(state.active_dialog.title, "Restore All Files")
        ctl.dialogs.handle_key("n")

        self.assertIsNone(state.active_dialog)
        jj.restore_all.assert_not_called()

    def test_restore_all_failure_sets_banner(self) -> None:
        ctl, state, jj = make_controller()
        jj.restore_all.side_effect = CommandFailed("Error: boom", 1)

        ctl.changes.start_restore_all()
        ctl.dialogs.handle_key("y")

        self.assertEqual(state.error_message, "Restore failed: Error: boom")
        self.assertFalse(state.dirty_flags.any())

    def test_simplify_parents_without_redundant_edges(self) -> None:
        ctl, state, jj = make_controller()
        jj.simplify_parents.return_value = ""

        ctl.changes.start_simplify_parents()
        ctl.dialogs.handle_key("y")

        jj.simplify_parents.assert_called_once_with("aaaaaaaa")
        self.assertEqual(state.notification.message, NO_REDUNDANT_PARENTS)
        self.assertIs(state.notification.kind, NotificationKind.INFO)

    def test_simplify_parents_success(self) -> None:
        ctl, state, jj = make_controller()
        jj.simplify_parents.return_value = "Removed 1 edges from 1 out of 1 commits.\n"

        ctl.changes.simplify_parents("aaaaaaaa")

        self.assertEqual(state.notification.message, "Simplified parents for aaaaaaaa (undo: u)")
        jj.log.assert_called_once_with(None, False)

    def test_parallelize_single_change_is_refused(self) -> None:
        ctl, state, jj = make_controller()

        ctl.changes.start_parallelize()
        ctl.changes.confirm_destination()

        self.assertIsNone(state.active_dialog)
        self.assertIs(state.notification.kind, NotificationKind.WARNING)
        self.assertEqual(state.log.mode, LogMode.NORMAL)

    def test_parallelize_reports_nothing_to_do(self) -> None:
        ctl, state, jj = make_controller()
        jj.parallelize.return_value = "Nothing changed.\n"

        ctl.changes.parallelize("aaaaaaaa", "bbbbbbbb")

        self.assertEqual(state.notification.message, NOTHING_TO_PARALLELIZE)

    def test_parallelize_failure(self) -> None:
        ctl, state, jj = make_controller()
        jj.parallelize.side_effect = CommandFailed("Error: Cannot parallelize", 1)

        ctl.changes.parallelize("aaaaaaaa", "bbbbbbbb")

        self.assertEqual(state.error_message, "Parallelize failed: Error: Cannot parallelize")
        jj.log.assert_not_called()

    def test_diffedit_runs_inside_suspend(self) -> None:
        ctl, state, jj = make_controller()
        suspend = mock.MagicMock()
        ctl.suspend = suspend
        jj.diffedit.return_value = 0

        ctl.changes.diffedit("aaaaaaaa")

        suspend.assert_called_once_with()
        jj.diffedit.assert_called_once_with("aaaaaaaa", None)
        self.assertEqual(state.notification.message, "Diffedit aaaaaaaa complete (undo: u)")
        jj.log.assert_called_once_with(None, False)

    def test_diffedit_cancelled(self) -> None:
        ctl, state, jj = make_controller()
        jj.diffedit.return_value = 1

        ctl.changes.diffedit("aaaaaaaa", "README.md")

        self.assertEqual(state.notification.message, "Diffedit cancelled or failed")


class ChangeHelperTests(unittest.TestCase):
    def test_parse_duplicate_output(self) -> None:
        self.assertEqual(parse_duplicate_output("Duplicated 1234abcd as xyzwvuts 5678ef01 Add feature\n"), "xyzwvuts")
        self.assertIsNone(parse_duplicate_output("Nothing happened\n"))

    def test_next_prev_error_messages(self) -> None:
        error = CommandFailed("Error: The working copy has more than one child", 1)

        self.assertEqual(
            format_next_prev_error(error, "next"),
            "Cannot move next: multiple children. Use 'e' to edit a specific revision.",
        )
        self.assertEqual(format_next_prev_error(CommandFailed("boom", 1), "prev"), "Move prev failed: boom")

    def test_rebase_success_message(self) -> None:
        self.assertEqual(
            rebase_success_message(RebaseMode.INSERT_AFTER, "bbbbbbbbxyz", True),
            "Inserted after bbbbbbbb successfully (empty commits skipped)",
        )


class PreviewTests(unittest.TestCase):
    def test_selection_schedules_fetch(self) -> None:
        ctl, state, jj = make_controller()

        ctl.update_preview_if_needed()

        self.assertEqual(state.preview_pending_id, "aaaaaaaa")
        jj.show.assert_not_called()

    def test_idle_tick_fetches_and_caches(self) -> None:
        ctl, state, jj = make_controller()
        jj.show.return_value = DiffContent(commit_id="c-aaaaaaaa")
        ctl.update_preview_if_needed()

        self.assertTrue(ctl.resolve_pending_preview())

        jj.show.assert_called_once_with("aaaaaaaa")
        self.assertEqual(state.preview_cache.peek("aaaaaaaa").commit_id, "c-aaaaaaaa")
        self.assertIsNone(state.preview_pending_id)

    def test_cached_preview_is_reused(self) -> None:
        ctl, state, jj = make_controller()
        jj.show.return_value = DiffContent()
        ctl.update_preview_if_needed()
        ctl.resolve_pending_preview()

        ctl.update_preview_if_needed()

        self.assertIsNone(state.preview_pending_id)
        self.assertFalse(ctl.resolve_pending_preview())
        self.assertEqual(jj.show.call_count, 1)

    def test_stale_commit_is_refetched(self) -> None:
        ctl, state, _ = make_controller()
        state.preview_cache.insert(PreviewCacheEntry(change_id="aaaaaaaa", commit_id="old", content=DiffContent()))

        ctl.update_preview_if_needed()

        self.assertEqual(state.preview_pending_id, "aaaaaaaa")

    def test_pending_dropped_when_selection_moves(self) -> None:
        ctl, state, jj = make_controller()
        ctl.update_preview_if_needed()
        state.log.select_change_by_id("bbbbbbbb")

        self.assertFalse(ctl.resolve_pending_preview())

        self.assertIsNone(state.preview_pending_id)
        jj.show.assert_not_called()

    def test_fetch_failure_leaves_no_entry(self) -> None:
        ctl, state, jj = make_controller()
        jj.show.side_effect = CommandFailed("boom", 1)
        ctl.update_preview_if_needed()

        ctl.resolve_pending_preview()

        self.assertNotIn("aaaaaaaa", state.preview_cache)
        self.assertIsNone(state.error_message)

    def test_disabled_preview_does_nothing(self) -> None:
        ctl, state, _ = make_controller()
        state.preview_enabled = False

        ctl.update_preview_if_needed()

        self.assertIsNone(state.preview_pending_id)

    def test_toggle_off_clears_cache(self) -> None:
        ctl, state, _ = make_controller()
        state.preview_cache.insert(PreviewCacheEntry(change_id="aaaaaaaa", commit_id="c-aaaaaaaa", content=DiffContent()))

        ctl.preview.toggle()

        self.assertFalse(state.preview_enabled)
        self.assertEqual(len(state.preview_cache), 0)


if __name__ == "__main__":
    unittest.main()
