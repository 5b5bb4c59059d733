"""History-editing flows: describe, edit, new, commit, squash, rebase, and friends.

Interactive commands (external describe, squash, split, diffedit) run with the
TUI suspended and are judged only by their exit code.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cache import DirtyFlags
from ..dialog import Abandon, Dialog, OpRestore, Parallelize, RestoreAll, RestoreFile, Revert, SimplifyParents
from ..jj import JjError, JjNotFound, constants
from ..model import Change, Notification, RebaseMode
from ..state import PromptKind, PromptState, View
from ..text import short_id
from ..view_state import LogMode
from .base import ActionGroup

logger = logging.getLogger(__name__)

SKIP_EMPTIED_SUFFIX = " (empty commits skipped)"
SKIP_EMPTIED_UNSUPPORTED_SUFFIX = " (--skip-emptied not supported, empty commits may remain)"
BRANCH_MODE_UNSUPPORTED = "Branch mode (-b) not supported in this jj version. Use Source mode (-s) instead."
NOTHING_TO_REDO = "Nothing to redo (use 'o' for operation history after multiple undos)"
NO_REDUNDANT_PARENTS = "No redundant parents found"
NOTHING_TO_PARALLELIZE = "Nothing to parallelize (revisions may not be connected)"

_UNKNOWN_FLAG_MARKERS = ("unexpected argument", "unrecognized", "unknown flag", "unknown option")


def is_rebase_flag_unsupported(error: JjError) -> bool:
    lower = str(error).lower()
    return any(marker in lower for marker in _UNKNOWN_FLAG_MARKERS)


def rebase_success_message(mode: RebaseMode, destination: str, skipped: bool) -> str:
    dest = short_id(destination)
    if mode is RebaseMode.SOURCE:
        message = "Rebased source and descendants successfully"
    elif mode is RebaseMode.BRANCH:
        message = "Rebased branch successfully"
    elif mode is RebaseMode.INSERT_AFTER:
        message = f"Inserted after {dest} successfully"
    elif mode is RebaseMode.INSERT_BEFORE:
        message = f"Inserted before {dest} successfully"
    else:
        message = "Rebased successfully"
    return message + SKIP_EMPTIED_SUFFIX if skipped else message


def parse_next_prev_message(output: str, direction: str) -> str:
    trimmed = output.strip()
    if not trimmed:
        return f"Moved {direction} successfully"
    return f"Moved {direction}: {trimmed.splitlines()[0]}"


def format_next_prev_error(error: JjError, direction: str) -> str:
    text = str(error)
    if "more than one child" in text or "more than one parent" in text:
        relatives = "children" if direction == "next" else "parents"
        return f"Cannot move {direction}: multiple {relatives}. Use 'e' to edit a specific revision."
    if "No descendant" in text or "no child" in text:
        return "Already at the newest change"
    if "No ancestor" in text or "no parent" in text:
        return "Already at the root"
    return f"Move {direction} failed: {text}"


def parse_duplicate_output(output: str) -> str | None:
    """Return the new change id from ``Duplicated <commit> as <change> ...``."""
    for line in output.splitlines():
        if not line.startswith("Duplicated "):
            continue
        parts = line[len("Duplicated ") :].split(" ", 3)
        if len(parts) >= 3 and parts[1] == "as":
            return parts[2]
    return None


class ChangeActions(ActionGroup):
    def _selected(self) -> Change | None:
        return self.state.log.selected_change()

    # Operation history

    def undo(self) -> None:
        self.ctl.run_jj_action(self.jj.undo, "Undo failed", "Undo complete", DirtyFlags.everything())

    def redo(self) -> None:
        try:
            target = self.jj.get_redo_target()
        except JjError as exc:
            self.ctl.set_error(f"Failed to check redo target: {exc}")
            return
        if target is None:
            self.ctl.notify_info(NOTHING_TO_REDO)
            return
        self.ctl.run_jj_action(lambda: self.jj.redo(target), "Redo failed", "Redo complete", DirtyFlags.everything())

    def start_op_restore(self) -> None:
        operation = self.state.operations.selected_operation()
        if operation is None:
            return
        if operation.is_current:
            self.ctl.notify_info("Already at this operation")
            return
        self.ctl.open_dialog(
            Dialog.confirm(
                "Restore Operation",
                f"Restore repository to operation {operation.short_id}?\n{operation.description}",
                "Undo with 'u' if needed.",
                OpRestore(operation_id=operation.id),
            )
        )

    def op_restore(self, operation_id: str) -> None:
        restored = self.ctl.run_jj_action(
            lambda: self.jj.op_restore(operation_id),
            "Restore failed",
            f"Restored to {operation_id[:12]} (undo: u)",
            DirtyFlags.everything(),
        )
        if restored:
            self.ctl.go_to_view(View.LOG)

    # Descriptions

    def start_describe_input(self, change_id: str) -> None:
        """Open the one-line describe prompt, or the editor for multi-line text."""
        try:
            description = self.jj.get_description(change_id).rstrip("\n")
        except JjError as exc:
            self.ctl.set_error(f"Failed to get description: {exc}")
            return
        if "\n" in description:
            self.describe_external(change_id)
            return
        self.state.prompt = PromptState(PromptKind.DESCRIBE, "Describe: ", description, change_id)

    def _description_or_none(self, change_id: str) -> str | None:
        try:
            return self.jj.get_description(change_id).rstrip()
        except JjError:
            return None

    def describe_external(self, change_id: str) -> None:
        try:
            immutable = self.jj.is_immutable(change_id)
        except JjError:
            immutable = False
        if immutable:
            self.ctl.set_error("Cannot describe: commit is immutable")
            return
        before = self._description_or_none(change_id)
        try:
            with self.ctl.suspend():
                code = self.jj.describe_edit(change_id)
        except (JjNotFound, OSError) as exc:
            self.ctl.set_error(f"Describe failed: {exc}")
            return
        if code != 0:
            self.ctl.set_error(f"Describe editor exited with error (code: {code})")
            return
        after = self._description_or_none(change_id)
        if before is not None and after is not None:
            if before == after:
                self.ctl.notify_info("Description unchanged")
            else:
                self.ctl.notify_success("Description updated")
        else:
            self.ctl.notify_success("Describe editor closed")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_only())

    def describe(self, change_id: str, message: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.describe(change_id, message),
            "Failed to update description",
            "Description updated",
            DirtyFlags.log_only(),
        )

    # Working-copy moves

    def edit(self, change_id: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.edit(change_id),
            "Failed to edit",
            f"Now editing: {short_id(change_id)}",
            DirtyFlags.log_and_status(),
        )

    def new_change(self) -> None:
        self.ctl.run_jj_action(
            self.jj.new_change, "Failed to create change", "Created new change", DirtyFlags.log_and_status()
        )

    def new_change_from(self, change: Change) -> None:
        display = change.bookmarks[0] if change.bookmarks else change.short_id()
        self.ctl.run_jj_action(
            lambda: self.jj.new_change_from(change.change_id),
            "Failed to create change",
            f"Created new change from {display}",
            DirtyFlags.log_and_status(),
        )

    def start_commit_input(self) -> None:
        self.state.prompt = PromptState(PromptKind.COMMIT, "Commit message: ")

    def commit(self, message: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.commit(message), "Commit failed", "Changes committed", DirtyFlags.log_and_status()
        )

    def next(self) -> None:
        self._step(self.jj.next, "next")

    def prev(self) -> None:
        self._step(self.jj.prev, "prev")

    def _step(self, call: Callable[[], str], direction: str) -> None:
        try:
            output = call()
        except JjError as exc:
            self.ctl.notify_warning(format_next_prev_error(exc, direction))
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        self.state.log.select_working_copy()
        self.ctl.notify_success(parse_next_prev_message(output, direction))

    # Restore

    def start_restore_file(self, file_path: str) -> None:
        self.ctl.open_dialog(
            Dialog.confirm(
                "Restore File",
                f"Restore '{file_path}'?\nThis discards your changes to this file.",
                "Undo with 'u' if needed.",
                RestoreFile(file_path=file_path),
            )
        )

    def start_restore_all(self) -> None:
        self.ctl.open_dialog(
            Dialog.confirm(
                "Restore All Files",
                "Restore all files?\nThis discards ALL your changes in the working copy.",
                "Undo with 'u' if needed.",
                RestoreAll(),
            )
        )

    def restore_file(self, file_path: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.restore_file(file_path),
            "Restore failed",
            f"Restored: {file_path}",
            DirtyFlags.log_and_status(),
        )

    def restore_all(self) -> None:
        self.ctl.run_jj_action(
            self.jj.restore_all, "Restore failed", "All files restored", DirtyFlags.log_and_status()
        )

    # Rewrites

    def start_abandon(self) -> None:
        change = self._selected()
        if change is None:
            return
        if change.is_root:
            self.ctl.notify_info("Cannot abandon: root commit")
            return
        self.ctl.open_dialog(
            Dialog.confirm(
                "Abandon Change",
                f"Abandon {change.short_id()}?\n{change.display_description}",
                "Descendants are rebased onto its parent. Undo with 'u' if needed.",
                Abandon(change_id=change.change_id),
            )
        )

    def abandon(self, change_id: str) -> None:
        change = self.state.log.find_change(change_id)
        if change is not None and change.is_root:
            self.ctl.notify_info("Cannot abandon: root commit")
            return
        self.ctl.run_jj_action(
            lambda: self.jj.abandon(change_id),
            "Abandon failed",
            f"Abandoned {short_id(change_id)} (undo: u)",
            DirtyFlags.log_and_status(),
        )

    def start_revert(self) -> None:
        change = self._selected()
        if change is None:
            return
        self.ctl.open_dialog(
            Dialog.confirm(
                "Revert Change",
                f"Revert changes from {change.short_id()}?",
                "Creates a new commit that undoes these changes. Undo with 'u' if needed.",
                Revert(change_id=change.change_id),
            )
        )

    def revert(self, change_id: str) -> None:
        self.ctl.run_jj_action(
            lambda: self.jj.revert(change_id),
            "Revert failed",
            f"Reverted {short_id(change_id)} (undo: u)",
            DirtyFlags.log_only(),
        )

    def duplicate(self, change_id: str) -> None:
        try:
            output = self.jj.duplicate(change_id)
        except JjError as exc:
            self.ctl.set_error(f"Duplicate failed: {exc}")
            return
        new_id = parse_duplicate_output(output)
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_only())
        if self.state.dirty_flags.log:
            # The log reload failed and already set the error banner.
            return
        if new_id is None:
            self.ctl.notify_success("Duplicated successfully")
        elif self.state.log.select_change_by_prefix(new_id):
            self.ctl.notify_success(f"Duplicated as {short_id(new_id)}")
        else:
            self.ctl.notify_success(f"Duplicated as {short_id(new_id)} (not in current revset)")

    def absorb(self) -> None:
        try:
            output = self.jj.absorb()
        except JjError as exc:
            self.ctl.set_error(f"Absorb failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        if not output.strip() or "nothing" in output.lower():
            self.ctl.notify_info("Nothing to absorb")
        else:
            self.ctl.notify_success("Absorb finished")

    def split(self, change: Change) -> None:
        if change.is_empty:
            self.ctl.notify_info("Cannot split: no changes in this revision")
            return
        try:
            with self.ctl.suspend():
                code = self.jj.split(change.change_id)
        except (JjNotFound, OSError) as exc:
            self.ctl.set_error(f"Split failed: {exc}")
            code = None
        if code == 0:
            self.ctl.notify_success(f"Split {change.short_id()} complete (undo: u)")
        elif code is not None:
            self.ctl.notify_info("Split cancelled or failed")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())

    def diffedit(self, change_id: str, file_path: str | None = None) -> None:
        """Open ``jj diffedit`` for a revision, or for one file of it."""
        try:
            with self.ctl.suspend():
                code = self.jj.diffedit(change_id, file_path)
        except (JjNotFound, OSError) as exc:
            self.ctl.set_error(f"Diffedit failed: {exc}")
            code = None
        if code == 0:
            self.ctl.notify_success(f"Diffedit {short_id(change_id)} complete (undo: u)")
        elif code is not None:
            self.ctl.notify_info("Diffedit cancelled or failed")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())

    def start_simplify_parents(self) -> None:
        change = self._selected()
        if change is None:
            return
        self.ctl.open_dialog(
            Dialog.confirm(
                "Simplify Parents",
                f"Simplify parents for {change.short_id()}?",
                "Removes parent edges already implied by other parents.",
                SimplifyParents(change_id=change.change_id),
            )
        )

    def simplify_parents(self, change_id: str) -> None:
        try:
            output = self.jj.simplify_parents(change_id)
        except JjError as exc:
            self.ctl.set_error(f"Simplify parents failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        if not output.strip() or "nothing" in output.lower():
            self.ctl.notify_info(NO_REDUNDANT_PARENTS)
        else:
            self.ctl.notify_success(f"Simplified parents for {short_id(change_id)} (undo: u)")

    # Parallelize: the selected change starts the range, the destination ends it

    def start_parallelize(self) -> None:
        change = self._selected()
        if change is None:
            return
        log = self.state.log
        log.mode = LogMode.PARALLELIZE_SELECT
        log.source_change_id = change.change_id
        self.ctl.notify_info(f"Parallelize from {change.short_id()}: select end of range and press Enter")

    def parallelize(self, from_id: str, to_id: str) -> None:
        try:
            output = self.jj.parallelize(from_id, to_id)
        except JjError as exc:
            self.ctl.set_error(f"Parallelize failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        # An empty stdout is still success here.
        if "nothing" in output.lower():
            self.ctl.notify_info(NOTHING_TO_PARALLELIZE)
        else:
            self.ctl.notify_success("Parallelized (undo: u)")

    # Squash: pick a destination in the log, then run interactively

    def start_squash(self) -> None:
        change = self._selected()
        if change is None:
            return
        if change.is_root:
            self.ctl.notify_info("Cannot squash: root commit has no parent")
            return
        log = self.state.log
        log.mode = LogMode.SQUASH_SELECT
        log.source_change_id = change.change_id
        self.ctl.notify_info(f"Squash {change.short_id()} into: select destination and press Enter")

    def squash_into(self, source: str, destination: str) -> None:
        change = self.state.log.find_change(source)
        if change is not None and change.is_root:
            self.ctl.notify_info("Cannot squash: root commit has no parent")
            return
        try:
            with self.ctl.suspend():
                code = self.jj.squash_into(source, destination)
        except (JjNotFound, OSError) as exc:
            self.ctl.set_error(f"Squash failed: {exc}")
            code = None
        if code == 0:
            self.ctl.notify_success(f"Squashed {short_id(source)} into {short_id(destination)} (undo: u)")
        elif code is not None:
            self.ctl.notify_info("Squash cancelled or failed")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())

    # Rebase: choose a mode, pick a destination, then run

    def start_rebase(self) -> None:
        change = self._selected()
        if change is None:
            return
        log = self.state.log
        log.mode = LogMode.REBASE_MODE_SELECT
        log.source_change_id = change.change_id
        log.skip_emptied = False
        self.ctl.notify_info("Rebase mode: r=revision s=source b=branch A=after B=before (S toggles --skip-emptied)")

    def choose_rebase_mode(self, mode: RebaseMode) -> None:
        log = self.state.log
        log.rebase_mode = mode
        log.mode = LogMode.REBASE_SELECT
        self.ctl.notify_info(f"Rebase {mode.label}: select destination and press Enter")

    def toggle_skip_emptied(self) -> None:
        log = self.state.log
        log.skip_emptied = not log.skip_emptied
        self.ctl.notify_info(f"--skip-emptied {'on' if log.skip_emptied else 'off'}")

    def confirm_destination(self) -> None:
        """Finish a pending rebase, squash or parallelize at the selected change."""
        log = self.state.log
        destination = log.selected_change()
        source = log.source_change_id
        mode = log.mode
        rebase_mode = log.rebase_mode
        skip_emptied = log.skip_emptied
        log.reset_mode()
        if destination is None or source is None:
            return
        if mode == LogMode.SQUASH_SELECT:
            if destination.change_id == source:
                self.ctl.notify_warning("Cannot squash into itself")
                return
            self.squash_into(source, destination.change_id)
        elif mode == LogMode.REBASE_SELECT:
            self.rebase(source, destination.change_id, rebase_mode, skip_emptied)
        elif mode == LogMode.PARALLELIZE_SELECT:
            if destination.change_id == source:
                self.ctl.notify_warning("Select a different change to end the range")
                return
            self.ctl.open_dialog(
                Dialog.confirm(
                    "Parallelize",
                    f"Parallelize {short_id(source)}::{destination.short_id()}?",
                    "The changes become siblings. Undo with 'u' if needed.",
                    Parallelize(from_id=source, to_id=destination.change_id),
                )
            )

    def cancel_mode(self) -> None:
        self.state.log.reset_mode()
        self.ctl.notify_info("Cancelled")

    def rebase(self, source: str, destination: str, mode: RebaseMode, skip_emptied: bool = False) -> None:
        if source == destination:
            self.ctl.notify_warning("Cannot rebase to itself")
            return
        flags = [constants.SKIP_EMPTIED] if skip_emptied else []
        try:
            output = self.jj.rebase(source, destination, mode, flags)
        except JjError as exc:
            if skip_emptied and is_rebase_flag_unsupported(exc):
                self._retry_rebase_without_skip(source, destination, mode)
            elif is_rebase_flag_unsupported(exc) and mode is RebaseMode.BRANCH:
                self.ctl.notify_warning(BRANCH_MODE_UNSUPPORTED)
            else:
                self.ctl.set_error(f"Rebase failed: {exc}")
            return
        self.notify_rebase_success(output, mode, destination, skip_emptied)

    def _retry_rebase_without_skip(self, source: str, destination: str, mode: RebaseMode) -> None:
        logger.info("retrying rebase without %s", constants.SKIP_EMPTIED)
        try:
            output = self.jj.rebase(source, destination, mode)
        except JjError as exc:
            if mode is RebaseMode.BRANCH and is_rebase_flag_unsupported(exc):
                self.ctl.notify_warning(BRANCH_MODE_UNSUPPORTED)
            else:
                self.ctl.set_error(f"Rebase failed: {exc}")
            return
        self.notify_rebase_success(output, mode, destination, False)
        notification = self.state.notification
        if notification is not None:
            self.state.notification = Notification(notification.message + SKIP_EMPTIED_UNSUPPORTED_SUFFIX, notification.kind)

    def notify_rebase_success(self, output: str, mode: RebaseMode, destination: str, skipped: bool) -> None:
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        if "conflict" in output.lower():
            self.ctl.notify_warning("Rebased with conflicts - resolve with jj resolve")
        else:
            self.ctl.notify_success(rebase_success_message(mode, destination, skipped))
