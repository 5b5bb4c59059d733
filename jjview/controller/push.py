"""Push flows: dry-run preview, confirmation, and retry on recoverable refusals.

``jj git push`` refuses some pushes that the user almost always wants
(new remote bookmarks, private commits, empty descriptions). Those refusals
are recognized from the error text and retried once with the matching
``--allow-*`` flag; the success message says which allowance was used.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..cache import DirtyFlags
from ..dialog import (
    Dialog,
    GitPush,
    GitPushBulkConfirm,
    GitPushChange,
    GitPushModeSelect,
    GitPushMultiBookmarkMode,
    GitPushRemoteSelect,
    GitPushRevisions,
    SelectItem,
)
from ..jj import JjError, constants
from ..jj.parser import parse_push_dry_run
from ..model import PushActionKind, PushBulkMode, PushPreviewAction, PushPreviewResult, PushPreviewStatus
from ..text import short_id
from .base import ActionGroup

WARNING_SIGN = "⚠"
REMOTE_UNDO_DETAIL = "Remote changes cannot be undone with 'u'."
FORCE_DETAIL = "This will rewrite remote history! Cannot be undone with 'u'."
PROTECTED_FORCE_DETAIL = "WARNING: Force pushing to protected bookmarks rewrites shared history!"
PROTECTED_SINGLE_FORCE_DETAIL = "WARNING: Force pushing to a protected bookmark rewrites shared history!"
PREVIEW_UNAVAILABLE = "(preview unavailable: will auto-retry with flags)"
REVISIONS_FALLBACK_NOTICE = "--revisions not supported, pushing bookmarks individually"

PRIVATE_NOTE = "private commit allowed"
EMPTY_DESCRIPTION_NOTE = "empty description allowed"
ALLOW_NEW_NOTE = "used deprecated --allow-new"

_UNKNOWN_FLAG_MARKERS = ("unexpected argument", "unrecognized", "unknown flag", "unknown option")


def has_force_push(actions: Sequence[PushPreviewAction]) -> bool:
    return any(action.is_force for action in actions)


def format_preview_action(action: PushPreviewAction) -> str:
    from_short = short_id(action.from_hash or "")
    to_short = short_id(action.to_hash or "")
    kind = action.kind
    if kind is PushActionKind.MOVE_FORWARD:
        return f"Move forward {action.bookmark} from {from_short}.. to {to_short}.."
    if kind is PushActionKind.MOVE_SIDEWAYS:
        return f"{WARNING_SIGN} Move sideways {action.bookmark} from {from_short}.. to {to_short}.."
    if kind is PushActionKind.MOVE_BACKWARD:
        return f"{WARNING_SIGN} Move backward {action.bookmark} from {from_short}.. to {to_short}.."
    if kind is PushActionKind.ADD:
        return f"Add {action.bookmark} to {to_short}.."
    return f"Delete {action.bookmark} from {from_short}.."


def format_preview_actions(actions: Sequence[PushPreviewAction]) -> str:
    """One line per planned ref update; non-fast-forward moves carry a warning sign."""
    return "\n".join(format_preview_action(action) for action in actions)


def format_bookmark_status(
    preview: PushPreviewResult,
    name: str,
    protected: Sequence[str] = constants.DEFAULT_PROTECTED_BOOKMARKS,
) -> str:
    """Short per-bookmark label for the individual push selector."""
    if preview.status is PushPreviewStatus.NOTHING_CHANGED:
        return "up to date"
    if preview.status is PushPreviewStatus.UNPARSED:
        return ""
    for action in preview.actions:
        if action.bookmark != name:
            continue
        if action.kind is PushActionKind.MOVE_FORWARD:
            return f"move from {short_id(action.from_hash or '')}.."
        if action.is_force:
            return f"{WARNING_SIGN} PROTECTED force" if name in protected else f"{WARNING_SIGN} force"
        if action.kind is PushActionKind.ADD:
            return "new"
        return "delete"
    return ""


def is_untracked_bookmark_error(message: str) -> bool:
    lower = message.lower()
    return "refusing to create new remote bookmark" in lower or "not tracked" in lower or "untracked" in lower


def is_private_commit_error(message: str) -> bool:
    lower = message.lower()
    return "private" in lower and "won't push" in lower


def is_empty_description_error(message: str) -> bool:
    lower = message.lower()
    return "no description" in lower and "won't push" in lower


def is_revisions_unsupported_error(message: str) -> bool:
    lower = message.lower()
    return "revisions" in lower and any(marker in lower for marker in _UNKNOWN_FLAG_MARKERS)


def detect_push_retry_flags(message: str) -> list[str]:
    """Return the ``--allow-*`` flags that would get past this refusal."""
    flags: list[str] = []
    if is_private_commit_error(message):
        flags.append(constants.ALLOW_PRIVATE)
    if is_empty_description_error(message):
        flags.append(constants.ALLOW_EMPTY_DESCRIPTION)
    return flags


def retry_notes_from_flags(flags: Sequence[str]) -> list[str]:
    notes: list[str] = []
    if constants.ALLOW_PRIVATE in flags:
        notes.append(PRIVATE_NOTE)
    if constants.ALLOW_EMPTY_DESCRIPTION in flags:
        notes.append(EMPTY_DESCRIPTION_NOTE)
    return notes


def build_push_suffix(used_allow_new: bool, notes: Sequence[str]) -> str:
    parts = [ALLOW_NEW_NOTE] if used_allow_new else []
    parts.extend(notes)
    if not parts:
        return ""
    return f" ({' + '.join(parts)})"


def parse_push_change_bookmark(output: str, change_id: str) -> str:
    """Return the bookmark ``jj git push --change`` created, or its default name."""
    for line in output.splitlines():
        if line.startswith("Creating bookmark "):
            tokens = line[len("Creating bookmark ") :].split()
            if tokens:
                return tokens[0]
    return f"push-{short_id(change_id)}"


def _to_remote(remote: str | None) -> str:
    return f" to {remote}" if remote else ""


class PushActions(ActionGroup):
    def _is_protected(self, name: str) -> bool:
        return name in self.state.protected_bookmarks

    def _confirm_body(
        self,
        actions: Sequence[PushPreviewAction],
        subject: str,
        force_protected_subject: str,
        plain_separator: str = "\n",
    ) -> tuple[str, str]:
        """Pick message and detail by force/protected severity."""
        preview_text = format_preview_actions(actions)
        is_force = has_force_push(actions)
        has_protected = any(self._is_protected(action.bookmark) for action in actions)
        if is_force and has_protected:
            return f"{WARNING_SIGN} FORCE PUSH {force_protected_subject}!\n{preview_text}", PROTECTED_FORCE_DETAIL
        if is_force:
            return f"{WARNING_SIGN} FORCE PUSH {subject}?\n{preview_text}", FORCE_DETAIL
        return f"Push {subject}?{plain_separator}{preview_text}", REMOTE_UNDO_DETAIL

    def start(self) -> None:
        """Entry point: pick a remote if there are several, then a push mode."""
        change = self.state.log.selected_change()
        if change is None:
            return
        if self.state.push_target_remote is None:
            try:
                remotes = self.jj.git_remote_list()
            except JjError:
                remotes = []
            if len(remotes) > 1:
                items = [SelectItem(label=remote, value=remote) for remote in remotes]
                self.ctl.open_dialog(
                    Dialog.select_single("Push to Remote", "Select remote to push to:", items, None, GitPushRemoteSelect())
                )
                return

        if not change.bookmarks:
            items = [
                SelectItem("Push by change ID (--change)", "change"),
                SelectItem("Push all bookmarks (--all)", "all"),
                SelectItem("Push tracked bookmarks (--tracked)", "tracked"),
                SelectItem("Push deleted bookmarks (--deleted)", "deleted"),
            ]
            self.ctl.open_dialog(
                Dialog.select_single(
                    "Push to Remote",
                    "No bookmarks on this change. Choose push mode:",
                    items,
                    None,
                    GitPushModeSelect(change_id=change.change_id),
                )
            )
            return

        if len(change.bookmarks) == 1:
            self._start_single_bookmark(change.bookmarks[0])
            return

        items = [
            SelectItem("All bookmarks on this revision (--revisions)", "revisions"),
            SelectItem("Select individual bookmarks...", "individual"),
        ]
        self.ctl.open_dialog(
            Dialog.select_single(
                "Push to Remote",
                f"{len(change.bookmarks)} bookmarks on {change.short_id()}. Choose push mode:",
                items,
                None,
                GitPushMultiBookmarkMode(change_id=change.change_id, bookmarks=tuple(change.bookmarks)),
            )
        )

    def _start_single_bookmark(self, name: str) -> None:
        plain_body = f'Push bookmark "{name}"?'
        try:
            output = self.jj.git_push_bookmark(name, self.state.push_target_remote, dry_run=True)
        except JjError:
            self._confirm_bookmark_push(name, plain_body, REMOTE_UNDO_DETAIL)
            return
        preview = parse_push_dry_run(output)
        if preview.status is PushPreviewStatus.NOTHING_CHANGED:
            self.ctl.notify_info(f"Nothing to push: {name} is already up to date")
            return
        if preview.status is PushPreviewStatus.UNPARSED:
            self._confirm_bookmark_push(name, plain_body, REMOTE_UNDO_DETAIL)
            return
        preview_text = format_preview_actions(preview.actions)
        is_force = has_force_push(preview.actions)
        if is_force and self._is_protected(name):
            body = f'{WARNING_SIGN} FORCE PUSH to protected bookmark "{name}"!\n{preview_text}'
            detail = PROTECTED_SINGLE_FORCE_DETAIL
        elif is_force:
            body = f'{WARNING_SIGN} FORCE PUSH bookmark "{name}"?\n{preview_text}'
            detail = FORCE_DETAIL
        else:
            body = f'Push bookmark "{name}"?\n{preview_text}'
            detail = REMOTE_UNDO_DETAIL
        self._confirm_bookmark_push(name, body, detail)

    def _confirm_bookmark_push(self, name: str, body: str, detail: str) -> None:
        self.ctl.open_dialog(Dialog.confirm("Push to Remote", body, detail, GitPush()))
        self.state.pending_push_bookmarks = [name]

    def execute(self, names: Sequence[str]) -> None:
        """Push each bookmark, retrying recoverable refusals once with allow flags."""
        if not names:
            self.state.push_target_remote = None
            return
        remote = self.state.push_target_remote
        self.state.push_target_remote = None
        successes: list[str] = []
        errors: list[str] = []
        used_allow_new = False
        notes: list[str] = []
        for name in names:
            try:
                self.jj.git_push_bookmark(name, remote)
            except JjError as exc:
                message = str(exc)
                flags = []
                if is_untracked_bookmark_error(message):
                    flags.append(constants.ALLOW_NEW)
                flags.extend(detect_push_retry_flags(message))
                if not flags:
                    errors.append(f"{name}: {exc}")
                    continue
                try:
                    self.jj.git_push_bookmark(name, remote, extra_flags=flags)
                except JjError as retry_exc:
                    errors.append(f"{name}: {retry_exc}")
                    continue
                used_allow_new = used_allow_new or constants.ALLOW_NEW in flags
                for note in retry_notes_from_flags(flags):
                    if note not in notes:
                        notes.append(note)
            successes.append(name)

        self.state.pending_push_bookmarks = []
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
        if successes:
            suffix = build_push_suffix(used_allow_new, notes)
            self.ctl.notify_success(f"Pushed bookmark: {', '.join(successes)}{_to_remote(remote)}{suffix}")
        if errors:
            self.ctl.set_error(f"Push failed: {'; '.join(errors)}")

    # Push by change id

    def start_change(self, change_id: str) -> None:
        short = short_id(change_id)
        try:
            output = self.jj.git_push_change(change_id, self.state.push_target_remote, dry_run=True)
        except JjError as exc:
            if detect_push_retry_flags(str(exc)):
                body = f"Push by change ID? (creates push-{short})\n{PREVIEW_UNAVAILABLE}"
                self.ctl.open_dialog(
                    Dialog.confirm("Push to Remote", body, REMOTE_UNDO_DETAIL, GitPushChange(change_id=change_id))
                )
            else:
                self.state.push_target_remote = None
                self.ctl.set_error(f"Push failed: {exc}")
            return
        body = f"Push by change ID? (creates push-{short})"
        preview = output.strip()
        if preview:
            body = f"{body}\n{preview}"
        self.ctl.open_dialog(Dialog.confirm("Push to Remote", body, REMOTE_UNDO_DETAIL, GitPushChange(change_id=change_id)))

    def execute_change(self, change_id: str) -> None:
        remote = self.state.push_target_remote
        self.state.push_target_remote = None
        try:
            output = self.jj.git_push_change(change_id, remote)
            flags: list[str] = []
        except JjError as exc:
            flags = detect_push_retry_flags(str(exc))
            if not flags:
                self.ctl.set_error(f"Push failed: {exc}")
                return
            try:
                output = self.jj.git_push_change(change_id, remote, extra_flags=flags)
            except JjError as retry_exc:
                self.ctl.set_error(f"Push failed: {retry_exc}")
                return
        bookmark = parse_push_change_bookmark(output, change_id)
        suffix = build_push_suffix(False, retry_notes_from_flags(flags))
        self.ctl.notify_success(
            f"Pushed change {short_id(change_id)}{_to_remote(remote)} (created bookmark: {bookmark}){suffix}"
        )
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())

    # Bulk pushes (--all / --tracked / --deleted)

    def start_bulk(self, mode: PushBulkMode) -> None:
        remote = self.state.push_target_remote
        try:
            output = self.jj.git_push_bulk(mode, remote, dry_run=True)
        except JjError as exc:
            self.state.push_target_remote = None
            self.ctl.set_error(f"Push failed: {exc}")
            return
        preview = parse_push_dry_run(output)
        callback = GitPushBulkConfirm(mode=mode, remote=remote)
        if preview.status is PushPreviewStatus.CHANGES:
            body, detail = self._confirm_body(
                preview.actions,
                mode.label,
                f"{mode.label} (includes protected bookmarks)",
                plain_separator="\n\n",
            )
            self.ctl.open_dialog(Dialog.confirm("Push to Remote", body, detail, callback))
            return
        text = output.strip()
        if preview.status is PushPreviewStatus.NOTHING_CHANGED or not text or "Nothing changed" in text:
            self.state.push_target_remote = None
            self.ctl.notify_info(f"Nothing to push ({mode.label})")
            return
        self.ctl.open_dialog(Dialog.confirm("Push to Remote", f"Push {mode.label}?\n\n{text}", REMOTE_UNDO_DETAIL, callback))

    def execute_bulk(self, mode: PushBulkMode, remote: str | None) -> None:
        self.state.push_target_remote = None
        self.ctl.run_jj_action(
            lambda: self.jj.git_push_bulk(mode, remote),
            "Push failed",
            f"Pushed {mode.label}",
            DirtyFlags.log_and_status(),
        )

    # Several bookmarks on one change

    def show_individual_select(self, change_id: str, bookmarks: Sequence[str]) -> None:
        items: list[SelectItem] = []
        for name in bookmarks:
            try:
                output = self.jj.git_push_bookmark(name, self.state.push_target_remote, dry_run=True)
                status = format_bookmark_status(parse_push_dry_run(output), name, self.state.protected_bookmarks)
            except JjError:
                status = ""
            label = f"{name} ({status})" if status else name
            items.append(SelectItem(label=label, value=name))
        self.ctl.open_dialog(
            Dialog.select(
                "Push to Remote",
                f"Select bookmarks to push from {short_id(change_id)}:",
                items,
                REMOTE_UNDO_DETAIL,
                GitPush(),
            )
        )

    def start_revisions(self, change_id: str, bookmarks: Sequence[str]) -> None:
        short = short_id(change_id)
        callback = GitPushRevisions(change_id=change_id, bookmarks=tuple(bookmarks))
        try:
            output = self.jj.git_push_revisions(change_id, self.state.push_target_remote, dry_run=True)
        except JjError as exc:
            message = str(exc)
            if is_revisions_unsupported_error(message):
                self.ctl.notify_info(REVISIONS_FALLBACK_NOTICE)
                self.execute(list(bookmarks))
            elif detect_push_retry_flags(message):
                body = f"Push all bookmarks on {short}?\n{PREVIEW_UNAVAILABLE}"
                self.ctl.open_dialog(Dialog.confirm("Push to Remote", body, REMOTE_UNDO_DETAIL, callback))
            else:
                self.state.push_target_remote = None
                self.ctl.set_error(f"Push failed: {exc}")
            return
        preview = parse_push_dry_run(output)
        if preview.status is PushPreviewStatus.NOTHING_CHANGED:
            self.state.push_target_remote = None
            self.ctl.notify_info("Nothing to push: all bookmarks are already up to date")
            return
        if preview.status is PushPreviewStatus.UNPARSED:
            self.ctl.open_dialog(
                Dialog.confirm("Push to Remote", f"Push all bookmarks on {short}?", REMOTE_UNDO_DETAIL, callback)
            )
            return
        body, detail = self._confirm_body(
            preview.actions,
            f"all bookmarks on {short}",
            f"all bookmarks on {short} (includes protected)",
        )
        self.ctl.open_dialog(Dialog.confirm("Push to Remote", body, detail, callback))

    def execute_revisions(self, change_id: str, bookmarks: Sequence[str]) -> None:
        remote = self.state.push_target_remote
        self.state.push_target_remote = None
        try:
            self.jj.git_push_revisions(change_id, remote)
            flags: list[str] = []
        except JjError as exc:
            message = str(exc)
            if is_revisions_unsupported_error(message):
                self.state.push_target_remote = remote
                self.ctl.notify_info(REVISIONS_FALLBACK_NOTICE)
                self.execute(list(bookmarks))
                return
            flags = detect_push_retry_flags(message)
            if not flags:
                self.ctl.set_error(f"Push failed: {exc}")
                return
            try:
                self.jj.git_push_revisions(change_id, remote, extra_flags=flags)
            except JjError as retry_exc:
                self.ctl.set_error(f"Push failed: {retry_exc}")
                return
        suffix = build_push_suffix(False, retry_notes_from_flags(flags))
        self.ctl.notify_success(f"Pushed all bookmarks on {short_id(change_id)}{_to_remote(remote)}{suffix}")
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.log_and_status())
