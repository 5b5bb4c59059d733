"""Synchronous ``jj`` subprocess runner with one method per command.

Captured commands always run with ``--color=never`` so the parsers see plain
text. Interactive commands (editors, merge tools) inherit the terminal and
only report their exit code; callers suspend the TUI around them.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
import subprocess

from ..model import (
    AnnotationContent,
    Bookmark,
    BookmarkInfo,
    Change,
    ConflictFile,
    DiffContent,
    DiffDisplayFormat,
    EvologEntry,
    Operation,
    PushBulkMode,
    RebaseMode,
    Status,
)
from . import constants, templates
from .errors import CommandFailed, JjNotFound, NotARepository, ParseError
from .parser import (
    parse_annotation,
    parse_bookmark_info_list,
    parse_bookmark_list,
    parse_evolog,
    parse_log_lenient,
    parse_op_log,
    parse_resolve_list,
    parse_show,
    parse_show_git,
    parse_show_stat,
    parse_status,
)

logger = logging.getLogger(__name__)

_REDO_BLOCKING_PREFIXES = ("undo", "restore")


def _is_undo_like(description: str) -> bool:
    return description.strip().lower().startswith(_REDO_BLOCKING_PREFIXES)


class JjExecutor:
    """Run ``jj`` against one repository and parse what comes back."""

    def __init__(self, repo_path: Path | None = None, jj_bin: str = constants.JJ_COMMAND) -> None:
        self.repo_path = repo_path
        self.jj_bin = jj_bin

    def _command(self, args: Sequence[str], color: bool = False) -> list[str]:
        command = [self.jj_bin]
        if self.repo_path is not None:
            command += [constants.REPO_PATH, str(self.repo_path)]
        if not color:
            command.append(constants.NO_COLOR)
        command.extend(args)
        return command

    def _execute(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        command = self._command(args)
        logger.debug("running %s", command)
        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as exc:
            raise JjNotFound(self.jj_bin) from exc
        if completed.returncode != 0:
            stderr = completed.stderr or ""
            logger.warning("jj %s failed with status %d: %s", args[0] if args else "", completed.returncode, stderr.strip())
            if constants.NOT_A_REPO_MARKER in stderr:
                raise NotARepository(str(self.repo_path or ""))
            raise CommandFailed(stderr, completed.returncode)
        return completed

    def run(self, args: Sequence[str]) -> str:
        """Run ``jj`` and return stdout, raising a ``JjError`` on failure."""
        return self._execute(args).stdout or ""

    def run_combined(self, args: Sequence[str]) -> str:
        """Run ``jj`` and return stdout followed by stderr.

        Several commands (push, fetch, next) report their result on stderr.
        """
        completed = self._execute(args)
        return (completed.stdout or "") + (completed.stderr or "")

    def run_interactive(self, args: Sequence[str]) -> int:
        """Run ``jj`` attached to the terminal and return its exit code."""
        command = self._command(args, color=True)
        logger.debug("running interactively %s", command)
        try:
            completed = subprocess.run(command, check=False)
        except FileNotFoundError as exc:
            raise JjNotFound(self.jj_bin) from exc
        return completed.returncode

    # Log, show, status

    def log_raw(self, revset: str | None = None, reversed_order: bool = False) -> str:
        args = ["log", "-T", templates.LOG_TEMPLATE]
        if revset:
            args += ["-r", revset]
        if reversed_order:
            args.append("--reversed")
        return self.run(args)

    def log(self, revset: str | None = None, reversed_order: bool = False) -> list[Change]:
        return parse_log_lenient(self.log_raw(revset, reversed_order))

    def status(self) -> Status:
        return parse_status(self.run(["status"]))

    def show_raw(self, change_id: str, display: DiffDisplayFormat = DiffDisplayFormat.COLOR_WORDS) -> str:
        args = ["show", "-r", change_id]
        if display.flag:
            args.append(display.flag)
        return self.run(args)

    def show(self, change_id: str, display: DiffDisplayFormat = DiffDisplayFormat.COLOR_WORDS) -> DiffContent:
        output = self.show_raw(change_id, display)
        try:
            if display is DiffDisplayFormat.STAT:
                return parse_show_stat(output)
            if display is DiffDisplayFormat.GIT:
                return parse_show_git(output)
            return parse_show(output)
        except ParseError as exc:
            logger.warning("unparsable show output for %s: %s", change_id, exc)
            return DiffContent()

    def evolog(self, change_id: str) -> list[EvologEntry]:
        return parse_evolog(self.run(["evolog", "-r", change_id, constants.NO_GRAPH, "-T", templates.EVOLOG_TEMPLATE]))

    def file_annotate(self, file_path: str, revision: str | None = None) -> AnnotationContent:
        args = ["file", "annotate"]
        if revision:
            args += ["-r", revision]
        args.append(file_path)
        return parse_annotation(self.run(args), file_path, revision)

    def _log_scalar(self, revision: str, template: str) -> str:
        return self.run(["log", constants.NO_GRAPH, "-r", revision, "-T", template])

    def get_description(self, change_id: str) -> str:
        return self._log_scalar(change_id, templates.DESCRIPTION_TEMPLATE)

    def has_conflict(self, change_id: str) -> bool:
        return self._log_scalar(change_id, templates.CONFLICT_TEMPLATE).strip() == "true"

    def is_immutable(self, change_id: str) -> bool:
        return self._log_scalar(change_id, templates.IMMUTABLE_TEMPLATE).strip() == "true"

    def get_change_info(self, revision: str) -> tuple[str, str] | None:
        """Return ``(change_id, first description line)`` for a revision."""
        for line in self._log_scalar(revision, templates.CHANGE_LOOKUP_TEMPLATE).splitlines():
            change_id, sep, description = line.partition("\t")
            if sep and change_id:
                return change_id, description
        return None

    # Change editing

    def describe(self, change_id: str, message: str) -> str:
        return self.run(["describe", change_id, "-m", message])

    def describe_edit(self, change_id: str) -> int:
        return self.run_interactive(["describe", "-r", change_id, "--edit"])

    def edit(self, change_id: str) -> str:
        return self.run(["edit", change_id])

    def new_change(self) -> str:
        return self.run(["new"])

    def new_change_from(self, revision: str) -> str:
        return self.run(["new", revision])

    def commit(self, message: str) -> str:
        return self.run(["commit", "-m", message])

    def abandon(self, change_id: str) -> str:
        return self.run(["abandon", change_id])

    def duplicate(self, change_id: str) -> str:
        return self.run_combined(["duplicate", change_id])

    def revert(self, change_id: str) -> str:
        return self.run(["revert", "-r", change_id, "--onto", "@"])

    def next(self) -> str:
        return self.run_combined(["next"])

    def prev(self) -> str:
        return self.run_combined(["prev"])

    def absorb(self) -> str:
        return self.run_combined(["absorb"])

    def squash_into(self, source: str, destination: str) -> int:
        return self.run_interactive(["squash", "--from", source, "--into", destination])

    def split(self, change_id: str) -> int:
        return self.run_interactive(["split", "-r", change_id])

    def diffedit(self, change_id: str, file_path: str | None = None) -> int:
        args = ["diffedit", "-r", change_id]
        if file_path:
            args.append(file_path)
        return self.run_interactive(args)

    def restore_file(self, file_path: str) -> str:
        """Discard working-copy changes to ``file_path``."""
        return self.run(["restore", file_path])

    def restore_all(self) -> str:
        return self.run(["restore"])

    def simplify_parents(self, change_id: str) -> str:
        return self.run_combined(["simplify-parents", "-r", change_id])

    def parallelize(self, from_id: str, to_id: str) -> str:
        # Success is reported on stderr only; stdout stays empty.
        return self.run(["parallelize", f"{from_id}::{to_id}"])

    def rebase(
        self,
        source: str,
        destination: str,
        mode: RebaseMode = RebaseMode.REVISION,
        extra_flags: Sequence[str] = (),
    ) -> str:
        args = ["rebase", mode.source_flag, source, mode.destination_flag, destination, *extra_flags]
        return self.run_combined(args)

    # Operation history

    def undo(self) -> str:
        return self.run(["undo"])

    def get_redo_target(self) -> str | None:
        """Return the operation to restore for a single-step redo, if any.

        Redo is only offered when the newest operation is an undo or restore
        and the one before it is a regular operation.
        """
        output = self.run(["op", "log", constants.NO_GRAPH, "-T", templates.REDO_PROBE_TEMPLATE, "--limit", "2"])
        rows = [line.split("\t", 1) for line in output.splitlines() if line.strip()]
        if len(rows) < 2 or any(len(row) < 2 for row in rows[:2]):
            return None
        newest, previous = rows[0], rows[1]
        if not _is_undo_like(newest[1]) or _is_undo_like(previous[1]):
            return None
        return previous[0].strip()

    def redo(self, operation_id: str) -> str:
        return self.op_restore(operation_id)

    def op_log(self, limit: int | None = constants.OP_LOG_LIMIT) -> list[Operation]:
        args = ["op", "log", constants.NO_GRAPH, "-T", templates.OP_LOG_TEMPLATE]
        if limit is not None:
            args += ["--limit", str(limit)]
        return parse_op_log(self.run(args))

    def op_restore(self, operation_id: str) -> str:
        return self.run(["op", "restore", operation_id])

    # Bookmarks

    def bookmark_create(self, name: str, change_id: str) -> str:
        return self.run(["bookmark", "create", name, "-r", change_id])

    def bookmark_set(self, name: str, change_id: str) -> str:
        return self.run(["bookmark", "set", name, "-r", change_id, constants.ALLOW_BACKWARDS])

    def bookmark_move(self, name: str, to: str = "@", allow_backwards: bool = False) -> str:
        args = ["bookmark", "move", name, "--to", to]
        if allow_backwards:
            args.append(constants.ALLOW_BACKWARDS)
        return self.run(args)

    def bookmark_delete(self, names: Sequence[str]) -> str:
        return self.run(["bookmark", "delete", *names])

    def bookmark_rename(self, old_name: str, new_name: str) -> str:
        return self.run(["bookmark", "rename", old_name, new_name])

    def bookmark_forget(self, names: Sequence[str]) -> str:
        return self.run(["bookmark", "forget", *names])

    def bookmark_track(self, names: Sequence[str]) -> str:
        return self.run(["bookmark", "track", *names])

    def bookmark_untrack(self, names: Sequence[str]) -> str:
        return self.run(["bookmark", "untrack", *names])

    def bookmark_list_all(self) -> list[Bookmark]:
        return parse_bookmark_list(self.run(["bookmark", "list", "--all-remotes", "-T", templates.BOOKMARK_LIST_TEMPLATE]))

    def bookmark_list_with_info(self) -> list[BookmarkInfo]:
        return parse_bookmark_info_list(
            self.run(["bookmark", "list", "--all-remotes", "-T", templates.BOOKMARK_INFO_TEMPLATE])
        )

    def local_bookmark_names(self) -> list[str]:
        return [bookmark.name for bookmark in self.bookmark_list_all() if bookmark.is_local]

    # Conflicts

    def resolve_list(self, change_id: str | None = None) -> list[ConflictFile]:
        args = ["resolve", "--list"]
        if change_id:
            args += ["-r", change_id]
        return parse_resolve_list(self.run(args))

    def resolve_with_tool(self, file_path: str, tool: str, change_id: str | None = None) -> str:
        args = ["resolve", "--tool", tool]
        if change_id:
            args += ["-r", change_id]
        args.append(file_path)
        return self.run_combined(args)

    def resolve(self, file_path: str, change_id: str | None = None) -> int:
        args = ["resolve"]
        if change_id:
            args += ["-r", change_id]
        args.append(file_path)
        return self.run_interactive(args)

    # Remotes

    def git_remote_list(self) -> list[str]:
        """Return remote names from ``jj git remote list`` (``name url`` rows)."""
        names: list[str] = []
        for line in self.run(["git", "remote", "list"]).splitlines():
            tokens = line.split()
            if tokens:
                names.append(tokens[0])
        return names

    def git_fetch(self) -> str:
        return self.run_combined(["git", "fetch"])

    def git_fetch_all_remotes(self) -> str:
        return self.run_combined(["git", "fetch", "--all-remotes"])

    def git_fetch_remote(self, remote: str) -> str:
        return self.run_combined(["git", "fetch", "--remote", remote])

    def git_fetch_branch(self, branch: str) -> str:
        return self.run_combined(["git", "fetch", "--branch", branch])

    def _push(
        self,
        selector: Sequence[str],
        remote: str | None,
        extra_flags: Sequence[str],
        dry_run: bool,
    ) -> str:
        args = ["git", "push", *selector]
        if remote:
            args += ["--remote", remote]
        args.extend(extra_flags)
        if dry_run:
            args.append(constants.DRY_RUN)
        return self.run_combined(args)

    def git_push_bookmark(
        self,
        name: str,
        remote: str | None = None,
        extra_flags: Sequence[str] = (),
        dry_run: bool = False,
    ) -> str:
        return self._push(["--bookmark", name], remote, extra_flags, dry_run)

    def git_push_change(
        self,
        change_id: str,
        remote: str | None = None,
        extra_flags: Sequence[str] = (),
        dry_run: bool = False,
    ) -> str:
        return self._push(["--change", change_id], remote, extra_flags, dry_run)

    def git_push_revisions(
        self,
        change_id: str,
        remote: str | None = None,
        extra_flags: Sequence[str] = (),
        dry_run: bool = False,
    ) -> str:
        return self._push(["--revisions", change_id], remote, extra_flags, dry_run)

    def git_push_bulk(self, mode: PushBulkMode, remote: str | None = None, dry_run: bool = False) -> str:
        return self._push([mode.flag], remote, (), dry_run)
