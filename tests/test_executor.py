from __future__ import annotations

import subprocess
import unittest
from pathlib import Path
from unittest import mock

from jjview.jj import CommandFailed, JjExecutor, JjNotFound, NotARepository
from jjview.model import DiffDisplayFormat, PushBulkMode, RebaseMode

LOG_ROW = "@  qpvuntsm\tabc12345\tdev@example.com\t2024-05-01T10:00:00+0000\tAdd feature\ttrue\tfalse\tmain\tfalse\n"


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class JjExecutorTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("jjview.jj.executor.subprocess.run")
        self.run = patcher.start()
        self.addCleanup(patcher.stop)
        self.jj = JjExecutor(Path("/repo"))

    def last_command(self) -> list[str]:
        return self.run.call_args.args[0]

    def test_captured_commands_disable_color(self) -> None:
        self.run.return_value = _completed(stdout="ok")

        self.assertEqual(self.jj.run(["status"]), "ok")

        self.assertEqual(self.last_command(), ["jj", "-R", "/repo", "--color=never", "status"])
        self.assertIs(self.run.call_args.kwargs["stdin"], subprocess.DEVNULL)

    def test_no_repo_path_omits_flag(self) -> None:
        self.run.return_value = _completed()

        JjExecutor().run(["root"])

        self.assertEqual(self.last_command(), ["jj", "--color=never", "root"])

    def test_not_a_repository(self) -> None:
        self.run.return_value = _completed(stderr='Error: There is no jj repo in "."\n', returncode=1)

        with self.assertRaises(NotARepository):
            self.jj.run(["status"])

    def test_command_failed_keeps_stderr_and_code(self) -> None:
        self.run.return_value = _completed(stderr="Error: Revision `nope` doesn't exist\n", returncode=1)

        with self.assertRaises(CommandFailed) as ctx:
            self.jj.run(["log"])

        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertIn("doesn't exist", ctx.exception.stderr)
        self.assertEqual(str(ctx.exception), "Error: Revision `nope` doesn't exist")

    def test_missing_binary(self) -> None:
        self.run.side_effect = FileNotFoundError("jj")

        with self.assertRaises(JjNotFound):
            self.jj.run(["status"])

    def test_combined_output(self) -> None:
        self.run.return_value = _completed(stdout="out\n", stderr="Working copy now at: abc\n")

        self.assertEqual(self.jj.run_combined(["next"]), "out\nWorking copy now at: abc\n")

    def test_interactive_keeps_color_and_terminal(self) -> None:
        self.run.return_value = _completed(returncode=3)

        self.assertEqual(self.jj.split("qpvuntsm"), 3)

        self.assertEqual(self.last_command(), ["jj", "-R", "/repo", "split", "-r", "qpvuntsm"])
        self.assertNotIn("stdout", self.run.call_args.kwargs)

    def test_diffedit_scopes_to_one_file(self) -> None:
        self.run.return_value = _completed()

        self.assertEqual(self.jj.diffedit("@", "src/lib.py"), 0)
        self.assertEqual(self.last_command(), ["jj", "-R", "/repo", "diffedit", "-r", "@", "src/lib.py"])

        self.jj.diffedit("qpvuntsm")
        self.assertEqual(self.last_command(), ["jj", "-R", "/repo", "diffedit", "-r", "qpvuntsm"])

    def test_restore_and_history_rewrites(self) -> None:
        self.run.return_value = _completed()

        self.jj.restore_file("README.md")
        self.assertEqual(self.last_command()[-2:], ["restore", "README.md"])
        self.jj.restore_all()
        self.assertEqual(self.last_command()[-1], "restore")
        self.jj.simplify_parents("qpvuntsm")
        self.assertEqual(self.last_command()[-3:], ["simplify-parents", "-r", "qpvuntsm"])
        self.jj.parallelize("qpvuntsm", "rlvkpnrz")
        self.assertEqual(self.last_command()[-2:], ["parallelize", "qpvuntsm::rlvkpnrz"])

    def test_log_arguments_and_parsing(self) -> None:
        self.run.return_value = _completed(stdout=LOG_ROW)

        changes = self.jj.log("mine()", True)

        command = self.last_command()
        self.assertIn("-r", command)
        self.assertEqual(command[command.index("-r") + 1], "mine()")
        self.assertEqual(command[-1], "--reversed")
        self.assertEqual([change.change_id for change in changes], ["qpvuntsm"])

    def test_show_adds_format_flag(self) -> None:
        self.run.return_value = _completed(stdout="Commit ID: abc\n")

        content = self.jj.show("qpvuntsm", DiffDisplayFormat.GIT)

        self.assertEqual(self.last_command()[-1], "--git")
        self.assertEqual(content.commit_id, "abc")

    def test_change_info(self) -> None:
        self.run.return_value = _completed(stdout="qpvuntsm\tAdd feature\n")

        self.assertEqual(self.jj.get_change_info("main"), ("qpvuntsm", "Add feature"))

    def test_redo_target_after_undo(self) -> None:
        self.run.return_value = _completed(stdout="op2\tundo operation op1\nop1\tdescribe commit abc\n")

        self.assertEqual(self.jj.get_redo_target(), "op1")

    def test_no_redo_after_regular_operation(self) -> None:
        self.run.return_value = _completed(stdout="op2\tdescribe commit abc\nop1\tnew empty commit\n")

        self.assertIsNone(self.jj.get_redo_target())

    def test_rebase_flags(self) -> None:
        self.run.return_value = _completed(stderr="Rebased 1 commits\n")

        output = self.jj.rebase("src", "dst", RebaseMode.INSERT_AFTER, ["--skip-emptied"])

        self.assertEqual(self.last_command()[-5:], ["-r", "src", "-A", "dst", "--skip-emptied"])
        self.assertEqual(output, "Rebased 1 commits\n")

    def test_push_dry_run_and_remote(self) -> None:
        self.run.return_value = _completed()

        self.jj.git_push_bookmark("main", "origin", dry_run=True)
        self.assertEqual(self.last_command()[-6:], ["push", "--bookmark", "main", "--remote", "origin", "--dry-run"])

        self.jj.git_push_bulk(PushBulkMode.TRACKED)
        self.assertEqual(self.last_command()[-3:], ["git", "push", "--tracked"])

    def test_remote_list(self) -> None:
        self.run.return_value = _completed(stdout="origin git@example.com:a.git\nupstream https://example.com/b\n")

        self.assertEqual(self.jj.git_remote_list(), ["origin", "upstream"])


if __name__ == "__main__":
    unittest.main()
