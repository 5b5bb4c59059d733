from __future__ import annotations

import unittest

from jjview.jj import ParseError
from jjview.jj.parser import (
    jumpable_bookmarks,
    parse_annotation,
    parse_bookmark_info_list,
    parse_bookmark_list,
    parse_evolog,
    parse_log,
    parse_log_lenient,
    parse_op_log,
    parse_push_dry_run,
    parse_resolve_list,
    parse_show,
    parse_show_git,
    parse_show_stat,
    parse_status,
    untracked_remote_bookmarks,
)
from jjview.jj.parser.diff import parse_line_numbers
from jjview.jj.parser.log import split_graph_prefix
from jjview.model import DiffLineKind, FileState, PushActionKind, PushPreviewStatus

LOG_ROW = "@  qpvuntsm\tabc12345\tdev@example.com\t2024-05-01T10:00:00+0000\tAdd feature\ttrue\tfalse\tmain,feat\tfalse"


class LogParserTests(unittest.TestCase):
    def test_change_row_fields(self) -> None:
        changes = parse_log(LOG_ROW + "\n")

        self.assertEqual(len(changes), 1)
        change = changes[0]
        self.assertEqual(change.change_id, "qpvuntsm")
        self.assertEqual(change.commit_id, "abc12345")
        self.assertEqual(change.graph_prefix, "@  ")
        self.assertTrue(change.is_working_copy)
        self.assertFalse(change.is_empty)
        self.assertEqual(change.bookmarks, ["main", "feat"])
        self.assertFalse(change.has_conflict)

    def test_graph_only_rows_are_kept_in_order(self) -> None:
        output = "\n".join([LOG_ROW, "│", LOG_ROW.replace("@  qpvuntsm", "○  rlvkpnrz"), "~"])

        changes = parse_log(output)

        self.assertEqual([c.is_graph_only for c in changes], [False, True, False, True])
        self.assertEqual(changes[1].graph_prefix, "│")
        self.assertEqual(changes[2].change_id, "rlvkpnrz")

    def test_empty_lines_are_dropped(self) -> None:
        self.assertEqual(parse_log("\n\n"), [])

    def test_row_without_change_id_raises(self) -> None:
        with self.assertRaises(ParseError):
            split_graph_prefix("│ ○  ")

    def test_too_few_fields_raises_but_lenient_skips(self) -> None:
        bad = "○  abcdefgh\tonly\ttwo"
        with self.assertRaises(ParseError):
            parse_log(bad)
        self.assertEqual([c.change_id for c in parse_log_lenient(bad + "\n" + LOG_ROW)], ["qpvuntsm"])


class StatusParserTests(unittest.TestCase):
    def test_files_and_change_ids(self) -> None:
        output = (
            "Working copy changes:\n"
            "A new.py\n"
            "M src/app.py\n"
            "D old.txt\n"
            "R src/{a.py => b.py}\n"
            "Working copy : kxryzmor 1234abcd (no description set)\n"
            "Parent commit: qpvuntsm 5678ef01 main | Add feature\n"
        )

        status = parse_status(output)

        self.assertEqual([f.state for f in status.files], [
            FileState.ADDED,
            FileState.MODIFIED,
            FileState.DELETED,
            FileState.RENAMED,
        ])
        renamed = status.files[3]
        self.assertEqual(renamed.path, "src/b.py")
        self.assertEqual(renamed.renamed_from, "src/a.py")
        self.assertEqual(status.working_copy_change_id, "kxryzmor")
        self.assertEqual(status.parent_change_id, "qpvuntsm")
        self.assertFalse(status.has_conflicts)

    def test_conflicted_file_sets_flag(self) -> None:
        status = parse_status("C conflicted.txt\n")

        self.assertTrue(status.has_conflicts)
        self.assertEqual(status.files[0].indicator, "C")

    def test_clean_working_copy(self) -> None:
        status = parse_status("The working copy has no changes.\n")

        self.assertTrue(status.is_clean)


class DiffParserTests(unittest.TestCase):
    SHOW = (
        "Commit ID: abc123456789\n"
        "Change ID: qpvuntsmwlqt\n"
        "Author   : Dev <dev@example.com> (2024-05-01 10:00:00)\n"
        "Committer: Dev <dev@example.com> (2024-05-01 10:00:00)\n"
        "\n"
        "    Add feature\n"
        "\n"
        "    More detail\n"
        "\n"
        "Modified regular file src/app.py:\n"
        "   1    1: import os\n"
        "   2     : -old\n"
        "        2: +new\n"
        "Added regular file new.py:\n"
        "        1: print('hi')\n"
    )

    def test_header_fields(self) -> None:
        content = parse_show(self.SHOW)

        self.assertEqual(content.commit_id, "abc123456789")
        self.assertEqual(content.author, "Dev <dev@example.com>")
        self.assertEqual(content.timestamp, "2024-05-01 10:00:00")
        self.assertEqual(content.description, "Add feature\n\nMore detail")

    def test_lines_and_file_headers(self) -> None:
        content = parse_show(self.SHOW)
        kinds = [line.kind for line in content.lines]

        self.assertEqual(kinds[0], DiffLineKind.FILE_HEADER)
        self.assertEqual(content.lines[0].content, "src/app.py")
        self.assertIn(DiffLineKind.SEPARATOR, kinds)
        self.assertEqual(content.file_count, 2)
        added = [line for line in content.lines if line.kind is DiffLineKind.ADDED]
        self.assertIn("print('hi')", [line.content for line in added])

    def test_line_numbers_single_column(self) -> None:
        self.assertEqual(parse_line_numbers("   1    2"), (1, 2))
        self.assertEqual(parse_line_numbers("        2"), (None, 2))
        self.assertEqual(parse_line_numbers("   2     "), (2, None))

    def test_stat_format_keeps_rows(self) -> None:
        content = parse_show_stat("Commit ID: abc\n\n    msg\n\nsrc/app.py | 2 +-\n1 file changed\n")

        self.assertEqual([line.content for line in content.lines], ["src/app.py | 2 +-", "1 file changed"])

    def test_stat_format_without_changes(self) -> None:
        content = parse_show_stat("Commit ID: abc\n")

        self.assertEqual(content.lines[0].content, "(no changes)")

    def test_git_format(self) -> None:
        output = (
            "Commit ID: abc\n"
            "\n"
            "diff --git a/src/app.py b/src/app.py\n"
            "index 111..222 100644\n"
            "--- a/src/app.py\n"
            "+++ b/src/app.py\n"
            "@@ -1,2 +1,2 @@\n"
            " keep\n"
            "-old\n"
            "+new\n"
        )

        content = parse_show_git(output)

        self.assertEqual(content.lines[0].content, "src/app.py")
        self.assertEqual(
            [line.kind for line in content.lines[1:]],
            [DiffLineKind.CONTEXT, DiffLineKind.CONTEXT, DiffLineKind.DELETED, DiffLineKind.ADDED],
        )


class OperationParserTests(unittest.TestCase):
    def test_first_row_is_current(self) -> None:
        output = "aaaaaaaaaaaa\tdev@host\t2 minutes ago\tsnapshot working copy\nbbbbbbbbbbbb\tdev@host\t1 hour ago\tnew empty commit\n"

        operations = parse_op_log(output)

        self.assertEqual([op.is_current for op in operations], [True, False])
        self.assertEqual(operations[1].description, "new empty commit")

    def test_short_rows_are_skipped(self) -> None:
        self.assertEqual(parse_op_log("abc\tdev\n"), [])


class BookmarkParserTests(unittest.TestCase):
    def test_list_local_and_remote(self) -> None:
        bookmarks = parse_bookmark_list("main\tfalse\nmain\torigin\ttrue\nfeat\torigin\tfalse\nodd\n")

        self.assertEqual([b.full_name for b in bookmarks], ["main", "main@origin", "feat@origin"])
        self.assertTrue(bookmarks[0].is_local)
        self.assertEqual([b.full_name for b in untracked_remote_bookmarks(bookmarks)], ["feat@origin"])

    def test_info_list_skips_git_remote(self) -> None:
        output = (
            "main\t\tfalse\tqpvuntsm\tabc12345\tAdd feature\n"
            "main\tgit\ttrue\tqpvuntsm\tabc12345\tAdd feature\n"
            "gone\torigin\tfalse\t\t\t\n"
        )

        infos = parse_bookmark_info_list(output)

        self.assertEqual([info.bookmark.full_name for info in infos], ["main", "gone@origin"])
        self.assertEqual(infos[0].change_id, "qpvuntsm")
        self.assertIsNone(infos[1].change_id)
        self.assertEqual([info.name for info in jumpable_bookmarks(infos)], ["main"])


class AnnotationParserTests(unittest.TestCase):
    def test_hunks_follow_change_id(self) -> None:
        output = (
            "qpvuntsm dev@example.com    2024-05-01 10:00:00    1: import os\n"
            "qpvuntsm dev@example.com    2024-05-01 10:00:00    2: import sys\n"
            "rlvkpnrz other              2024-05-02 11:00:00    3: print(1)\n"
            "garbage\n"
        )

        content = parse_annotation(output, "app.py", "@")

        self.assertEqual(len(content), 3)
        self.assertEqual([line.first_in_hunk for line in content.lines], [True, False, True])
        self.assertEqual(content.lines[2].line_number, 3)
        self.assertEqual(content.lines[0].short_timestamp(), "05-01")
        self.assertEqual(content.title(), "app.py @ @")


class EvologParserTests(unittest.TestCase):
    def test_entries_and_empty_marker(self) -> None:
        output = "abc12345\tqpvuntsm\tdev@example.com\t2024-05-01 10:00:00\t[empty]\tfirst\ttab\n"

        entries = parse_evolog(output)

        self.assertEqual(len(entries), 1)
        self.assertTrue(entries[0].is_empty)
        self.assertEqual(entries[0].description, "first\ttab")


class ResolveParserTests(unittest.TestCase):
    def test_spaced_and_tabbed_rows(self) -> None:
        output = "src/app.py    2-sided conflict\nREADME.md\t3-sided conflict including 1 deletion\nnoise\n"

        conflicts = parse_resolve_list(output)

        self.assertEqual([c.path for c in conflicts], ["src/app.py", "README.md"])
        self.assertEqual([c.sides for c in conflicts], [2, 3])


class PushDryRunParserTests(unittest.TestCase):
    def test_actions(self) -> None:
        output = (
            "Changes to push to origin:\n"
            "  Move forward bookmark main from abc to def\n"
            "  Move sideways bookmark feat from 111 to 222\n"
            "  Add bookmark new to 333\n"
            "  Delete bookmark old from 444\n"
        )

        result = parse_push_dry_run(output)

        self.assertEqual(result.status, PushPreviewStatus.CHANGES)
        self.assertEqual(
            [action.kind for action in result.actions],
            [
                PushActionKind.MOVE_FORWARD,
                PushActionKind.MOVE_SIDEWAYS,
                PushActionKind.ADD,
                PushActionKind.DELETE,
            ],
        )
        self.assertEqual([action.is_force for action in result.actions], [False, True, False, False])

    def test_nothing_changed_and_unparsed(self) -> None:
        self.assertEqual(parse_push_dry_run("Nothing changed.\n").status, PushPreviewStatus.NOTHING_CHANGED)
        self.assertEqual(parse_push_dry_run("something else\n").status, PushPreviewStatus.UNPARSED)


if __name__ == "__main__":
    unittest.main()
