from __future__ import annotations

import subprocess
import unittest
from unittest import mock

from jjview import clipboard


class ClipboardTests(unittest.TestCase):
    def test_platform_commands(self) -> None:
        with mock.patch("jjview.clipboard.sys.platform", "darwin"):
            self.assertEqual(clipboard.clipboard_commands(), [["pbcopy"]])
        with mock.patch("jjview.clipboard.sys.platform", "linux"), mock.patch("jjview.clipboard.os.name", "posix"):
            self.assertEqual(clipboard.clipboard_commands()[0], ["wl-copy"])

    def test_empty_text_is_not_copied(self) -> None:
        with mock.patch("jjview.clipboard.subprocess.run") as run_mock:
            self.assertFalse(clipboard.copy_text_to_clipboard(""))

        run_mock.assert_not_called()

    def test_first_installed_tool_is_used(self) -> None:
        commands = [["wl-copy"], ["xclip", "-selection", "clipboard"]]
        ok = subprocess.CompletedProcess(commands[1], 0)

        with mock.patch("jjview.clipboard.clipboard_commands", return_value=commands), mock.patch(
            "jjview.clipboard.shutil.which",
            side_effect=lambda name: None if name == "wl-copy" else f"/usr/bin/{name}",
        ), mock.patch("jjview.clipboard.subprocess.run", return_value=ok) as run_mock:
            self.assertTrue(clipboard.copy_text_to_clipboard("qpvuntsm"))

        run_mock.assert_called_once_with(commands[1], input="qpvuntsm", text=True, check=False)

    def test_failing_tools_fall_through(self) -> None:
        commands = [["wl-copy"], ["xsel", "--clipboard", "--input"]]

        with mock.patch("jjview.clipboard.clipboard_commands", return_value=commands), mock.patch(
            "jjview.clipboard.shutil.which", return_value="/usr/bin/tool"
        ), mock.patch(
            "jjview.clipboard.subprocess.run",
            side_effect=[OSError("no display"), subprocess.CompletedProcess(commands[1], 1)],
        ) as run_mock:
            self.assertFalse(clipboard.copy_text_to_clipboard("qpvuntsm"))

        self.assertEqual(run_mock.call_count, 2)


if __name__ == "__main__":
    unittest.main()
