"""Tests for terminal mode switching.

Verifies raw-mode lifecycle safety and the suspend bracket used around
interactive ``jj`` commands.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from jjview.runtime.terminal import ENTER_TUI, LEAVE_TUI, TerminalController


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("jjview.runtime.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "jjview.runtime.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("jjview.runtime.terminal.os.write") as write_mock, mock.patch(
            "jjview.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            self.assertTrue(controller.active)
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)
        self.assertFalse(controller.active)

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("jjview.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()

    def test_suspend_releases_and_retakes_active_terminal(self) -> None:
        with mock.patch("jjview.runtime.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "jjview.runtime.terminal.tty.setraw"
        ), mock.patch("jjview.runtime.terminal.termios.tcsetattr"), mock.patch(
            "jjview.runtime.terminal.os.write"
        ) as write_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            with controller.suspend():
                self.assertFalse(controller.active)
            self.assertTrue(controller.active)

        self.assertEqual(
            [call.args[1] for call in write_mock.call_args_list],
            [ENTER_TUI, LEAVE_TUI, ENTER_TUI],
        )

    def test_suspend_is_a_no_op_outside_tui_mode(self) -> None:
        with mock.patch("jjview.runtime.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "jjview.runtime.terminal.os.write"
        ) as write_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            with controller.suspend():
                pass

        write_mock.assert_not_called()


if __name__ == "__main__":
    unittest.main()
