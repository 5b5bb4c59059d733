"""Terminal control for the TUI session.

Owns raw-mode lifecycle and alternate-screen switching, plus handing the
terminal back to interactive ``jj`` commands for a while.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from collections.abc import Iterator

ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Switch the controlling terminal between TUI and cooked mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI)
        self._active = True

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen and the saved tty state."""
        os.write(self.stdout_fd, LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        self._active = False

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Bracket the session with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspend(self) -> Iterator[None]:
        """Release the terminal to a child process, then take it back.

        Used around ``jj split``, ``jj describe`` in the editor and external
        merge tools, which need a cooked terminal of their own.
        """
        was_active = self._active
        if was_active:
            self.disable_tui_mode()
        try:
            yield
        finally:
            if was_active:
                self.enable_tui_mode()
