"""Raw-mode and alternate-screen handling for one interactive session."""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Alternate screen on, cursor hidden; and the reverse.
ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Switch one stdin/stdout pair between cooked mode and full-screen raw mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._cooked_attrs = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI)

    def disable_tui_mode(self) -> None:
        os.write(self.stdout_fd, LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._cooked_attrs)

    @contextlib.contextmanager
    def raw_mode(self):
        """Run the body in TUI mode; the terminal is restored even on error."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
