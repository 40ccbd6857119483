"""Main interactive event loop for the terminal UI.

Single-threaded: render, poll one key, dispatch it, repeat until a quit
transition fires. Git calls made by a transition block the loop.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from .state import AppState
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    ``render`` paints ``state`` for a terminal of the given width/height.
    ``handle_key`` applies one normalized key and returns ``True`` to quit.
    """

    render: Callable[[AppState, int, int], None]
    handle_key: Callable[[str], bool]


def normalize_enter(key: str, skip_next_lf: bool) -> tuple[str | None, bool]:
    """Fold CR, LF and CRLF into a single ``ENTER`` token.

    Returns the key to dispatch (``None`` to drop it) and the new
    ``skip_next_lf`` flag.
    """
    if skip_next_lf and key == "ENTER_LF":
        return None, False
    if key == "ENTER_CR":
        return "ENTER", True
    if key == "ENTER_LF":
        return "ENTER", False
    return key, False


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    poll_timeout_ms: int = 100,
) -> None:
    """Run the interactive TUI loop until ``state.should_quit`` is set.

    Every iteration paints one frame at the current terminal size before
    polling, so a resize shows up within one poll timeout.
    """
    skip_next_lf = False

    with terminal.raw_mode():
        while not state.should_quit:
            term = shutil.get_terminal_size((80, 24))
            callbacks.render(state, term.columns, term.lines)

            try:
                raw_key = read_key(stdin_fd, timeout_ms=poll_timeout_ms)
            except KeyboardInterrupt:
                # Ignore SIGINT-style interrupts so terminal copy shortcuts do not exit the app.
                continue
            if raw_key == "":
                continue

            key, skip_next_lf = normalize_enter(raw_key, skip_next_lf)
            if key is None:
                continue
            if callbacks.handle_key(key):
                break
