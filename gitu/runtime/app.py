"""Interactive session bootstrap.

Runs the startup checks, loads the initial data batch, wires the gateway,
actions and dispatcher together, then hands control to the event loop.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import TypeVar

from ..git import GitCommandError, GitGateway
from ..input import ModeDispatcher
from ..render import build_screen, paint
from .actions import GitActions
from .config import GituConfig
from .loop import RuntimeLoopCallbacks, run_main_loop
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

EMPTY_HISTORY_MESSAGE = "No commits found in the current repository."
NOT_A_REPOSITORY_MESSAGE = "Not inside a git working tree."
NOT_A_TERMINAL_MESSAGE = "gitu needs an interactive terminal."

T = TypeVar("T")


class StartupError(Exception):
    """Startup check that ends the session before the UI is entered."""

    def __init__(self, message: str, exit_status: int = 1) -> None:
        super().__init__(message)
        self.exit_status = exit_status


def _load_or_empty(fetch: Callable[[], list[T]], label: str) -> list[T]:
    try:
        return fetch()
    except GitCommandError as exc:
        logger.warning("could not load %s at startup: %s", label, exc)
        return []


def load_initial_state(gateway: GitGateway) -> AppState:
    """Fetch the startup batch; commits are mandatory, the rest best-effort."""
    if not gateway.is_inside_work_tree():
        raise StartupError(NOT_A_REPOSITORY_MESSAGE)
    try:
        commits = gateway.get_commits()
    except GitCommandError as exc:
        raise StartupError(str(exc)) from exc
    if not commits:
        raise StartupError(EMPTY_HISTORY_MESSAGE, exit_status=0)

    return AppState.initial(
        commits,
        status_files=_load_or_empty(gateway.get_status, "status"),
        stashes=_load_or_empty(gateway.get_stashes, "stashes"),
        branches=_load_or_empty(gateway.get_branches, "branches"),
    )


def report_startup_error(exc: StartupError) -> None:
    if exc.exit_status == 0:
        print(str(exc))
    else:
        print(f"Error: {exc}", file=sys.stderr)


def run_app(config: GituConfig, gateway: GitGateway | None = None) -> int:
    """Run one interactive session and return the process exit status."""
    gateway = gateway if gateway is not None else GitGateway.for_work_tree()
    try:
        state = load_initial_state(gateway)
        if not os.isatty(sys.stdin.fileno()):
            raise StartupError(NOT_A_TERMINAL_MESSAGE)
    except StartupError as exc:
        report_startup_error(exc)
        return exc.exit_status

    logger.info(
        "starting with %d commits, %d status entries, %d stashes, %d branches",
        len(state.commits),
        len(state.status_files),
        len(state.stashes),
        len(state.branches),
    )
    actions = GitActions(state, gateway)
    dispatcher = ModeDispatcher(actions)

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)

    def render(current: AppState, width: int, height: int) -> None:
        lines = build_screen(current, width, height, style=config.style, no_color=config.no_color)
        paint(lines, stdout_fd)

    run_main_loop(
        state,
        terminal,
        stdin_fd,
        RuntimeLoopCallbacks(render=render, handle_key=dispatcher.handle_key),
        poll_timeout_ms=config.poll_timeout_ms,
    )
    return 0
