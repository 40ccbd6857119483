"""Transient input-mode lifecycle: entry, buffer editing, and cancel.

Entering a mode captures whatever the later confirm step needs (for example
the commit a new branch starts from). Cancelling only restores normal mode.
Confirm handlers live in ``GitActions`` because they talk to git.
"""

from __future__ import annotations

from .state import (
    AppState,
    BranchNameInputMode,
    CommitMessageInputMode,
    NewBranchNameInputMode,
    NormalMode,
    SearchMode,
    StashMessageInputMode,
)


def enter_search(state: AppState) -> None:
    state.mode = SearchMode()


def enter_branch_input(state: AppState) -> bool:
    """Start naming a branch at the selected commit; no-op without a selection."""
    commit = state.selected_commit()
    if commit is None:
        return False
    state.mode = BranchNameInputMode(commit_hash=commit.hash)
    return True


def enter_commit_message(state: AppState, prefill: str = "", amend: bool = False) -> None:
    state.mode = CommitMessageInputMode(buffer=prefill, amend=amend)


def enter_stash_input(state: AppState) -> None:
    state.mode = StashMessageInputMode()


def enter_new_branch_input(state: AppState) -> None:
    state.mode = NewBranchNameInputMode()


def append_char(state: AppState, ch: str) -> None:
    mode = state.input_mode
    if mode is not None:
        mode.buffer += ch


def delete_char(state: AppState) -> None:
    mode = state.input_mode
    if mode is not None:
        mode.buffer = mode.buffer[:-1]


def cancel_mode(state: AppState) -> None:
    """Leave the current transient mode, discarding its buffer."""
    state.mode = NormalMode()
