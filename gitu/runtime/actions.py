"""State transitions that call git.

Every mutating action follows one pattern: call the gateway, report a
one-line status message, and on success reload the affected collections
with their cursors reset. ``GitCommandError`` is caught here and only here;
the rest of the state is left as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from ..clipboard import copy_text
from ..git.gateway import GitCommandError, is_conflict_error
from ..git.models import (
    Branch,
    Commit,
    CommitDiff,
    FileStatus,
    SearchFilter,
    StashEntry,
    StatusFile,
)
from . import modes
from .cursor import PAGE_SCROLL_LINES, initial_index, next_index, previous_index, scroll_down, scroll_up
from .state import (
    AppState,
    BranchNameInputMode,
    CommitMessageInputMode,
    MessageType,
    NewBranchNameInputMode,
    NormalMode,
    Panel,
    SearchMode,
    StashMessageInputMode,
    TreeViewMode,
)
from .status_rows import first_file_row, next_file_row, previous_file_row, selected_status_file

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    """Subset of ``GitGateway`` the state machine depends on."""

    def get_commits(self, search_filter: SearchFilter | None = None) -> list[Commit]: ...
    def get_commit_diff(self, commit_hash: str) -> CommitDiff: ...
    def get_status(self) -> list[StatusFile]: ...
    def get_file_diff(self, path: str, staged: bool, untracked: bool = False) -> str: ...
    def get_stashes(self) -> list[StashEntry]: ...
    def get_branches(self) -> list[Branch]: ...
    def get_last_commit_message(self) -> str: ...
    def stage_file(self, path: str) -> str: ...
    def unstage_file(self, path: str) -> str: ...
    def stage_all(self) -> str: ...
    def unstage_all(self) -> str: ...
    def discard_file(self, path: str, untracked: bool = False) -> str: ...
    def commit(self, message: str) -> str: ...
    def commit_amend(self, message: str) -> str: ...
    def create_stash(self, message: str | None = None, include_untracked: bool = False) -> str: ...
    def apply_stash(self, index: int) -> str: ...
    def pop_stash(self, index: int) -> str: ...
    def drop_stash(self, index: int) -> str: ...
    def switch_branch(self, name: str, remote: bool = False) -> str: ...
    def delete_branch(self, name: str, force: bool = False) -> str: ...
    def merge_branch(self, name: str) -> str: ...
    def create_new_branch(self, name: str) -> str: ...
    def create_branch(self, name: str, commit_hash: str) -> str: ...
    def checkout_commit(self, commit_hash: str) -> str: ...
    def cherry_pick(self, commit_hash: str) -> str: ...
    def revert_commit(self, commit_hash: str) -> str: ...
    def fetch(self) -> str: ...
    def push(self, force: bool = False) -> str: ...
    def pull(self, rebase: bool = False) -> str: ...


class GitActions:
    """Bound transitions over one ``AppState`` and one gateway."""

    def __init__(
        self,
        state: AppState,
        gateway: Gateway,
        copy_to_clipboard: Callable[[str], str | None] = copy_text,
    ) -> None:
        self.state = state
        self.gateway = gateway
        self.copy_to_clipboard = copy_to_clipboard

    # Messages

    def _success(self, message: str) -> None:
        logger.info("%s", message)
        self.state.set_status(message, MessageType.SUCCESS)

    def _info(self, message: str) -> None:
        self.state.set_status(message, MessageType.INFO)

    def _error(self, message: str) -> None:
        logger.warning("%s", message)
        self.state.set_status(message, MessageType.ERROR)

    def _report_failure(self, exc: GitCommandError) -> None:
        self._error(f"Error: {exc}")

    def _report_conflict_or_failure(self, exc: GitCommandError, operation: str, continue_hint: str) -> None:
        if is_conflict_error(exc):
            self._info(f"Conflicts during {operation}: resolve them, then run '{continue_hint}'")
            self.refresh_status()
            return
        self._report_failure(exc)

    def _exit_input_mode(self) -> None:
        if self.state.input_mode is not None:
            modes.cancel_mode(self.state)

    # Refresh

    def refresh_commits(self) -> bool:
        state = self.state
        try:
            commits = self.gateway.get_commits(state.active_filter)
        except GitCommandError as exc:
            self._error(f"Failed to refresh commits: {exc}")
            return False
        state.commits = commits
        state.commit_selected = initial_index(len(state.commits))
        self._close_commit_diff()
        return True

    def refresh_status(self) -> bool:
        state = self.state
        try:
            files = self.gateway.get_status()
        except GitCommandError as exc:
            self._error(f"Failed to refresh status: {exc}")
            return False
        state.status_files = files
        state.status_selected = first_file_row(files)
        self._close_status_diff()
        return True

    def refresh_stashes(self) -> bool:
        state = self.state
        try:
            stashes = self.gateway.get_stashes()
        except GitCommandError as exc:
            self._error(f"Failed to refresh stashes: {exc}")
            return False
        state.stashes = stashes
        state.stash_selected = initial_index(len(stashes))
        return True

    def refresh_branches(self) -> bool:
        state = self.state
        try:
            branches = self.gateway.get_branches()
        except GitCommandError as exc:
            self._error(f"Failed to refresh branches: {exc}")
            return False
        state.branches = branches
        state.branch_selected = initial_index(len(branches))
        return True

    def refresh_all(self) -> None:
        refreshed = [
            self.refresh_commits(),
            self.refresh_status(),
            self.refresh_stashes(),
            self.refresh_branches(),
        ]
        if all(refreshed):
            self._info("Refreshed")

    # Panels and quitting

    def switch_panel(self, panel: Panel) -> None:
        self.state.panel = panel

    def toggle_help(self) -> None:
        self.state.help_visible = not self.state.help_visible

    def quit(self) -> None:
        """Close an open diff view first; quit only when none is open.

        The diff shown on the current panel closes before one left open on
        another panel.
        """
        state = self.state
        if state.panel is Panel.STATUS and state.status_show_diff:
            self._close_status_diff()
        elif state.show_diff:
            self._close_commit_diff()
        elif state.status_show_diff:
            self._close_status_diff()
        else:
            state.should_quit = True

    def escape(self) -> None:
        """Unwind the most pressing normal-mode state, quitting when nothing is left."""
        state = self.state
        if state.status_message is not None:
            state.clear_status()
        elif state.show_diff or state.status_show_diff:
            self.quit()
        elif state.active_filter is not None:
            self.clear_search()
        else:
            state.should_quit = True

    # Log panel: selection and diff

    def next_commit(self) -> None:
        state = self.state
        state.commit_selected = next_index(state.commit_selected, len(state.commits))
        state.diff_scroll = 0

    def previous_commit(self) -> None:
        state = self.state
        state.commit_selected = previous_index(state.commit_selected, len(state.commits))
        state.diff_scroll = 0

    def _fetch_selected_commit_diff(self) -> CommitDiff | None:
        commit = self.state.selected_commit()
        if commit is None:
            return None
        try:
            return self.gateway.get_commit_diff(commit.hash)
        except GitCommandError as exc:
            self._error(f"Failed to load diff: {exc}")
            return None

    def _close_commit_diff(self) -> None:
        state = self.state
        state.show_diff = False
        state.current_diff = None
        state.file_selected = None
        state.diff_scroll = 0
        if isinstance(state.mode, TreeViewMode):
            state.mode = NormalMode()

    def toggle_diff(self) -> None:
        state = self.state
        if state.show_diff:
            self._close_commit_diff()
            return
        diff = self._fetch_selected_commit_diff()
        if diff is None:
            return
        state.current_diff = diff
        state.file_selected = initial_index(len(diff.files))
        state.diff_scroll = 0
        state.show_diff = True

    def next_file(self) -> None:
        state = self.state
        if state.current_diff is None:
            return
        state.file_selected = next_index(state.file_selected, len(state.current_diff.files))
        state.diff_scroll = 0

    def previous_file(self) -> None:
        state = self.state
        if state.current_diff is None:
            return
        state.file_selected = previous_index(state.file_selected, len(state.current_diff.files))
        state.diff_scroll = 0

    def scroll_diff_down(self, page: bool = False) -> None:
        self.state.diff_scroll = scroll_down(self.state.diff_scroll, PAGE_SCROLL_LINES if page else 1)

    def scroll_diff_up(self, page: bool = False) -> None:
        self.state.diff_scroll = scroll_up(self.state.diff_scroll, PAGE_SCROLL_LINES if page else 1)

    # Log panel: tree view

    def toggle_tree_view(self) -> None:
        state = self.state
        if isinstance(state.mode, TreeViewMode):
            self._close_commit_diff()
            return
        diff = self._fetch_selected_commit_diff()
        if diff is None:
            return
        state.show_diff = False
        state.current_diff = diff
        state.file_selected = initial_index(len(diff.files))
        state.diff_scroll = 0
        state.mode = TreeViewMode()

    def select_tree_file(self) -> None:
        mode = self.state.tree_view
        if mode is None or self.state.file_selected is None:
            return
        mode.file_selected = not mode.file_selected
        self.state.diff_scroll = 0

    def exit_tree_view(self) -> None:
        """Step back from the file diff to the file list, or close tree view."""
        mode = self.state.tree_view
        if mode is None:
            return
        if mode.file_selected:
            mode.file_selected = False
            self.state.diff_scroll = 0
            return
        self._close_commit_diff()

    # Log panel: search

    def confirm_search(self) -> None:
        state = self.state
        mode = state.mode
        if not isinstance(mode, SearchMode):
            return
        search_filter = SearchFilter.from_query(mode.query)
        modes.cancel_mode(state)
        try:
            commits = self.gateway.get_commits(search_filter)
        except GitCommandError as exc:
            self._error(f"Search failed: {exc}")
            return
        state.active_filter = search_filter
        state.commits = commits
        state.commit_selected = initial_index(len(commits))
        self._close_commit_diff()
        if search_filter is not None:
            self._info(f"{len(commits)} commits match {search_filter.describe()}")

    def clear_search(self) -> None:
        state = self.state
        try:
            commits = self.gateway.get_commits(None)
        except GitCommandError as exc:
            self._error(f"Failed to clear search: {exc}")
            return
        state.active_filter = None
        state.commits = commits
        state.commit_selected = initial_index(len(commits))
        self._close_commit_diff()

    # Log panel: commit actions

    def copy_commit_hash(self) -> None:
        commit = self.state.selected_commit()
        if commit is None:
            return
        error = self.copy_to_clipboard(commit.hash)
        if error is not None:
            self._error(error)
            return
        self._success(f"Copied hash: {commit.hash}")

    def checkout_selected_commit(self) -> None:
        commit = self.state.selected_commit()
        if commit is None:
            return
        try:
            message = self.gateway.checkout_commit(commit.hash)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()
        self.refresh_branches()
        self.refresh_commits()

    def enter_branch_input(self) -> None:
        modes.enter_branch_input(self.state)

    def confirm_branch_from_commit(self) -> None:
        mode = self.state.mode
        if not isinstance(mode, BranchNameInputMode):
            return
        name = mode.buffer.strip()
        modes.cancel_mode(self.state)
        if not name:
            self._error("Branch name cannot be empty")
            return
        try:
            message = self.gateway.create_branch(name, mode.commit_hash)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_commits()

    def cherry_pick_selected(self) -> None:
        commit = self.state.selected_commit()
        if commit is None:
            return
        try:
            message = self.gateway.cherry_pick(commit.hash)
        except GitCommandError as exc:
            self._report_conflict_or_failure(exc, f"cherry-pick of {commit.short_hash}", "git cherry-pick --continue")
            return
        self._success(message)
        self.refresh_status()
        self.refresh_commits()

    def revert_selected(self) -> None:
        commit = self.state.selected_commit()
        if commit is None:
            return
        try:
            message = self.gateway.revert_commit(commit.hash)
        except GitCommandError as exc:
            self._report_conflict_or_failure(exc, f"revert of {commit.short_hash}", "git revert --continue")
            return
        self._success(message)
        self.refresh_status()
        self.refresh_commits()

    # Remotes

    def fetch(self) -> None:
        try:
            message = self.gateway.fetch()
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_commits()

    def push(self) -> None:
        try:
            message = self.gateway.push(False)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()

    def pull(self) -> None:
        try:
            message = self.gateway.pull(False)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()
        self.refresh_branches()
        self.refresh_commits()

    # Status panel

    def selected_status_file(self) -> StatusFile | None:
        return selected_status_file(self.state.status_files, self.state.status_selected)

    def next_status_file(self) -> None:
        state = self.state
        state.status_selected = next_file_row(state.status_files, state.status_selected)

    def previous_status_file(self) -> None:
        state = self.state
        state.status_selected = previous_file_row(state.status_files, state.status_selected)

    def toggle_stage(self) -> None:
        entry = self.selected_status_file()
        if entry is None:
            return
        try:
            if entry.staged:
                message = self.gateway.unstage_file(entry.path)
            else:
                message = self.gateway.stage_file(entry.path)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()

    def stage_all(self) -> None:
        try:
            message = self.gateway.stage_all()
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()

    def unstage_all(self) -> None:
        try:
            message = self.gateway.unstage_all()
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()

    def discard_selected_file(self) -> None:
        entry = self.selected_status_file()
        if entry is None:
            return
        if entry.staged:
            self._error("Cannot discard staged file. Unstage it first.")
            return
        try:
            message = self.gateway.discard_file(entry.path, untracked=entry.status is FileStatus.UNTRACKED)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()

    def enter_commit_message(self) -> None:
        modes.enter_commit_message(self.state)

    def enter_amend(self) -> None:
        """Open the commit prompt pre-filled with the last commit message."""
        try:
            message = self.gateway.get_last_commit_message()
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        modes.enter_commit_message(self.state, prefill=message, amend=True)

    def confirm_commit(self) -> None:
        mode = self.state.mode
        if not isinstance(mode, CommitMessageInputMode):
            return
        message_text = mode.buffer
        modes.cancel_mode(self.state)
        if not message_text.strip():
            self._error("Commit message cannot be empty")
            return
        try:
            if mode.amend:
                message = self.gateway.commit_amend(message_text)
            else:
                message = self.gateway.commit(message_text)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()
        self.refresh_commits()

    def _close_status_diff(self) -> None:
        state = self.state
        state.status_show_diff = False
        state.status_diff_content = None
        state.status_diff_scroll = 0

    def toggle_status_diff(self) -> None:
        state = self.state
        if state.status_show_diff:
            self._close_status_diff()
            return
        entry = self.selected_status_file()
        if entry is None:
            return
        try:
            content = self.gateway.get_file_diff(
                entry.path,
                entry.staged,
                untracked=entry.status is FileStatus.UNTRACKED,
            )
        except GitCommandError as exc:
            self._error(f"Failed to load diff: {exc}")
            return
        state.status_diff_content = content
        state.status_diff_scroll = 0
        state.status_show_diff = True

    def scroll_status_diff_down(self, page: bool = False) -> None:
        state = self.state
        state.status_diff_scroll = scroll_down(state.status_diff_scroll, PAGE_SCROLL_LINES if page else 1)

    def scroll_status_diff_up(self, page: bool = False) -> None:
        state = self.state
        state.status_diff_scroll = scroll_up(state.status_diff_scroll, PAGE_SCROLL_LINES if page else 1)

    # Stash panel

    def next_stash(self) -> None:
        state = self.state
        state.stash_selected = next_index(state.stash_selected, len(state.stashes))

    def previous_stash(self) -> None:
        state = self.state
        state.stash_selected = previous_index(state.stash_selected, len(state.stashes))

    def enter_stash_input(self) -> None:
        modes.enter_stash_input(self.state)

    def confirm_create_stash(self) -> None:
        mode = self.state.mode
        if not isinstance(mode, StashMessageInputMode):
            return
        stash_message = mode.buffer.strip() or None
        modes.cancel_mode(self.state)
        try:
            message = self.gateway.create_stash(stash_message, False)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()
        self.refresh_stashes()

    def apply_selected_stash(self) -> None:
        stash = self.state.selected_stash()
        if stash is None:
            return
        try:
            message = self.gateway.apply_stash(stash.index)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()

    def pop_selected_stash(self) -> None:
        stash = self.state.selected_stash()
        if stash is None:
            return
        try:
            message = self.gateway.pop_stash(stash.index)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_status()
        self.refresh_stashes()

    def drop_selected_stash(self) -> None:
        stash = self.state.selected_stash()
        if stash is None:
            return
        try:
            message = self.gateway.drop_stash(stash.index)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_stashes()

    # Branches panel

    def next_branch(self) -> None:
        state = self.state
        state.branch_selected = next_index(state.branch_selected, len(state.branches))

    def previous_branch(self) -> None:
        state = self.state
        state.branch_selected = previous_index(state.branch_selected, len(state.branches))

    def switch_to_selected_branch(self) -> None:
        branch = self.state.selected_branch()
        if branch is None:
            return
        if branch.is_current:
            self._info("Already on this branch")
            return
        try:
            message = self.gateway.switch_branch(branch.name, remote=branch.is_remote)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_status()
        self.refresh_commits()

    def delete_selected_branch(self) -> None:
        branch = self.state.selected_branch()
        if branch is None:
            return
        if branch.is_current:
            self._error("Cannot delete current branch")
            return
        if branch.is_remote:
            self._error("Cannot delete remote branches from this view")
            return
        try:
            message = self.gateway.delete_branch(branch.name, False)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_commits()

    def merge_selected_branch(self) -> None:
        branch = self.state.selected_branch()
        if branch is None:
            return
        if branch.is_current:
            self._error("Cannot merge a branch into itself")
            return
        try:
            message = self.gateway.merge_branch(branch.name)
        except GitCommandError as exc:
            self._report_conflict_or_failure(exc, f"merge of {branch.name}", "git merge --continue")
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_status()
        self.refresh_commits()

    def enter_new_branch_input(self) -> None:
        modes.enter_new_branch_input(self.state)

    def confirm_new_branch(self) -> None:
        mode = self.state.mode
        if not isinstance(mode, NewBranchNameInputMode):
            return
        name = mode.buffer.strip()
        modes.cancel_mode(self.state)
        if not name:
            self._error("Branch name cannot be empty")
            return
        try:
            message = self.gateway.create_new_branch(name)
        except GitCommandError as exc:
            self._report_failure(exc)
            return
        self._success(message)
        self.refresh_branches()
        self.refresh_commits()

    # Input modes

    def enter_search(self) -> None:
        modes.enter_search(self.state)

    def cancel_input(self) -> None:
        self._exit_input_mode()

    def confirm_input(self) -> None:
        """Run the confirm action of whichever input mode is active."""
        mode = self.state.mode
        if isinstance(mode, SearchMode):
            self.confirm_search()
        elif isinstance(mode, BranchNameInputMode):
            self.confirm_branch_from_commit()
        elif isinstance(mode, CommitMessageInputMode):
            self.confirm_commit()
        elif isinstance(mode, StashMessageInputMode):
            self.confirm_create_stash()
        elif isinstance(mode, NewBranchNameInputMode):
            self.confirm_new_branch()
