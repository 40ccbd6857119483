"""Application state aggregate for the interactive session.

``AppState`` owns every panel's data, selection cursors, diff views and the
active mode. It is passed by reference into each transition; nothing here
talks to git.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..git.models import Branch, Commit, CommitDiff, SearchFilter, StashEntry, StatusFile
from .cursor import initial_index
from .status_rows import first_file_row


class Panel(Enum):
    STATUS = 1
    LOG = 2
    STASH = 3
    BRANCHES = 4

    @property
    def title(self) -> str:
        return self.name.capitalize()


class MessageType(Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    kind: MessageType = MessageType.INFO


@dataclass
class NormalMode:
    pass


@dataclass
class InputMode:
    """Base for modes that edit a single-line text buffer."""

    buffer: str = ""


@dataclass
class SearchMode(InputMode):
    @property
    def query(self) -> str:
        return self.buffer


@dataclass
class BranchNameInputMode(InputMode):
    """Naming a branch to create at ``commit_hash``, captured on entry."""

    commit_hash: str = ""


@dataclass
class CommitMessageInputMode(InputMode):
    amend: bool = False


@dataclass
class StashMessageInputMode(InputMode):
    pass


@dataclass
class NewBranchNameInputMode(InputMode):
    pass


@dataclass
class TreeViewMode:
    """Commit file browser; ``file_selected`` switches list view to file diff."""

    file_selected: bool = False


Mode = Union[
    NormalMode,
    SearchMode,
    BranchNameInputMode,
    CommitMessageInputMode,
    StashMessageInputMode,
    NewBranchNameInputMode,
    TreeViewMode,
]


@dataclass
class AppState:
    commits: list[Commit]
    status_files: list[StatusFile] = field(default_factory=list)
    stashes: list[StashEntry] = field(default_factory=list)
    branches: list[Branch] = field(default_factory=list)
    panel: Panel = Panel.STATUS
    mode: Mode = field(default_factory=NormalMode)
    help_visible: bool = False

    commit_selected: int | None = None
    active_filter: SearchFilter | None = None
    show_diff: bool = False
    current_diff: CommitDiff | None = None
    file_selected: int | None = None
    diff_scroll: int = 0

    status_selected: int | None = None
    status_show_diff: bool = False
    status_diff_content: str | None = None
    status_diff_scroll: int = 0

    stash_selected: int | None = None
    branch_selected: int | None = None

    status_message: StatusMessage | None = None
    should_quit: bool = False

    @classmethod
    def initial(
        cls,
        commits: list[Commit],
        status_files: list[StatusFile] | None = None,
        stashes: list[StashEntry] | None = None,
        branches: list[Branch] | None = None,
    ) -> AppState:
        """Build the startup state with every cursor on its first item."""
        status_files = list(status_files or [])
        stashes = list(stashes or [])
        branches = list(branches or [])
        return cls(
            commits=list(commits),
            status_files=status_files,
            stashes=stashes,
            branches=branches,
            commit_selected=initial_index(len(commits)),
            status_selected=first_file_row(status_files),
            stash_selected=initial_index(len(stashes)),
            branch_selected=initial_index(len(branches)),
        )

    @property
    def in_normal_mode(self) -> bool:
        return isinstance(self.mode, NormalMode)

    @property
    def input_mode(self) -> InputMode | None:
        return self.mode if isinstance(self.mode, InputMode) else None

    @property
    def tree_view(self) -> TreeViewMode | None:
        return self.mode if isinstance(self.mode, TreeViewMode) else None

    def selected_commit(self) -> Commit | None:
        return _item_at(self.commits, self.commit_selected)

    def selected_stash(self) -> StashEntry | None:
        return _item_at(self.stashes, self.stash_selected)

    def selected_branch(self) -> Branch | None:
        return _item_at(self.branches, self.branch_selected)

    def set_status(self, text: str, kind: MessageType = MessageType.INFO) -> None:
        self.status_message = StatusMessage(text, kind)

    def clear_status(self) -> None:
        self.status_message = None


def _item_at(items: list, index: int | None):
    if index is None or not (0 <= index < len(items)):
        return None
    return items[index]
