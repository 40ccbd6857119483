"""Typed snapshots of repository state produced by the output parsers.

Every record is an immutable value. Collections are rebuilt wholesale after
each mutating action instead of being patched in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

NO_CHANGES_FILENAME = "(no changes)"


class DecorationKind(Enum):
    HEAD = "head"
    BRANCH = "branch"
    REMOTE_BRANCH = "remote_branch"
    TAG = "tag"


@dataclass(frozen=True)
class Decoration:
    """Ref annotation attached to a commit in ``git log --decorate`` output."""

    kind: DecorationKind
    name: str = ""

    @classmethod
    def head(cls) -> Decoration:
        return cls(DecorationKind.HEAD)

    @classmethod
    def branch(cls, name: str) -> Decoration:
        return cls(DecorationKind.BRANCH, name)

    @classmethod
    def remote_branch(cls, name: str) -> Decoration:
        return cls(DecorationKind.REMOTE_BRANCH, name)

    @classmethod
    def tag(cls, name: str) -> Decoration:
        return cls(DecorationKind.TAG, name)

    @classmethod
    def for_ref(cls, name: str) -> Decoration:
        """Classify a bare ref name as remote when it contains ``/``."""
        if "/" in name:
            return cls.remote_branch(name)
        return cls.branch(name)


@dataclass(frozen=True)
class Commit:
    graph: str
    hash: str
    message: str
    decorations: list[Decoration] = field(default_factory=list)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass(frozen=True)
class FileDiff:
    filename: str
    diff_content: str


@dataclass(frozen=True)
class CommitDiff:
    files: list[FileDiff]

    def file_at(self, index: int | None) -> FileDiff | None:
        if index is None or not (0 <= index < len(self.files)):
            return None
        return self.files[index]


class FileStatus(Enum):
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    UNTRACKED = "?"

    @property
    def code(self) -> str:
        return self.value


@dataclass(frozen=True)
class StatusFile:
    """One porcelain status entry.

    A path with both staged and unstaged changes yields two independent
    entries, one per column.
    """

    path: str
    status: FileStatus
    staged: bool
    original_path: str | None = None


@dataclass(frozen=True)
class StashEntry:
    index: int
    branch: str
    message: str

    @property
    def ref(self) -> str:
        return f"stash@{{{self.index}}}"


@dataclass(frozen=True)
class Branch:
    name: str
    is_current: bool
    is_remote: bool
    commit_hash: str
    commit_message: str = ""


class SearchKind(Enum):
    MESSAGE = "message"
    AUTHOR = "author"


@dataclass(frozen=True)
class SearchFilter:
    kind: SearchKind
    text: str

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("search filter text must not be empty")

    @classmethod
    def message(cls, text: str) -> SearchFilter:
        return cls(SearchKind.MESSAGE, text)

    @classmethod
    def author(cls, text: str) -> SearchFilter:
        return cls(SearchKind.AUTHOR, text)

    @classmethod
    def from_query(cls, query: str) -> SearchFilter | None:
        """Build a filter from search-prompt text.

        ``@name`` selects an author filter; anything else filters on the
        commit message. Empty text (including a lone ``@``) clears the filter.
        """
        if query.startswith("@"):
            author = query[1:]
            return cls.author(author) if author else None
        return cls.message(query) if query else None

    def describe(self) -> str:
        if self.kind is SearchKind.AUTHOR:
            return f"author: {self.text}"
        return f"grep: {self.text}"
