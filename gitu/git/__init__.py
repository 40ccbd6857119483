"""Git domain model, output parsers, and the command gateway."""

from .gateway import GitCommandError, GitGateway, is_conflict_error, run_git
from .models import (
    NO_CHANGES_FILENAME,
    Branch,
    Commit,
    CommitDiff,
    Decoration,
    DecorationKind,
    FileDiff,
    FileStatus,
    SearchFilter,
    SearchKind,
    StashEntry,
    StatusFile,
)
from .parsing import (
    parse_branch_list,
    parse_commit_diff,
    parse_decorations,
    parse_log_output,
    parse_stash_list,
    parse_status_output,
)

__all__ = [
    "NO_CHANGES_FILENAME",
    "Branch",
    "Commit",
    "CommitDiff",
    "Decoration",
    "DecorationKind",
    "FileDiff",
    "FileStatus",
    "GitCommandError",
    "GitGateway",
    "SearchFilter",
    "SearchKind",
    "StashEntry",
    "StatusFile",
    "is_conflict_error",
    "parse_branch_list",
    "parse_commit_diff",
    "parse_decorations",
    "parse_log_output",
    "parse_stash_list",
    "parse_status_output",
    "run_git",
]
