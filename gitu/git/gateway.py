"""Synchronous git command gateway.

Each read operation runs one git subcommand and hands its stdout to the
matching parser. Mutating operations return a one-line message for the
status bar and raise ``GitCommandError`` with git's output on failure.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path

from .models import Branch, Commit, CommitDiff, SearchFilter, SearchKind, StashEntry, StatusFile
from .parsing import (
    merge_branch_lists,
    parse_branch_list,
    parse_commit_diff,
    parse_log_output,
    parse_stash_list,
    parse_status_output,
)

logger = logging.getLogger(__name__)

GitResult = tuple[int, str, str]
GitRunner = Callable[[Sequence[str]], GitResult]

LOG_ARGS = ("log", "--graph", "--oneline", "--all", "--decorate")
GIT_NOT_FOUND_STATUS = 127


class GitCommandError(RuntimeError):
    """A git subcommand exited unsuccessfully."""

    def __init__(self, args: Sequence[str], exit_status: int, stderr: str, stdout: str = "") -> None:
        self.args_list = list(args)
        self.exit_status = exit_status
        self.stderr = stderr
        self.stdout = stdout
        subcommand = self.args_list[0] if self.args_list else "git"
        # merge and commit report their failures on stdout
        detail = stderr.strip() or stdout.strip() or f"exit status {exit_status}"
        super().__init__(f"git {subcommand} failed: {detail}")


def is_conflict_error(error: BaseException) -> bool:
    """Return whether a failed command stopped on merge conflicts.

    Git has no stable machine-readable signal for this across versions, so
    the check looks for "conflict" anywhere in the error text or in either
    output stream.
    """
    texts = [str(error)]
    for stream in ("stderr", "stdout"):
        text = getattr(error, stream, None)
        if isinstance(text, str):
            texts.append(text)
    return any("conflict" in text.lower() for text in texts)


def run_git(args: Sequence[str], cwd: Path | None = None) -> GitResult:
    """Run ``git <args>`` and return ``(exit_status, stdout, stderr)``."""
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=None if cwd is None else str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError:
        return GIT_NOT_FOUND_STATUS, "", "git executable not found"
    return proc.returncode, proc.stdout, proc.stderr


def log_args(search_filter: SearchFilter | None = None) -> list[str]:
    args = list(LOG_ARGS)
    if search_filter is None:
        return args
    if search_filter.kind is SearchKind.AUTHOR:
        args.append(f"--author={search_filter.text}")
    else:
        args.append(f"--grep={search_filter.text}")
    args.append("--regexp-ignore-case")
    return args


class GitGateway:
    """Typed wrapper over a ``run(args) -> (status, stdout, stderr)`` collaborator."""

    def __init__(self, run: GitRunner | None = None, cwd: Path | None = None) -> None:
        if run is None:
            run = partial(run_git, cwd=cwd)
        self._run = run

    @classmethod
    def for_work_tree(cls, cwd: Path | None = None) -> GitGateway:
        """Gateway running every command from the top of the work tree around ``cwd``.

        ``status --porcelain`` paths are relative to the top level, so path
        arguments only resolve from there. Outside a work tree the gateway
        stays at ``cwd`` and ``is_inside_work_tree`` reports the problem.
        """
        gateway = cls(cwd=cwd)
        toplevel = gateway.get_toplevel()
        if toplevel is None:
            return gateway
        logger.debug("work tree root: %s", toplevel)
        return cls(cwd=toplevel)

    def _call(self, *args: str, ok_statuses: Sequence[int] = (0,)) -> str:
        logger.debug("git %s", " ".join(args))
        status, stdout, stderr = self._run(list(args))
        if status not in ok_statuses:
            logger.warning(
                "git %s exited with %d: %s", args[0] if args else "", status, (stderr or stdout).strip()
            )
            raise GitCommandError(args, status, stderr, stdout)
        return stdout

    # Queries

    def is_inside_work_tree(self) -> bool:
        try:
            return self._call("rev-parse", "--is-inside-work-tree").strip() == "true"
        except GitCommandError:
            return False

    def get_toplevel(self) -> Path | None:
        try:
            toplevel = self._call("rev-parse", "--show-toplevel").strip()
        except GitCommandError:
            return None
        return Path(toplevel) if toplevel else None

    def get_commits(self, search_filter: SearchFilter | None = None) -> list[Commit]:
        return parse_log_output(self._call(*log_args(search_filter)))

    def get_commit_diff(self, commit_hash: str) -> CommitDiff:
        return parse_commit_diff(self._call("show", "--color=never", commit_hash))

    def get_status(self) -> list[StatusFile]:
        return parse_status_output(self._call("status", "--porcelain"))

    def get_file_diff(self, path: str, staged: bool, untracked: bool = False) -> str:
        if untracked:
            # --no-index exits 1 whenever the files differ.
            text = self._call(
                "diff", "--no-index", "--color=never", "--", "/dev/null", path,
                ok_statuses=(0, 1),
            )
        elif staged:
            text = self._call("diff", "--cached", "--color=never", "--", path)
        else:
            text = self._call("diff", "--color=never", "--", path)
        if not text.strip():
            return f"No differences for {path}\n"
        return text

    def get_stashes(self) -> list[StashEntry]:
        return parse_stash_list(self._call("stash", "list"))

    def get_branches(self) -> list[Branch]:
        local = parse_branch_list(self._call("branch", "-vv", "--no-color"))
        try:
            remote = parse_branch_list(self._call("branch", "-r", "-v", "--no-color"), remote=True)
        except GitCommandError:
            remote = []
        return merge_branch_lists(local, remote)

    def get_last_commit_message(self) -> str:
        return self._call("log", "-1", "--format=%B").rstrip("\n")

    # Working tree

    def stage_file(self, path: str) -> str:
        self._call("add", "--", path)
        return f"Staged {path}"

    def unstage_file(self, path: str) -> str:
        self._call("restore", "--staged", "--", path)
        return f"Unstaged {path}"

    def stage_all(self) -> str:
        self._call("add", "-A")
        return "Staged all changes"

    def unstage_all(self) -> str:
        self._call("reset", "-q")
        return "Unstaged all changes"

    def discard_file(self, path: str, untracked: bool = False) -> str:
        if untracked:
            self._call("clean", "-f", "--", path)
            return f"Removed untracked file {path}"
        self._call("checkout", "--", path)
        return f"Discarded changes in {path}"

    def commit(self, message: str) -> str:
        self._call("commit", "-m", message)
        return f"Committed: {_first_line(message)}"

    def commit_amend(self, message: str) -> str:
        self._call("commit", "--amend", "-m", message)
        return f"Amended commit: {_first_line(message)}"

    # Stashes

    def create_stash(self, message: str | None = None, include_untracked: bool = False) -> str:
        args = ["stash", "push"]
        if include_untracked:
            args.append("--include-untracked")
        if message:
            args.extend(["-m", message])
        output = self._call(*args)
        if "No local changes to save" in output:
            return "No local changes to stash"
        return f"Created stash: {message}" if message else "Created stash"

    def apply_stash(self, index: int) -> str:
        self._call("stash", "apply", f"stash@{{{index}}}")
        return f"Applied stash@{{{index}}}"

    def pop_stash(self, index: int) -> str:
        self._call("stash", "pop", f"stash@{{{index}}}")
        return f"Popped stash@{{{index}}}"

    def drop_stash(self, index: int) -> str:
        self._call("stash", "drop", f"stash@{{{index}}}")
        return f"Dropped stash@{{{index}}}"

    # Branches and history

    def switch_branch(self, name: str, remote: bool = False) -> str:
        if remote:
            local_name = name.split("/", 1)[1] if "/" in name else name
            self._call("checkout", "-b", local_name, "--track", name)
            return f"Created {local_name} tracking {name}"
        self._call("checkout", name)
        return f"Switched to branch {name}"

    def delete_branch(self, name: str, force: bool = False) -> str:
        self._call("branch", "-D" if force else "-d", name)
        return f"Deleted branch {name}"

    def merge_branch(self, name: str) -> str:
        self._call("merge", name)
        return f"Merged {name}"

    def create_new_branch(self, name: str) -> str:
        self._call("checkout", "-b", name)
        return f"Created and switched to branch {name}"

    def create_branch(self, name: str, commit_hash: str) -> str:
        self._call("branch", name, commit_hash)
        return f"Created branch {name} at {commit_hash}"

    def checkout_commit(self, commit_hash: str) -> str:
        self._call("checkout", commit_hash)
        return f"Checked out {commit_hash} (detached HEAD)"

    def cherry_pick(self, commit_hash: str) -> str:
        self._call("cherry-pick", commit_hash)
        return f"Cherry-picked {commit_hash}"

    def revert_commit(self, commit_hash: str) -> str:
        self._call("revert", "--no-edit", commit_hash)
        return f"Reverted {commit_hash}"

    # Remotes

    def fetch(self) -> str:
        self._call("fetch", "--all")
        return "Fetched from all remotes"

    def push(self, force: bool = False) -> str:
        if force:
            self._call("push", "--force-with-lease")
            return "Force-pushed to remote"
        self._call("push")
        return "Pushed to remote"

    def pull(self, rebase: bool = False) -> str:
        if rebase:
            self._call("pull", "--rebase")
            return "Pulled from remote (rebase)"
        self._call("pull")
        return "Pulled from remote"


def _first_line(message: str) -> str:
    return message.strip().splitlines()[0] if message.strip() else ""
