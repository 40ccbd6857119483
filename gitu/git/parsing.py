"""Parsers for git's plain-text command output.

Each parser takes one captured stdout blob and returns typed records.
Parsers never raise on unexpected input: malformed lines are skipped and
an empty commit diff degrades to a single placeholder file.
"""

from __future__ import annotations

import re

from .models import (
    NO_CHANGES_FILENAME,
    Branch,
    Commit,
    CommitDiff,
    Decoration,
    FileDiff,
    FileStatus,
    StashEntry,
    StatusFile,
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DIFF_MARKER = "diff --git "
_HUNK_PREFIX = "@@"
_DIFF_HEADER_PREFIXES = (
    "index ",
    "--- ",
    "+++ ",
    "new file mode",
    "deleted file mode",
    "old mode",
    "new mode",
    "similarity index",
    "dissimilarity index",
    "rename from",
    "rename to",
    "copy from",
    "copy to",
)
_STATUS_CODES = {
    "M": FileStatus.MODIFIED,
    "A": FileStatus.ADDED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
    "?": FileStatus.UNTRACKED,
}
_STASH_PREFIX_RE = re.compile(r"^stash@\{[^}]*\}:\s*")
_QUOTED_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "\\": "\\",
}


def _first_hex_index(line: str) -> int | None:
    for idx, ch in enumerate(line):
        if ch in _HEX_DIGITS:
            return idx
    return None


def parse_decorations(text: str) -> list[Decoration]:
    """Parse the comma-separated ref list found between log parentheses."""
    decorations: list[Decoration] = []
    for raw_part in text.split(","):
        part = raw_part.strip()
        if not part:
            continue
        if part.startswith("HEAD -> "):
            decorations.append(Decoration.head())
            target = part[len("HEAD -> "):].strip()
            if target:
                decorations.append(Decoration.for_ref(target))
        elif part == "HEAD":
            decorations.append(Decoration.head())
        elif part.startswith("tag:"):
            name = part[len("tag:"):].strip()
            if name:
                decorations.append(Decoration.tag(name))
        else:
            decorations.append(Decoration.for_ref(part))
    return decorations


def parse_log_line(line: str) -> Commit | None:
    """Parse one ``--graph --oneline --decorate`` line, or ``None`` for graph-only rows."""
    if not line:
        return None
    hash_start = _first_hex_index(line)
    if hash_start is None:
        return None

    graph = line[:hash_start]
    commit_hash, _, rest = line[hash_start:].partition(" ")

    decorations: list[Decoration] = []
    message = rest
    stripped = rest.strip()
    if stripped.startswith("("):
        close_idx = stripped.find(")")
        if close_idx != -1:
            decorations = parse_decorations(stripped[1:close_idx])
            message = stripped[close_idx + 1:].strip()

    return Commit(graph=graph, hash=commit_hash, message=message, decorations=decorations)


def parse_log_output(output: str) -> list[Commit]:
    """Parse graph log output, keeping the traversal order of the source."""
    commits: list[Commit] = []
    for line in output.splitlines():
        commit = parse_log_line(line)
        if commit is not None:
            commits.append(commit)
    return commits


def _diff_filename(marker_line: str) -> str:
    tokens = marker_line.split()
    if len(tokens) < 3:
        return "unknown"
    name = tokens[2]
    if name.startswith("a/"):
        name = name[2:]
    return name or "unknown"


def _no_changes_diff(output: str) -> FileDiff:
    content = "This commit does not change any files.\n"
    if output.strip():
        content += "\n" + output if output.endswith("\n") else "\n" + output + "\n"
    return FileDiff(filename=NO_CHANGES_FILENAME, diff_content=content)


def parse_commit_diff(output: str) -> CommitDiff:
    """Split ``git show`` output into per-file hunk bodies.

    The commit header before the first ``diff --git`` marker is dropped, as
    are per-file metadata lines ahead of the first hunk header.
    """
    files: list[FileDiff] = []
    current_name: str | None = None
    current_lines: list[str] = []
    in_hunks = False

    def flush() -> None:
        if current_name is None:
            return
        body = "".join(f"{line}\n" for line in current_lines)
        files.append(FileDiff(filename=current_name, diff_content=body))

    for line in output.splitlines():
        if line.startswith(_DIFF_MARKER):
            flush()
            current_name = _diff_filename(line)
            current_lines = []
            in_hunks = False
            continue
        if current_name is None:
            continue
        if line.startswith(_HUNK_PREFIX):
            in_hunks = True
        elif not in_hunks and line.startswith(_DIFF_HEADER_PREFIXES):
            continue
        current_lines.append(line)
    flush()

    if not files:
        files.append(_no_changes_diff(output))
    return CommitDiff(files=files)


def _unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with special characters."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    out = bytearray()
    idx = 0
    while idx < len(body):
        ch = body[idx]
        if ch != "\\" or idx + 1 >= len(body):
            out.extend(ch.encode("utf-8"))
            idx += 1
            continue
        nxt = body[idx + 1]
        octal = body[idx + 1:idx + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            idx += 4
            continue
        out.extend(_QUOTED_ESCAPES.get(nxt, nxt).encode("utf-8"))
        idx += 2
    return out.decode("utf-8", errors="replace")


def _split_rename(path_text: str) -> tuple[str, str | None]:
    if " -> " not in path_text:
        return _unquote_path(path_text), None
    source, _, destination = path_text.partition(" -> ")
    return _unquote_path(destination), _unquote_path(source)


def _decode_status(code: str) -> FileStatus:
    # Copies, type changes and unmerged states show up as modifications.
    return _STATUS_CODES.get(code, FileStatus.MODIFIED)


def parse_status_output(output: str) -> list[StatusFile]:
    """Parse ``git status --porcelain`` into staged and unstaged entries."""
    entries: list[StatusFile] = []
    for line in output.splitlines():
        if len(line) < 3:
            continue
        staged_code = line[0]
        unstaged_code = line[1]
        path, original_path = _split_rename(line[3:])
        if not path:
            continue

        if staged_code == "?" and unstaged_code == "?":
            entries.append(StatusFile(path=path, status=FileStatus.UNTRACKED, staged=False))
            continue

        if staged_code not in {" ", "?"}:
            status = _decode_status(staged_code)
            entries.append(
                StatusFile(
                    path=path,
                    status=status,
                    staged=True,
                    original_path=original_path if status is FileStatus.RENAMED else None,
                )
            )
        if unstaged_code != " ":
            status = _decode_status(unstaged_code)
            entries.append(
                StatusFile(
                    path=path,
                    status=status,
                    staged=False,
                    original_path=original_path if status is FileStatus.RENAMED else None,
                )
            )
    return entries


def _stash_branch(descriptor: str) -> str:
    for prefix in ("WIP on ", "On "):
        if descriptor.startswith(prefix):
            branch = descriptor[len(prefix):].strip()
            if branch:
                return branch
    return "unknown"


def parse_stash_list(output: str) -> list[StashEntry]:
    """Parse ``git stash list``; indices follow output order, not the text."""
    stashes: list[StashEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        body = _STASH_PREFIX_RE.sub("", line, count=1)
        descriptor, sep, message = body.partition(": ")
        if not sep:
            descriptor = descriptor.rstrip(":")
            message = descriptor
        stashes.append(
            StashEntry(
                index=len(stashes),
                branch=_stash_branch(descriptor),
                message=message.strip(),
            )
        )
    return stashes


def _split_branch_columns(text: str) -> tuple[str, str, str] | None:
    name = ""
    rest = text
    if text.startswith("("):
        # Detached HEAD rows carry a parenthesized, space-containing name.
        close_idx = text.find(")")
        if close_idx != -1:
            name = text[:close_idx + 1]
            rest = text[close_idx + 1:]
    if not name:
        parts = text.split(None, 1)
        if not parts:
            return None
        name = parts[0]
        rest = parts[1] if len(parts) > 1 else ""

    parts = rest.split(None, 1)
    if not parts:
        return None
    commit_hash = parts[0]
    message = parts[1].strip() if len(parts) > 1 else ""
    return name, commit_hash, message


def parse_branch_list(output: str, remote: bool = False) -> list[Branch]:
    """Parse ``git branch -vv`` (local) or ``git branch -r -v`` (remote) output."""
    branches: list[Branch] = []
    for line in output.splitlines():
        if not line.strip() or "HEAD ->" in line:
            continue
        is_current = line.startswith("*") and not remote
        columns = _split_branch_columns(line[2:].strip())
        if columns is None:
            continue
        name, commit_hash, message = columns
        branches.append(
            Branch(
                name=name,
                is_current=is_current,
                is_remote=remote,
                commit_hash=commit_hash,
                commit_message=message,
            )
        )
    return branches


def merge_branch_lists(local: list[Branch], remote: list[Branch]) -> list[Branch]:
    """Concatenate local and remote listings, local first."""
    return [*local, *remote]
