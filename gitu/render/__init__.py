"""Screen composition and painting.

``build_screen`` turns ``AppState`` into exactly ``height`` styled rows of
``width`` columns without touching the terminal. ``paint`` writes one
composed frame to stdout.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..git.models import Branch, Commit, Decoration, DecorationKind, FileDiff
from ..runtime.state import (
    AppState,
    BranchNameInputMode,
    CommitMessageInputMode,
    MessageType,
    NewBranchNameInputMode,
    Panel,
    SearchMode,
    StashMessageInputMode,
)
from ..runtime.status_rows import STAGED_HEADER, build_status_rows, selected_status_file
from .ansi import fit_ansi_line, strip_ansi
from .diff import DEFAULT_STYLE, diff_lines
from .help import help_screen_lines
from .theme import UITheme, theme_for

SELECTED_MARKER = ">> "
UNSELECTED_MARKER = "   "
DIVIDER = "│"
LOCAL_BRANCHES_HEADER = "Local Branches:"
REMOTE_BRANCHES_HEADER = "Remote Branches:"


@dataclass(frozen=True)
class Pane:
    """One titled column: a selectable list or a scrollable text body."""

    title: str
    rows: list[str]
    selected: int | None = None
    scroll: int = 0
    selectable: bool = False


@dataclass(frozen=True)
class RenderContext:
    theme: UITheme
    style: str
    no_color: bool


def _window_start(selected: int | None, count: int, rows: int) -> int:
    """First visible row keeping ``selected`` on screen."""
    if selected is None or rows <= 0 or selected < rows:
        return 0
    return min(selected - rows + 1, max(0, count - rows))


def _render_pane(pane: Pane, width: int, height: int, theme: UITheme) -> list[str]:
    if height <= 0:
        return []
    out = [fit_ansi_line(f"{theme.pane_title} {pane.title} {theme.reset}", width)]
    body_rows = height - 1
    if pane.selectable:
        start = _window_start(pane.selected, len(pane.rows), body_rows)
        for idx in range(start, min(len(pane.rows), start + body_rows)):
            row = pane.rows[idx]
            if idx == pane.selected:
                line = f"{theme.reverse}{SELECTED_MARKER}{strip_ansi(row)}"
                out.append(fit_ansi_line(line, width))
            else:
                out.append(fit_ansi_line(f"{UNSELECTED_MARKER}{row}", width))
    else:
        start = max(0, min(pane.scroll, len(pane.rows) - body_rows))
        for row in pane.rows[start : start + body_rows]:
            out.append(fit_ansi_line(row, width))
    while len(out) < height:
        out.append(" " * width)
    return out


def _split_widths(width: int, percents: tuple[int, ...]) -> list[int]:
    available = width - (len(percents) - 1)
    widths = [max(1, available * percent // 100) for percent in percents[:-1]]
    widths.append(available - sum(widths))
    return widths


def _compose_columns(panes: list[Pane], percents: tuple[int, ...], width: int, height: int, theme: UITheme) -> list[str]:
    if len(panes) == 1 or width < len(panes) * 4:
        return _render_pane(panes[0], width, height, theme)
    widths = _split_widths(width, percents)
    columns = [_render_pane(pane, w, height, theme) for pane, w in zip(panes, widths)]
    divider = f"{theme.divider}{DIVIDER}{theme.reset}"
    return [divider.join(column[row] for column in columns) for row in range(height)]


# Status panel


def _status_pane(state: AppState, theme: UITheme) -> Pane:
    files = state.status_files
    title = f"Status ({len(files)} files)"
    if not files:
        return Pane(title, [f"{theme.dim}Nothing to commit, working tree clean{theme.reset}"])

    rows: list[str] = []
    for row in build_status_rows(files):
        if row.is_header:
            color = theme.staged_header if row.label == STAGED_HEADER else theme.unstaged_header
            rows.append(f"{color}{row.label}{theme.reset}")
            continue
        entry = files[row.file_index]
        color = theme.staged_file if entry.staged else theme.unstaged_file
        label = entry.path
        if entry.original_path:
            label = f"{entry.original_path} -> {entry.path}"
        rows.append(f"{color}[{entry.status.code}]{theme.reset} {label}")
    return Pane(title, rows, selected=state.status_selected, selectable=True)


def _status_diff_pane(state: AppState, ctx: RenderContext) -> Pane:
    entry = selected_status_file(state.status_files, state.status_selected)
    filename = entry.path if entry is not None else "unknown"
    lines = diff_lines(state.status_diff_content or "", ctx.style, ctx.no_color)
    return Pane(f"Diff: {filename}", lines, scroll=state.status_diff_scroll)


def _status_panel(state: AppState, ctx: RenderContext, width: int, height: int) -> list[str]:
    panes = [_status_pane(state, ctx.theme)]
    if state.status_show_diff:
        panes.append(_status_diff_pane(state, ctx))
    return _compose_columns(panes, (40, 60), width, height, ctx.theme)


# Log panel


def render_decoration(decoration: Decoration, theme: UITheme) -> str:
    reset = theme.reset
    if decoration.kind is DecorationKind.HEAD:
        return f"{theme.head}HEAD{reset}"
    if decoration.kind is DecorationKind.BRANCH:
        return f"{theme.branch_bracket}[{reset}{theme.branch_name}{decoration.name}{reset}{theme.branch_bracket}]{reset}"
    if decoration.kind is DecorationKind.REMOTE_BRANCH:
        return f"{theme.remote_bracket}[{reset}{theme.remote_name}{decoration.name}{reset}{theme.remote_bracket}]{reset}"
    return f"{theme.tag_bracket}({reset}{theme.tag_name}{decoration.name}{reset}{theme.tag_bracket}){reset}"


def render_commit_row(commit: Commit, theme: UITheme) -> str:
    parts = [f"{theme.graph}{commit.graph}{theme.reset}{theme.commit_hash}{commit.hash}{theme.reset}"]
    parts.extend(render_decoration(decoration, theme) for decoration in commit.decorations)
    parts.append(commit.message)
    return " ".join(parts)


def _commit_pane(state: AppState, theme: UITheme) -> Pane:
    title = f"Git Log ({len(state.commits)} commits)"
    if state.active_filter is not None:
        title = f"{title} [{state.active_filter.describe()}]"
    rows = [render_commit_row(commit, theme) for commit in state.commits]
    return Pane(title, rows, selected=state.commit_selected, selectable=True)


def diff_stat(file_diff: FileDiff) -> tuple[int, int]:
    added = removed = 0
    for line in file_diff.diff_content.splitlines():
        if line.startswith("+") and not line.startswith("+++"):
            added += 1
        elif line.startswith("-") and not line.startswith("---"):
            removed += 1
    return added, removed


def _file_list_pane(state: AppState, theme: UITheme, title_prefix: str) -> Pane:
    files = state.current_diff.files if state.current_diff is not None else []
    rows = []
    for file_diff in files:
        added, removed = diff_stat(file_diff)
        rows.append(f"{theme.file_indicator}+{added} -{removed}{theme.reset} {file_diff.filename}")
    return Pane(f"{title_prefix} ({len(files)})", rows, selected=state.file_selected, selectable=True)


def _commit_file_diff_pane(state: AppState, ctx: RenderContext) -> Pane:
    file_diff = state.current_diff.file_at(state.file_selected) if state.current_diff is not None else None
    if file_diff is None:
        return Pane("Diff", [])
    lines = diff_lines(file_diff.diff_content, ctx.style, ctx.no_color)
    return Pane(file_diff.filename, lines, scroll=state.diff_scroll)


def _log_panel(state: AppState, ctx: RenderContext, width: int, height: int) -> list[str]:
    theme = ctx.theme
    commits = _commit_pane(state, theme)
    tree_view = state.tree_view
    if tree_view is not None:
        if tree_view.file_selected:
            detail = _commit_file_diff_pane(state, ctx)
        else:
            detail = _file_list_pane(state, theme, "Files Changed")
        return _compose_columns([commits, detail], (30, 70), width, height, theme)
    if state.show_diff:
        panes = [commits, _file_list_pane(state, theme, "Files"), _commit_file_diff_pane(state, ctx)]
        return _compose_columns(panes, (30, 25, 45), width, height, theme)
    return _compose_columns([commits], (100,), width, height, theme)


# Stash panel


def _stash_panel(state: AppState, ctx: RenderContext, width: int, height: int) -> list[str]:
    theme = ctx.theme
    title = f"Stashes ({len(state.stashes)})"
    if not state.stashes:
        pane = Pane(title, [f"{theme.dim}No stashes{theme.reset}"])
    else:
        rows = [
            f"{theme.stash_ref}{stash.ref}{theme.reset} on {theme.stash_branch}{stash.branch}{theme.reset}: {stash.message}"
            for stash in state.stashes
        ]
        pane = Pane(title, rows, selected=state.stash_selected, selectable=True)
    return _compose_columns([pane], (100,), width, height, theme)


# Branches panel


def _branch_row(branch: Branch, theme: UITheme) -> str:
    short_hash = f"{theme.commit_hash}{branch.commit_hash}{theme.reset}"
    message = f" {theme.dim}{branch.commit_message}{theme.reset}" if branch.commit_message else ""
    if branch.is_remote:
        return f"  {theme.remote_header}{branch.name}{theme.reset} {short_hash}{message}"
    if branch.is_current:
        return f"{theme.current_branch}* {branch.name}{theme.reset} {short_hash}{message}"
    return f"  {branch.name} {short_hash}{message}"


def _branches_panel(state: AppState, ctx: RenderContext, width: int, height: int) -> list[str]:
    theme = ctx.theme
    title = f"Branches ({len(state.branches)})"
    rows: list[str] = []
    selected_row: int | None = None
    sections = (
        (LOCAL_BRANCHES_HEADER, theme.local_header, False),
        (REMOTE_BRANCHES_HEADER, theme.remote_header, True),
    )
    for header, color, remote in sections:
        members = [(idx, branch) for idx, branch in enumerate(state.branches) if branch.is_remote == remote]
        if not members:
            continue
        rows.append(f"{color}{header}{theme.reset}")
        for idx, branch in members:
            if idx == state.branch_selected:
                selected_row = len(rows)
            rows.append(_branch_row(branch, theme))
    if not rows:
        pane = Pane(title, [f"{theme.dim}No branches{theme.reset}"])
    else:
        pane = Pane(title, rows, selected=selected_row, selectable=True)
    return _compose_columns([pane], (100,), width, height, theme)


# Chrome


def _tab_bar(state: AppState, theme: UITheme) -> str:
    tabs = []
    for panel in Panel:
        label = f"[{panel.value}] {panel.title}"
        style = theme.tab_active if panel is state.panel else theme.tab_inactive
        tabs.append(f"{style}{label}{theme.reset}")
    return " | ".join(tabs)


def _status_message_line(state: AppState, theme: UITheme) -> str | None:
    message = state.status_message
    if message is None:
        return None
    style = {
        MessageType.SUCCESS: theme.message_success,
        MessageType.ERROR: theme.message_error,
        MessageType.INFO: theme.message_info,
    }[message.kind]
    return f"{style} {message.text} {theme.reset}"


def input_prompt(state: AppState) -> tuple[str, str, str] | None:
    """Return ``(title, hint, placeholder)`` for the active input mode."""
    mode = state.mode
    if isinstance(mode, SearchMode):
        title = "Author Search" if mode.buffer.startswith("@") else "Message Search"
        return title, "Type to search | @ prefix for author | Enter: Apply | Esc: Cancel", "Type to search commits..."
    if isinstance(mode, BranchNameInputMode):
        return (
            f"Create Branch at {mode.commit_hash[:7]}",
            "Type branch name | Enter: Create | Esc: Cancel",
            "Enter branch name...",
        )
    if isinstance(mode, CommitMessageInputMode):
        if mode.amend:
            return "Amend Commit Message", "Edit message | Enter: Amend | Esc: Cancel", "Enter commit message..."
        return "Commit Message", "Type commit message | Enter: Commit | Esc: Cancel", "Enter commit message..."
    if isinstance(mode, StashMessageInputMode):
        return (
            "Stash Message",
            "Type stash message (optional) | Enter: Create stash | Esc: Cancel",
            "Optional stash message...",
        )
    if isinstance(mode, NewBranchNameInputMode):
        return "New Branch", "Type branch name | Enter: Create | Esc: Cancel", "Enter branch name..."
    return None


def _input_lines(state: AppState, theme: UITheme) -> list[str]:
    prompt = input_prompt(state)
    mode = state.input_mode
    if prompt is None or mode is None:
        return []
    title, hint, placeholder = prompt
    if mode.buffer:
        body = f"> {mode.buffer}{theme.reverse} {theme.reset}"
    else:
        body = f"> {theme.input_placeholder}{placeholder}{theme.reset}"
    return [f"{theme.input_title}{title}{theme.reset}  {theme.dim}{hint}{theme.reset}", body]


def footer_hint(state: AppState) -> str:
    """Key hints for the current panel and view."""
    if state.panel is Panel.STATUS:
        if state.status_show_diff:
            return "j/k: Scroll | PgUp/PgDn: Page | Enter: Hide diff | Space: Stage/Unstage"
        return "Space: Stage/Unstage | a/u: Stage/Unstage all | c: Commit | A: Amend | x: Discard | ?: Help"
    if state.panel is Panel.LOG:
        tree_view = state.tree_view
        if tree_view is not None:
            if tree_view.file_selected:
                return "j/k: Scroll | PgUp/PgDn: Page | Esc: Back to file list"
            return "j/k: Navigate | Enter: View File | Esc: Close | t: Toggle view"
        if state.show_diff:
            return "j/k: Scroll | h/l: File | Enter: Close | q: Close diff"
        if state.active_filter is not None:
            return "j/k: Nav | Enter: View | t: Tree | /: Search | Esc: Clear | q: Quit"
        return "j/k: Nav | Enter: View | t: Tree view | /: Search | q: Quit"
    if state.panel is Panel.STASH:
        return "a: Apply | p: Pop | d: Drop | q: Quit"
    return "Enter: Switch | d: Delete | n: New | m: Merge | ?: Help"


_PANEL_RENDERERS = {
    Panel.STATUS: _status_panel,
    Panel.LOG: _log_panel,
    Panel.STASH: _stash_panel,
    Panel.BRANCHES: _branches_panel,
}


def build_screen(
    state: AppState,
    width: int,
    height: int,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> list[str]:
    """Compose one frame as exactly ``height`` rows of ``width`` columns."""
    width = max(1, width)
    height = max(1, height)
    theme = theme_for(no_color)
    if state.help_visible:
        return help_screen_lines(width, height, theme)

    ctx = RenderContext(theme=theme, style=style, no_color=no_color)
    top: list[str] = []
    message_line = _status_message_line(state, theme)
    if message_line is not None:
        top.append(message_line)
    top.append(_tab_bar(state, theme))
    bottom = _input_lines(state, theme)
    bottom.append(f"{theme.dim}{footer_hint(state)}{theme.reset}")

    body_height = max(1, height - len(top) - len(bottom))
    body = _PANEL_RENDERERS[state.panel](state, ctx, width, body_height)

    lines = [fit_ansi_line(line, width) for line in top] + body
    lines.extend(fit_ansi_line(line, width) for line in bottom)
    lines = lines[:height]
    while len(lines) < height:
        lines.append(" " * width)
    return lines


def paint(lines: list[str], stdout_fd: int | None = None) -> None:
    """Write a composed frame to the terminal, one absolutely positioned row each."""
    fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    out: list[str] = ["\033[H"]
    for row, line in enumerate(lines):
        out.append(f"\033[{row + 1};1H")
        out.append(line)
        out.append("\033[0m")
    os.write(fd, "".join(out).encode("utf-8", errors="replace"))


__all__ = ["Pane", "build_screen", "paint", "footer_hint", "input_prompt", "render_commit_row", "render_decoration"]
