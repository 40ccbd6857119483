"""ANSI palette used by the screen renderer.

The UI palette is separate from the pygments style used for diff bodies.
``NO_COLOR_THEME`` keeps layout identical while emitting no escapes.
"""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    divider: str
    dim: str
    tab_active: str
    tab_inactive: str
    pane_title: str
    staged_header: str
    staged_file: str
    unstaged_header: str
    unstaged_file: str
    graph: str
    commit_hash: str
    head: str
    branch_bracket: str
    branch_name: str
    remote_bracket: str
    remote_name: str
    tag_bracket: str
    tag_name: str
    stash_ref: str
    stash_branch: str
    current_branch: str
    local_header: str
    remote_header: str
    file_indicator: str
    message_success: str
    message_error: str
    message_info: str
    input_title: str
    input_placeholder: str
    help_title: str
    help_heading: str
    help_key: str
    help_dim: str
    help_border: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    divider="\033[2m",
    dim="\033[2;38;5;250m",
    tab_active="\033[1;30;46m",
    tab_inactive="\033[38;5;250m",
    pane_title="\033[1;38;5;81m",
    staged_header="\033[1;32m",
    staged_file="\033[32m",
    unstaged_header="\033[1;31m",
    unstaged_file="\033[31m",
    graph="\033[36m",
    commit_hash="\033[33m",
    head="\033[1;30;46m",
    branch_bracket="\033[1;32m",
    branch_name="\033[1;30;42m",
    remote_bracket="\033[1;34m",
    remote_name="\033[1;37;44m",
    tag_bracket="\033[1;33m",
    tag_name="\033[1;30;43m",
    stash_ref="\033[1;33m",
    stash_branch="\033[36m",
    current_branch="\033[1;36m",
    local_header="\033[1;32m",
    remote_header="\033[1;34m",
    file_indicator="\033[1;33m",
    message_success="\033[30;42m",
    message_error="\033[37;41m",
    message_info="\033[30;43m",
    input_title="\033[1;33m",
    input_placeholder="\033[2;38;5;250m",
    help_title="\033[1;38;5;45m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    help_border="\033[38;5;45m",
)

NO_COLOR_THEME = UITheme(
    **{
        entry.name: ("no-color" if entry.name == "name" else "")
        for entry in fields(UITheme)
    }
)


def theme_for(no_color: bool) -> UITheme:
    return NO_COLOR_THEME if no_color else DEFAULT_THEME
