"""Help overlay content and modal layout.

Lists every binding per panel. Layout here is presentation-only and side
effect free: the caller paints the returned rows.
"""

from __future__ import annotations

from .ansi import display_width, fit_ansi_line
from .theme import UITheme

HELP_TITLE = "Keybindings"
HELP_CLOSE_HINT = "Press ? or Esc to close"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Global",
        (
            ("1-4", "Switch panels (Status/Log/Stash/Branches)"),
            ("?", "Toggle this help"),
            ("q", "Quit / Close diff"),
            ("Esc", "Cancel / Clear"),
            ("R", "Refresh all panels"),
            ("PgUp/PgDn", "Scroll diff by 10 lines"),
        ),
    ),
    (
        "Status Panel",
        (
            ("Space", "Stage / Unstage file"),
            ("a", "Stage all files"),
            ("u", "Unstage all files"),
            ("c", "Commit"),
            ("A", "Amend last commit"),
            ("x", "Discard changes in file"),
            ("s", "Stash changes"),
            ("Enter", "Show / Hide diff"),
        ),
    ),
    (
        "Log Panel",
        (
            ("Enter", "Show / Hide diff"),
            ("h/l", "Previous / next file in diff"),
            ("t", "Tree view"),
            ("/", "Search commits (@name for author)"),
            ("y", "Copy commit hash"),
            ("c", "Checkout commit"),
            ("b", "Create branch from commit"),
            ("p", "Cherry-pick commit"),
            ("r", "Revert commit"),
            ("f", "Fetch from remote"),
            ("P", "Push to remote"),
            ("U", "Pull from remote"),
        ),
    ),
    (
        "Stash Panel",
        (
            ("a", "Apply stash"),
            ("p", "Pop stash"),
            ("d", "Drop stash"),
        ),
    ),
    (
        "Branches Panel",
        (
            ("Enter", "Switch to branch"),
            ("d", "Delete branch"),
            ("n", "Create new branch"),
            ("m", "Merge branch into current"),
        ),
    ),
)

KEY_COLUMN_WIDTH = 11


def help_lines(theme: UITheme) -> list[str]:
    """Return the styled help body, one entry per row."""
    lines: list[str] = []
    for heading, bindings in HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        for keys, description in bindings:
            lines.append(f"  {theme.help_key}{keys.ljust(KEY_COLUMN_WIDTH)}{theme.reset}{description}")
    lines.append("")
    lines.append(f"{theme.help_dim}  {HELP_CLOSE_HINT}{theme.reset}")
    return lines


def help_screen_lines(width: int, height: int, theme: UITheme) -> list[str]:
    """Render the full-screen help modal as ``height`` rows of ``width`` columns."""
    width = max(1, width)
    height = max(1, height)
    body = help_lines(theme)

    modal_w = min(width, max(min(52, width), min(64, width - 4)))
    modal_h = min(height, len(body) + 2)
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(0, modal_w - 2)
    inner_h = max(0, modal_h - 2)

    border = theme.help_border
    reset = theme.reset
    title = f" {HELP_TITLE} "
    top_fill = max(0, inner_w - display_width(title))
    top = (
        f"{border}╭{reset}{theme.help_title}{title[:inner_w]}{reset}"
        f"{border}{'─' * top_fill}╮{reset}"
    )
    bottom = f"{border}╰{'─' * inner_w}╯{reset}"

    modal_rows = [top]
    for row in body[:inner_h]:
        modal_rows.append(f"{border}│{reset}{fit_ansi_line(row, inner_w)}{border}│{reset}")
    modal_rows.append(bottom)

    blank = " " * width
    out = [blank] * height
    for offset, row in enumerate(modal_rows[:height]):
        left = " " * x
        right = " " * max(0, width - x - modal_w)
        out[y + offset] = left + row + right
    return out
