"""Column arithmetic for styled terminal text.

Escape sequences occupy no columns. Tabs advance to the next 8-column stop,
combining marks take none and East Asian wide characters take two.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"(\x1b\[[0-9;?]*[ -/]*[@-~])")
TAB_STOP = 8
RESET = "\033[0m"


def cell_width(ch: str, col: int) -> int:
    """Columns taken by ``ch`` when drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    col = 0
    for ch in strip_ansi(text):
        col += cell_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` down to ``max_cols`` columns, keeping escapes before the cut.

    Tabs come out as spaces so the result lines up cell for cell, and a wide
    character that would straddle the edge is dropped whole.
    """
    if max_cols <= 0:
        return ""
    pieces: list[str] = []
    col = 0
    for chunk in ANSI_ESCAPE_RE.split(text):
        if ANSI_ESCAPE_RE.fullmatch(chunk):
            pieces.append(chunk)
            continue
        for ch in chunk:
            width = cell_width(ch, col)
            if col + width > max_cols:
                return "".join(pieces)
            pieces.append(" " * width if ch == "\t" else ch)
            col += width
    return "".join(pieces)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip or pad ``text`` to exactly ``width`` columns.

    Styled lines get a reset before the padding so colors never bleed into
    the next pane.
    """
    if width <= 0:
        return ""
    clipped = clip_ansi_line(text, width)
    padding = " " * (width - display_width(clipped))
    if "\x1b" in clipped:
        return f"{clipped}{RESET}{padding}"
    return clipped + padding
