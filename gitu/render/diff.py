"""Diff body colorization with Pygments.

Diff text from git may carry arbitrary bytes from the tracked files, so
control characters are escaped before anything reaches the terminal.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import DiffLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def diff_lines(text: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    """Split diff text into display lines, colorized unless ``no_color``."""
    return list(_diff_lines(text, style, no_color))


@lru_cache(maxsize=32)
def _diff_lines(text: str, style: str, no_color: bool) -> tuple[str, ...]:
    source = sanitize_terminal_text(text).replace("\r", "")
    if not source:
        return ()
    if no_color:
        return tuple(source.splitlines())

    formatter = _formatter_for_style(normalize_style(style))
    rendered = highlight(source, DiffLexer(stripnl=False), formatter)
    lines = rendered.splitlines()
    # Pygments always terminates output with a newline; keep the source's line count.
    return tuple(lines[: len(source.splitlines())])
