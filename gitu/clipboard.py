"""Clipboard helper backed by whichever platform copy command is installed.

Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import shutil
import subprocess

CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbcopy",),
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("clip.exe",),
)


def copy_text(text: str) -> str | None:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(
                list(command),
                input=text,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
                timeout=2.0,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            return f"Failed to copy to clipboard: {exc}"
        if proc.returncode != 0:
            return f"Failed to copy to clipboard: {command[0]} exited with {proc.returncode}"
        return None
    return "Failed to access clipboard: no clipboard command found"
