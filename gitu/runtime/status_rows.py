"""Status-panel row layout.

The status list groups entries under "Staged Changes:" and
"Unstaged Changes:" header rows. Staged membership changes after every
stage/unstage call, so the layout is rebuilt from the live collection on
each use and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..git.models import StatusFile

STAGED_HEADER = "Staged Changes:"
UNSTAGED_HEADER = "Unstaged Changes:"


@dataclass(frozen=True)
class StatusRow:
    """One display row: a group header (``file_index is None``) or a file."""

    label: str
    file_index: int | None = None

    @property
    def is_header(self) -> bool:
        return self.file_index is None


def build_status_rows(files: list[StatusFile]) -> list[StatusRow]:
    staged = [idx for idx, entry in enumerate(files) if entry.staged]
    unstaged = [idx for idx, entry in enumerate(files) if not entry.staged]

    rows: list[StatusRow] = []
    if staged:
        rows.append(StatusRow(STAGED_HEADER))
        rows.extend(StatusRow(files[idx].path, idx) for idx in staged)
    if unstaged:
        rows.append(StatusRow(UNSTAGED_HEADER))
        rows.extend(StatusRow(files[idx].path, idx) for idx in unstaged)
    return rows


def row_file_index(files: list[StatusFile], row: int | None) -> int | None:
    """Translate a selected row into an index into ``files``; headers map to ``None``."""
    if row is None:
        return None
    rows = build_status_rows(files)
    if not (0 <= row < len(rows)):
        return None
    return rows[row].file_index


def selected_status_file(files: list[StatusFile], row: int | None) -> StatusFile | None:
    file_index = row_file_index(files, row)
    if file_index is None:
        return None
    return files[file_index]


def _file_rows(files: list[StatusFile]) -> list[int]:
    return [idx for idx, row in enumerate(build_status_rows(files)) if not row.is_header]


def first_file_row(files: list[StatusFile]) -> int | None:
    file_rows = _file_rows(files)
    return file_rows[0] if file_rows else None


def next_file_row(files: list[StatusFile], row: int | None) -> int | None:
    """Move to the next selectable row, skipping headers and wrapping around."""
    file_rows = _file_rows(files)
    if not file_rows:
        return row
    if row is None:
        return file_rows[0]
    for candidate in file_rows:
        if candidate > row:
            return candidate
    return file_rows[0]


def previous_file_row(files: list[StatusFile], row: int | None) -> int | None:
    file_rows = _file_rows(files)
    if not file_rows:
        return row
    if row is None:
        return file_rows[0]
    for candidate in reversed(file_rows):
        if candidate < row:
            return candidate
    return file_rows[-1]
