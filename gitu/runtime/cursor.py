"""Circular selection and saturating scroll helpers shared by every list."""

from __future__ import annotations

PAGE_SCROLL_LINES = 10


def initial_index(count: int) -> int | None:
    """Return the default selection for a freshly loaded collection."""
    return 0 if count > 0 else None


def next_index(selected: int | None, count: int) -> int | None:
    """Advance ``selected`` by one, wrapping from the last item to the first.

    Empty collections keep the current selection untouched.
    """
    if count <= 0:
        return selected
    if selected is None or selected >= count - 1:
        return 0
    return selected + 1


def previous_index(selected: int | None, count: int) -> int | None:
    """Step ``selected`` back by one, wrapping from the first item to the last."""
    if count <= 0:
        return selected
    if selected is None:
        return 0
    if selected <= 0 or selected >= count:
        return count - 1
    return selected - 1


def scroll_down(value: int, step: int = 1) -> int:
    return value + max(0, step)


def scroll_up(value: int, step: int = 1) -> int:
    return max(0, value - max(0, step))
