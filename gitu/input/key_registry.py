"""Key-combo dispatch tables used by the mode dispatcher."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

KeyHandler = Callable[[], bool | None]


@dataclass(frozen=True)
class KeyComboBinding:
    """One or more key tokens routed to a single handler.

    Handlers return ``True`` to quit, ``False`` when handled, and ``None``
    to let the key fall through to the next table.
    """

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Key token to handler table; a later binding for a token replaces the earlier one."""

    def __init__(self) -> None:
        self._handlers: dict[str, KeyHandler] = {}

    def add(self, binding: KeyComboBinding) -> KeyComboRegistry:
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def bind(self, combos: Iterable[str], action: Callable[[], object]) -> KeyComboRegistry:
        """Bind an action that consumes the key and never quits by itself."""

        def handler() -> bool:
            action()
            return False

        return self.add(KeyComboBinding(tuple(combos), handler))

    def dispatch(self, key: str) -> bool | None:
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
