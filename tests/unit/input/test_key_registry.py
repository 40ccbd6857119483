from __future__ import annotations

import unittest

from gitu.input import KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def test_bound_action_consumes_key(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().bind(("j", "DOWN"), lambda: calls.append("down"))

        self.assertIs(registry.dispatch("j"), False)
        self.assertIs(registry.dispatch("DOWN"), False)
        self.assertEqual(calls, ["down", "down"])

    def test_unbound_key_falls_through(self) -> None:
        self.assertIsNone(KeyComboRegistry().dispatch("x"))

    def test_raw_binding_can_request_quit(self) -> None:
        registry = KeyComboRegistry().add(KeyComboBinding(("q",), lambda: True))

        self.assertIs(registry.dispatch("q"), True)

    def test_later_binding_wins(self) -> None:
        calls: list[str] = []
        registry = (
            KeyComboRegistry()
            .bind(("a",), lambda: calls.append("first"))
            .bind(("a",), lambda: calls.append("second"))
        )

        registry.dispatch("a")

        self.assertEqual(calls, ["second"])


if __name__ == "__main__":
    unittest.main()
