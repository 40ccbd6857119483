"""Raw-key decoding: ESC timing, navigation sequences and control tokens."""

from __future__ import annotations

import os
import time
import unittest

from gitu.input import reader


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()

    def _read(self, data: bytes, count: int = 1) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            if data:
                os.write(write_fd, data)
            return [reader.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_promptly(self) -> None:
        started = time.monotonic()
        keys = self._read(b"\x1b")
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_timeout_without_input_is_empty(self) -> None:
        self.assertEqual(self._read(b""), [""])

    def test_navigation_sequences(self) -> None:
        cases = {
            b"\x1b[A": "UP",
            b"\x1b[B": "DOWN",
            b"\x1b[C": "RIGHT",
            b"\x1b[D": "LEFT",
            b"\x1bOA": "UP",
            b"\x1b[5~": "PAGE_UP",
            b"\x1b[6~": "PAGE_DOWN",
            b"\x1b[1;5B": "DOWN",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(self._read(data), [expected])

    def test_escape_does_not_swallow_following_key(self) -> None:
        self.assertEqual(self._read(b"\x1bq", count=2), ["ESC", "q"])

    def test_control_keys(self) -> None:
        cases = {
            b"\r": "ENTER_CR",
            b"\n": "ENTER_LF",
            b"\x7f": "BACKSPACE",
            b"\x08": "BACKSPACE",
            b"\x03": "CTRL_C",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(self._read(data), [expected])

    def test_printable_and_utf8_characters(self) -> None:
        self.assertEqual(self._read("?é".encode("utf-8"), count=2), ["?", "é"])


if __name__ == "__main__":
    unittest.main()
