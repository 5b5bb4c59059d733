"""Regression tests for raw-key decoding.

Covers ESC timing, arrow and tilde sequences, UTF-8 input, and control-key
token mapping.
"""

import os
import time
import unittest

from jjview.input import reader


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        reader._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        reader._PENDING_BYTES.clear()

    def _keys(self, data: bytes, count: int = 1) -> list[str]:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, data)
            return [reader.read_key(read_fd, timeout_ms=20) for _ in range(count)]
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        keys = self._keys(b"\x1b")
        elapsed = time.monotonic() - started

        self.assertEqual(keys, ["ESC"])
        self.assertLess(elapsed, 0.2)

    def test_arrow_sequences(self) -> None:
        self.assertEqual(self._keys(b"\x1b[A\x1b[B\x1bOC", 3), ["UP", "DOWN", "RIGHT"])

    def test_tilde_sequences(self) -> None:
        self.assertEqual(self._keys(b"\x1b[5~\x1b[6~\x1b[3~", 3), ["PAGE_UP", "PAGE_DOWN", "DELETE"])

    def test_modified_arrow_drops_modifier(self) -> None:
        self.assertEqual(self._keys(b"\x1b[1;5A"), ["UP"])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(self._keys(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys(self) -> None:
        self.assertEqual(
            self._keys(b"\r\n\t\x7f\x03\x12", 6),
            ["ENTER_CR", "ENTER_LF", "TAB", "BACKSPACE", "CTRL_C", "CTRL_R"],
        )

    def test_utf8_character_is_read_whole(self) -> None:
        self.assertEqual(self._keys("é日".encode("utf-8"), 2), ["é", "日"])

    def test_timeout_returns_empty_string(self) -> None:
        self.assertEqual(self._keys(b""), [""])


if __name__ == "__main__":
    unittest.main()
