"""Raw-key decoding tests.

Covers control tokens, CSI navigation sequences, ESC handling and the
CR/LF collapse used for the Enter key.
"""

from __future__ import annotations

import os
import unittest

from lazystage import input as input_mod


def _read_all(data: bytes, count: int) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [input_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        input_mod._PENDING_BYTES.clear()

    def test_control_keys(self) -> None:
        self.assertEqual(
            _read_all(b"\t\x12\x15\x04\x07\x7f", 6),
            ["TAB", "CTRL_R", "CTRL_U", "CTRL_D", "CTRL_G", "BACKSPACE"],
        )

    def test_navigation_sequences(self) -> None:
        self.assertEqual(
            _read_all(b"\x1b[A\x1b[B\x1b[H\x1b[F\x1b[5~\x1b[6~", 6),
            ["UP", "DOWN", "HOME", "END", "PAGE_UP", "PAGE_DOWN"],
        )

    def test_lone_escape_and_following_key(self) -> None:
        self.assertEqual(_read_all(b"\x1bj", 2), ["ESC", "j"])

    def test_multibyte_character(self) -> None:
        self.assertEqual(_read_all("é".encode("utf-8"), 1), ["é"])

    def test_timeout_returns_empty_token(self) -> None:
        self.assertEqual(_read_all(b"", 1), [""])


class NormalizeEnterTests(unittest.TestCase):
    def test_crlf_is_one_enter(self) -> None:
        key, skip = input_mod.normalize_enter("ENTER_CR", False)
        self.assertEqual((key, skip), ("ENTER", True))
        self.assertEqual(input_mod.normalize_enter("ENTER_LF", skip), ("", False))

    def test_bare_lf_is_enter(self) -> None:
        self.assertEqual(input_mod.normalize_enter("ENTER_LF", False), ("ENTER", False))

    def test_other_keys_reset_flag(self) -> None:
        self.assertEqual(input_mod.normalize_enter("j", True), ("j", False))


if __name__ == "__main__":
    unittest.main()
