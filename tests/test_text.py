from __future__ import annotations

import unittest

from jjview.text import short_id, truncate_text


class TruncateTextTests(unittest.TestCase):
    def test_text_within_limit_is_unchanged(self) -> None:
        self.assertEqual(truncate_text("hello", 5), "hello")
        self.assertEqual(truncate_text("", 0), "")

    def test_long_text_gets_ellipsis(self) -> None:
        self.assertEqual(truncate_text("hello world", 8), "hello...")

    def test_counts_characters_not_bytes(self) -> None:
        text = "日本語のテキスト"

        result = truncate_text(text, 6)

        self.assertEqual(result, "日本語...")
        self.assertEqual(len(result), 6)
        result.encode("utf-8")

    def test_small_limits_use_plain_prefix(self) -> None:
        self.assertEqual(truncate_text("abcdef", 3), "abc")
        self.assertEqual(truncate_text("abcdef", 2), "ab")
        self.assertEqual(truncate_text("abcdef", 0), "")

    def test_negative_limit_is_treated_as_zero(self) -> None:
        self.assertEqual(truncate_text("abc", -1), "")

    def test_emoji_are_never_split(self) -> None:
        self.assertEqual(truncate_text("🎉🎉🎉🎉🎉", 4), "🎉...")


class ShortIdTests(unittest.TestCase):
    def test_defaults_to_eight_characters(self) -> None:
        self.assertEqual(short_id("qpvuntsmwlqt"), "qpvuntsm")
        self.assertEqual(short_id("abc"), "abc")
        self.assertEqual(short_id("qpvuntsmwlqt", 4), "qpvu")


if __name__ == "__main__":
    unittest.main()
