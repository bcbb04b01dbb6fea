from __future__ import annotations

import os
import unittest
from unittest import mock

from nihongo.keywords import ALL_WORDS
from nihongo.lexer import _tokenize_cache_max, normalize, split_words, tokenize


class NormalizerTests(unittest.TestCase):
    def test_fullwidth_alphanumerics_fold_to_halfwidth(self) -> None:
        self.assertEqual(normalize("ＡｂＣ０１２"), "AbC012")

    def test_fullwidth_brackets_fold_to_ascii(self) -> None:
        self.assertEqual(normalize("（１）"), "(1)")

    def test_spacing_and_ideographic_comma_are_stripped(self) -> None:
        self.assertEqual(normalize("a　を、 1\tとする"), "aを1とする")

    def test_newlines_survive_normalization(self) -> None:
        self.assertEqual(normalize("a\nb"), "a\nb")


class SplitWordsTests(unittest.TestCase):
    def test_split_keeps_keyword_fragments(self) -> None:
        self.assertEqual(split_words("aをbをc", ["を"]), ["a", "を", "b", "を", "c"])

    def test_adjacent_keywords_do_not_produce_empty_fragments(self) -> None:
        self.assertEqual(split_words("をを", ["を"]), ["を", "を"])
        self.assertEqual(split_words("aを", ["を"]), ["a", "を"])
        self.assertEqual(split_words("", ["を"]), [])

    def test_words_are_applied_in_order(self) -> None:
        self.assertEqual(split_words("aを5とする", ["を", "とする"]), ["a", "を", "5", "とする"])

    def test_fragment_equal_to_keyword_is_kept(self) -> None:
        self.assertEqual(split_words("とする", ["とする"]), ["とする"])


class TokenizerTests(unittest.TestCase):
    def _tokens(self, text: str, line: int = 1) -> list[tuple[str, int]]:
        return [(tok.text, tok.line) for tok in tokenize(text, line).tokens]

    def test_token_golden_binding_and_line_numbers(self) -> None:
        self.assertEqual(
            self._tokens("aを5とする\nb"),
            [
                ("a", 1),
                ("を", 1),
                ("5", 1),
                ("とする", 1),
                ("\n", 1),
                ("b", 2),
            ],
        )

    def test_starting_line_is_honored(self) -> None:
        self.assertEqual(self._tokens("x\ny", 5), [("x", 5), ("\n", 5), ("y", 6)])

    def test_sentence_delimiter_does_not_advance_line(self) -> None:
        self.assertEqual(self._tokens("x。y"), [("x", 1), ("。", 1), ("y", 1)])

    def test_case_particles_are_not_split_points(self) -> None:
        self.assertEqual(self._tokens("aが3より大きい"), [("aが3より大きい", 1)])

    def test_enclosure_keywords_are_split(self) -> None:
        self.assertEqual(
            [text for text, _ in self._tokens("もし(a)ならば「b」違うなら空")],
            ["もし", "(", "a", ")", "ならば", "「", "b", "」", "違うなら", "空"],
        )

    def test_loop_markers_are_split(self) -> None:
        self.assertEqual(
            [text for text, _ in self._tokens("xを3回繰り返す")],
            ["x", "を", "3", "回", "繰り返す"],
        )

    def test_every_keyword_is_a_split_point(self) -> None:
        for word in ALL_WORDS:
            with self.subTest(word=word):
                self.assertIn(word, [text for text, _ in self._tokens(f"x{word}y")])

    def test_each_call_returns_independent_cursor(self) -> None:
        first = tokenize("aを1とする")
        first.read_line()
        second = tokenize("aを1とする")
        self.assertEqual(second.index, 0)
        self.assertIsNot(first.tokens, second.tokens)
        self.assertEqual(first.tokens, second.tokens)

    def test_empty_text_has_no_tokens(self) -> None:
        self.assertEqual(tokenize("").tokens, [])
        self.assertEqual(tokenize(" 　").tokens, [])


class TokenizeCacheSizeTests(unittest.TestCase):
    def test_integer_setting_is_used(self) -> None:
        with mock.patch.dict(os.environ, {"NIHONGO_TOKENIZE_CACHE_MAX": "32"}):
            self.assertEqual(_tokenize_cache_max(), 32)
        with mock.patch.dict(os.environ, {"NIHONGO_TOKENIZE_CACHE_MAX": "0"}):
            self.assertEqual(_tokenize_cache_max(), 1)

    def test_unset_uses_default(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(_tokenize_cache_max(), 256)

    def test_non_integer_setting_falls_back_with_warning(self) -> None:
        with mock.patch.dict(os.environ, {"NIHONGO_TOKENIZE_CACHE_MAX": "lots"}):
            with self.assertLogs("nihongo.lexer", level="WARNING") as logs:
                self.assertEqual(_tokenize_cache_max(), 256)
        self.assertIn("lots", logs.output[0])


if __name__ == "__main__":
    unittest.main()
