from __future__ import annotations

import unittest

from nihongo.code import Code
from nihongo.errors import NihongoSyntaxError
from nihongo.lexer import tokenize


class CodeCursorTests(unittest.TestCase):
    def _lines(self, text: str) -> list[str]:
        code = tokenize(text)
        lines: list[str] = []
        while True:
            line = code.read_line()
            if line is None:
                return lines
            lines.append(line.render())

    def test_read_line_includes_delimiter(self) -> None:
        self.assertEqual(self._lines("a\nb。c"), ["a\n", "b。", "c"])

    def test_read_line_on_exhausted_cursor_returns_none(self) -> None:
        code = tokenize("a")
        self.assertIsNotNone(code.read_line())
        self.assertIsNone(code.read_line())
        self.assertIsNone(Code().read_line())

    def test_quoted_string_hides_keywords(self) -> None:
        self.assertEqual(
            self._lines("「ここまでを処理」をコンソールに表示する\nx"),
            ["「ここまでを処理」をコンソールに表示する\n", "x"],
        )

    def test_quoted_string_keeps_delimiters_inside(self) -> None:
        self.assertEqual(self._lines("「a\nb」\nc"), ["「a\nb」\n", "c"])

    def test_quoted_string_does_not_nest(self) -> None:
        self.assertEqual(self._lines("「「a」\nb"), ["「「a」\n", "b"])

    def test_evaluate_block_spans_lines(self) -> None:
        self.assertEqual(
            self._lines("ここから\naを2とする\nここまでを処理\na"),
            ["ここから\naを2とする\nここまでを処理\n", "a"],
        )

    def test_evaluate_block_honors_nested_enclosures(self) -> None:
        self.assertEqual(self._lines("ここから(a)ここまで\nb"), ["ここから(a)ここまで\n", "b"])
        self.assertEqual(self._lines("(「)」)\nb"), ["(「)」)\n", "b"])

    def test_if_block_ends_at_its_statement_delimiter(self) -> None:
        self.assertEqual(self._lines("もしaならばb\nc"), ["もしaならばb\n", "c"])

    def test_if_block_line_continues_into_else_clause(self) -> None:
        self.assertEqual(self._lines("もしaならばb\n違うならc\nd"), ["もしaならばb\n違うならc\n", "d"])

    def test_if_block_condition_may_span_lines(self) -> None:
        self.assertEqual(self._lines("もし(a\nb)ならばc\nd"), ["もし(a\nb)ならばc\n", "d"])

    def test_unterminated_string_reports_start_line(self) -> None:
        code = tokenize("x\n「abc\ndef")
        code.read_line()
        with self.assertRaises(NihongoSyntaxError) as cm:
            code.read_line()
        self.assertEqual(cm.exception.first_line, 2)
        self.assertIn("」", cm.exception.message)

    def test_unterminated_evaluate_reports_start_line(self) -> None:
        code = tokenize("\n\nここから\na")
        self.assertEqual(code.read_line().render(), "\n")
        self.assertEqual(code.read_line().render(), "\n")
        with self.assertRaises(NihongoSyntaxError) as cm:
            code.read_line()
        self.assertEqual(cm.exception.first_line, 3)
        self.assertIn("ここまで", cm.exception.message)

    def test_unterminated_evaluate_line_number(self) -> None:
        code = tokenize("a\nここから\nb")
        code.read_line()
        with self.assertRaises(NihongoSyntaxError) as cm:
            code.read_line()
        self.assertEqual(cm.exception.first_line, 2)
        self.assertEqual(str(cm.exception).split(" : ")[-1], "2行目くらい")

    def test_if_without_then_is_syntax_error(self) -> None:
        with self.assertRaises(NihongoSyntaxError):
            tokenize("もしa").read_line()

    def test_trim_drops_surrounding_delimiters(self) -> None:
        code = tokenize("\n。a\nb\n\n")
        code.trim()
        self.assertEqual(code.render(), "a\nb")

    def test_trim_of_only_delimiters_is_empty(self) -> None:
        code = tokenize("\n\n")
        self.assertTrue(code.is_empty)
        code.trim()
        self.assertEqual(code.tokens, [])
        self.assertTrue(code.is_empty)

    def test_duplicate_is_independent(self) -> None:
        code = tokenize("a\nb")
        code.save_position()
        dup = code.duplicate()
        code.read_line()
        self.assertEqual(dup.index, 0)
        self.assertEqual(dup.index_stack, [0])
        dup.tokens.pop()
        self.assertEqual(len(code.tokens), 3)

    def test_peeks_do_not_move_cursor(self) -> None:
        code = tokenize("aを3回繰り返す\nb")
        self.assertEqual(code.peek_token().text, "a")
        self.assertEqual(code.peek_last_token().text, "b")
        self.assertEqual(code.peek_line().render(), "aを3回繰り返す\n")
        self.assertEqual(code.index, 0)
        self.assertEqual(code.index_stack, [])

    def test_save_and_restore_position(self) -> None:
        code = tokenize("aをb")
        code.save_position()
        code.read_token()
        code.read_token()
        code.restore_position()
        self.assertEqual(code.index, 0)
        with self.assertRaises(AssertionError):
            code.restore_position()

    def test_read_rest(self) -> None:
        code = tokenize("aをb")
        code.read_token()
        self.assertEqual(code.read_rest().render(), "をb")
        self.assertTrue(code.is_end)

    def test_line_range_and_position_message(self) -> None:
        code = tokenize("a\nb\nc")
        self.assertEqual((code.head_line, code.tail_line), (1, 3))
        self.assertEqual(code.position_message(), "1〜3行目くらい")
        self.assertEqual(tokenize("a").position_message(), "1行目くらい")


if __name__ == "__main__":
    unittest.main()
