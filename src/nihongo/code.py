"""Re-seekable token cursor with enclosure-aware scanning and pattern matching."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Final, Iterable, Sequence, TypeVar

from .errors import NihongoSyntaxError, position_message
from .keywords import DELIMITER, ELSE, EVALUATE_END, EVALUATE_START, IF, STRING_END, STRING_START, THEN, is_delimiter, is_enclose_start

if TYPE_CHECKING:
    from .lexer import Token

T = TypeVar("T")

# Pattern step: capture everything up to the next keyword class (or the rest).
CAPTURE: Final = object()
# Returned by ``Code.match`` and the grammar productions when nothing matched.
NO_MATCH: Final = object()


class Code:
    """A cursor over tokens.

    ``index`` is the read position and ``index_stack`` holds positions saved
    for speculative reads. Every ``save_position`` is paired with exactly one
    ``restore_position`` or cleared by ``commit``.
    """

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self.tokens: list[Token] = list(tokens)
        self.index = 0
        self.index_stack: list[int] = []

    def __repr__(self) -> str:
        return f"Code({self.render(' ')!r}, index={self.index})"

    @property
    def is_end(self) -> bool:
        return self.index >= len(self.tokens)

    @property
    def is_empty(self) -> bool:
        if self.is_end:
            return True
        return all(is_delimiter(tok.text) for tok in self.tokens)

    @property
    def head_line(self) -> int | None:
        return self.tokens[0].line if self.tokens else None

    @property
    def tail_line(self) -> int | None:
        return self.tokens[-1].line if self.tokens else None

    def duplicate(self) -> "Code":
        result = Code(self.tokens)
        result.index = self.index
        result.index_stack = list(self.index_stack)
        return result

    def trim(self) -> None:
        """Drop delimiter tokens from both ends."""
        count = 0
        while count < len(self.tokens) and is_delimiter(self.tokens[count].text):
            count += 1
        del self.tokens[:count]
        self.index = max(0, self.index - count)

        while self.tokens and is_delimiter(self.tokens[-1].text):
            self.tokens.pop()
        self.index = min(self.index, len(self.tokens))

    def render(self, separator: str = "") -> str:
        return separator.join(tok.text for tok in self.tokens)

    def position_message(self) -> str:
        return position_message(self.head_line, self.tail_line)

    def save_position(self) -> None:
        self.index_stack.append(self.index)

    def restore_position(self) -> None:
        if not self.index_stack:
            raise AssertionError("restore_position without a saved position")
        self.index = self.index_stack.pop()

    def commit(self) -> None:
        self.index_stack.clear()

    def read_token(self) -> Token | None:
        if self.is_end:
            return None
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def peek_token(self) -> Token | None:
        self.save_position()
        try:
            return self.read_token()
        finally:
            self.restore_position()

    def peek_last_token(self) -> Token | None:
        return self.tokens[-1] if self.tokens else None

    def read_line(self) -> "Code | None":
        """Read through the next delimiter, treating enclosures as single units."""
        if self.is_end:
            return None

        tokens: list[Token] = []
        while True:
            tok = self.read_token()
            if tok is None:
                break
            if is_delimiter(tok.text):
                tokens.append(tok)
                break
            if is_enclose_start(tok.text):
                enclosed = self._read_enclose(tok)
                tokens.extend(enclosed)
                # An if-block runs to the end of its statement and owns that
                # delimiter; the line only goes on when an else clause follows.
                if is_delimiter(enclosed[-1].text):
                    following = self.peek_token()
                    if following is None or following.text not in ELSE:
                        break
                continue
            tokens.append(tok)
        return Code(tokens)

    def peek_line(self) -> "Code | None":
        self.save_position()
        try:
            return self.read_line()
        finally:
            self.restore_position()

    def read_rest(self) -> "Code":
        tokens = self.tokens[self.index :]
        self.index = len(self.tokens)
        return Code(tokens)

    def match(self, pattern: Sequence[object], callback: Callable[..., T]) -> T | object:
        """Consume ``pattern`` or leave the cursor untouched.

        ``pattern`` alternates keyword classes and ``CAPTURE`` markers. A
        capture followed by a keyword class collects tokens (enclosures
        whole) up to that class and consumes the keyword; a trailing capture
        takes the rest of the cursor. On success ``callback`` receives one
        Code per capture and its result is returned, otherwise ``NO_MATCH``.
        """
        captures: list[Code] = []
        committed = False
        self.save_position()
        try:
            i = 0
            while i < len(pattern):
                step = pattern[i]
                i += 1
                if step is CAPTURE:
                    if i >= len(pattern):
                        captures.append(self.read_rest())
                        continue
                    terminator = pattern[i]
                    i += 1
                    if terminator is CAPTURE:
                        raise AssertionError("pattern has two consecutive captures")
                    tokens, hit = self._read_until_escape(lambda tok: tok.text in terminator, include_hit=False)
                    if not hit:
                        return NO_MATCH
                    captures.append(Code(tokens))
                    continue

                tok = self.read_token()
                if tok is None or tok.text not in step:
                    return NO_MATCH
            self.commit()
            committed = True
        finally:
            if not committed:
                self.restore_position()
        return callback(*captures)

    def _read_until_raw(self, predicate: Callable[[Token], bool]) -> tuple[list[Token], bool]:
        tokens: list[Token] = []
        while True:
            tok = self.read_token()
            if tok is None:
                return tokens, False
            tokens.append(tok)
            if predicate(tok):
                return tokens, True

    def _read_until_escape(self, predicate: Callable[[Token], bool], *, include_hit: bool = True) -> tuple[list[Token], bool]:
        tokens: list[Token] = []
        while True:
            tok = self.read_token()
            if tok is None:
                return tokens, False
            if is_enclose_start(tok.text):
                tokens.extend(self._read_enclose(tok))
                continue
            if predicate(tok):
                if include_hit:
                    tokens.append(tok)
                return tokens, True
            tokens.append(tok)

    def _read_enclose(self, start: Token) -> list[Token]:
        if start.text in STRING_START:
            return self._read_enclose_string(start)
        if start.text in EVALUATE_START:
            return self._read_enclose_evaluate(start)
        if start.text in IF:
            return self._read_enclose_if(start)
        raise AssertionError(f"{start.text!r} does not open an enclosure")

    def _read_enclose_string(self, start: Token) -> list[Token]:
        tokens, hit = self._read_until_raw(lambda tok: tok.text in STRING_END)
        if not hit:
            raise NihongoSyntaxError(f"{'・'.join(STRING_END)}が見つかりません。", start.line)
        return [start, *tokens]

    def _read_enclose_evaluate(self, start: Token) -> list[Token]:
        tokens, hit = self._read_until_escape(lambda tok: tok.text in EVALUATE_END)
        if not hit:
            raise NihongoSyntaxError(f"{'・'.join(EVALUATE_END)}が見つかりません。", start.line)
        return [start, *tokens]

    def _read_enclose_if(self, start: Token) -> list[Token]:
        condition, hit = self._read_until_escape(lambda tok: tok.text in THEN)
        if not hit:
            raise NihongoSyntaxError(f"{'・'.join(THEN)}が見つかりません。", start.line)
        body, _ = self._read_until_escape(lambda tok: tok.text in DELIMITER)
        return [start, *condition, *body]
