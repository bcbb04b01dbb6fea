"""Structured error types for user-facing interpreter failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

if TYPE_CHECKING:
    from .code import Code


def position_message(first_line: int | None, last_line: int | None = None) -> str:
    if first_line is None:
        return "位置不明"
    if last_line is None or last_line == first_line:
        return f"{first_line}行目くらい"
    return f"{first_line}〜{last_line}行目くらい"


class NihongoError(Exception):
    """Base class for errors raised while running a script."""

    kind: ClassVar[str] = "エラー"

    def __init__(self, message: str, first_line: int | None = None, last_line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.first_line = first_line
        self.last_line = first_line if last_line is None else last_line

    @classmethod
    def from_code(cls, message: str, code: Code | None) -> Self:
        """Build an error positioned at the first and last line of ``code``."""
        if code is None:
            return cls(message)
        return cls(message, code.head_line, code.tail_line)

    @property
    def position(self) -> str:
        return position_message(self.first_line, self.last_line)

    def __str__(self) -> str:
        return f"{self.kind} : {self.message} : {self.position}"


class NihongoSyntaxError(NihongoError):
    """No production matched, a committed production failed, or an enclosure was left open."""

    kind: ClassVar[str] = "構文エラー"


class NihongoArgumentError(NihongoError):
    """A value violated a built-in's precondition after a successful match."""

    kind: ClassVar[str] = "引数エラー"
