"""Keyword word-classes of the にほんご surface syntax."""

from __future__ import annotations

from typing import Final

DELIMITER: Final[tuple[str, ...]] = ("\n", "。")
STRING_START: Final[tuple[str, ...]] = ("「",)
STRING_END: Final[tuple[str, ...]] = ("」",)
EVALUATE_START: Final[tuple[str, ...]] = ("ここから", "(")
EVALUATE_END: Final[tuple[str, ...]] = ("ここまで", ")")
IF: Final[tuple[str, ...]] = ("もし",)
THEN: Final[tuple[str, ...]] = ("ならば",)
ELSE: Final[tuple[str, ...]] = ("違うなら",)
LOOP_TARGET: Final[tuple[str, ...]] = ("を",)
LOOP_COUNT: Final[tuple[str, ...]] = ("回",)
LOOP: Final[tuple[str, ...]] = ("繰り返す",)
# Same surface word as LOOP_TARGET; productions tell them apart by position.
VAR_NAME: Final[tuple[str, ...]] = ("を",)
VAR_VALUE: Final[tuple[str, ...]] = ("とする",)

# Insertion order is the tokenizer's split order.
DEFINE_WORDS: Final[dict[str, tuple[str, ...]]] = {
    "delimiter": DELIMITER,
    "string_start": STRING_START,
    "string_end": STRING_END,
    "evaluate_start": EVALUATE_START,
    "evaluate_end": EVALUATE_END,
    "if": IF,
    "then": THEN,
    "else": ELSE,
    "loop_target": LOOP_TARGET,
    "loop_count": LOOP_COUNT,
    "loop": LOOP,
    "var_name": VAR_NAME,
    "var_value": VAR_VALUE,
}

ALL_WORDS: Final[tuple[str, ...]] = tuple(word for words in DEFINE_WORDS.values() for word in words)

# Only these classes open an enclosure; every other keyword is a plain split point.
ENCLOSE_START_WORDS: Final[tuple[tuple[str, ...], ...]] = (STRING_START, EVALUATE_START, IF)

TRUE_LITERAL: Final[str] = "真"
FALSE_LITERAL: Final[str] = "偽"
EMPTY_LITERAL: Final[str] = "空"

NEWLINE: Final[str] = "\n"


def is_delimiter(text: str) -> bool:
    return text in DELIMITER


def is_enclose_start(text: str) -> bool:
    return any(text in words for words in ENCLOSE_START_WORDS)
