"""Normalization and tokenization of にほんご script text."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Final, Iterable

from .code import Code
from .keywords import ALL_WORDS, NEWLINE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    text: str
    line: int


_DEFAULT_TOKENIZE_CACHE_MAX: Final[int] = 256


def _tokenize_cache_max() -> int:
    """Read ``NIHONGO_TOKENIZE_CACHE_MAX``; unparsable values fall back to the default."""
    raw = os.environ.get("NIHONGO_TOKENIZE_CACHE_MAX")
    if raw is None:
        return _DEFAULT_TOKENIZE_CACHE_MAX
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning(
            "ignoring NIHONGO_TOKENIZE_CACHE_MAX=%r (not an integer); using %d",
            raw,
            _DEFAULT_TOKENIZE_CACHE_MAX,
        )
        return _DEFAULT_TOKENIZE_CACHE_MAX


_TOKENIZE_CACHE_MAX: Final[int] = _tokenize_cache_max()

_FULLWIDTH_ALNUM_RE = re.compile(r"[Ａ-Ｚａ-ｚ０-９]")
_FULLWIDTH_OFFSET: Final[int] = 0xFEE0
_BRACKET_FOLDS: Final[dict[str, str]] = {
    "（": "(",
    "）": ")",
}
_STRIP_RE = re.compile(r"[　、\t ]")


def normalize(text: str) -> str:
    """Fold full-width alphanumerics and brackets, then drop spacing characters."""
    text = _FULLWIDTH_ALNUM_RE.sub(lambda m: chr(ord(m.group(0)) - _FULLWIDTH_OFFSET), text)
    for wide, narrow in _BRACKET_FOLDS.items():
        text = text.replace(wide, narrow)
    return _STRIP_RE.sub("", text)


def _split_word(text: str, word: str) -> list[str]:
    pieces: list[str] = []
    for i, piece in enumerate(text.split(word)):
        if i:
            pieces.append(word)
        if piece:
            pieces.append(piece)
    return pieces


def split_words(text: str, words: Iterable[str]) -> list[str]:
    """Split ``text`` on each word in turn, keeping the words as fragments.

    Every fragment produced so far is re-split on the next word, so the
    order of ``words`` decides which keyword wins when two overlap.
    """
    fragments = [text] if text else []
    for word in words:
        fragments = [piece for fragment in fragments for piece in _split_word(fragment, word)]
    return fragments


@lru_cache(maxsize=_TOKENIZE_CACHE_MAX)
def _tokenize_cached(text: str, line: int) -> tuple[Token, ...]:
    tokens: list[Token] = []
    for word in split_words(normalize(text), ALL_WORDS):
        tokens.append(Token(word, line))
        if word == NEWLINE:
            line += 1
    return tuple(tokens)


def tokenize(text: str, line: int = 1) -> Code:
    return Code(_tokenize_cached(text, line))
