"""Fused parser/evaluator for にほんご statements.

Each production recognizes its form on a live ``Code`` cursor and evaluates
it immediately; no syntax tree is kept. Productions return ``NO_MATCH`` to
let the next one try, except the committed ones (conditional and loop),
which raise once their marker keyword has been seen.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Final, Iterable

from . import keywords as kw
from .code import CAPTURE, NO_MATCH, Code
from .context import Context
from .errors import NihongoArgumentError, NihongoSyntaxError
from .functions import BuiltinFunction
from .lexer import split_words, tokenize
from .values import as_python_value, is_number, is_truthy

logger = logging.getLogger(__name__)


def _alternation(words: Iterable[str]) -> str:
    return "|".join(re.escape(word) for word in words)


_STRING_RE = re.compile(f"(?:{_alternation(kw.STRING_START)})(.*)(?:{_alternation(kw.STRING_END)})", re.DOTALL)
_QUOTED_RE = re.compile(f"((?:{_alternation(kw.STRING_START)}).*?(?:{_alternation(kw.STRING_END)}))", re.DOTALL)
_NUMBER_RE = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")

_IF_THEN_ELSE_PATTERNS: Final = (
    (kw.IF, CAPTURE, kw.THEN, CAPTURE, kw.ELSE, CAPTURE, kw.DELIMITER),
    (kw.IF, CAPTURE, kw.THEN, CAPTURE, kw.ELSE, CAPTURE),
)
_IF_THEN_PATTERNS: Final = (
    (kw.IF, CAPTURE, kw.THEN, CAPTURE, kw.DELIMITER),
    (kw.IF, CAPTURE, kw.THEN, CAPTURE),
)
_LOOP_TARGET_FIRST: Final = (CAPTURE, kw.LOOP_TARGET, CAPTURE, kw.LOOP_COUNT, kw.LOOP)
_LOOP_COUNT_FIRST: Final = (CAPTURE, kw.LOOP_COUNT, CAPTURE, kw.LOOP_TARGET, kw.LOOP)
_DEFINE_VARIABLE: Final = (CAPTURE, kw.VAR_NAME, CAPTURE, kw.VAR_VALUE)
_EVALUATE: Final = (kw.EVALUATE_START, CAPTURE, kw.EVALUATE_END)


def _syntax_error(code: Code, context: Context, message: str | None = None) -> NihongoSyntaxError:
    if not code.tokens and context.parsing is not None:
        code = context.parsing
    text = code.render(" ")
    detail = text if message is None else f"{message} : {text}"
    return NihongoSyntaxError.from_code(detail, code)


def _parse_if(code: Code, context: Context) -> object:
    head = code.peek_token()
    if head is None or head.text not in kw.IF:
        return NO_MATCH

    def if_then_else(condition: Code, then: Code, otherwise: Code) -> object:
        if is_truthy(evaluate(condition, context)):
            return evaluate(then, context)
        return evaluate(otherwise, context)

    def if_then(condition: Code, then: Code) -> object:
        if is_truthy(evaluate(condition, context)):
            return evaluate(then, context)
        return None

    for pattern in _IF_THEN_ELSE_PATTERNS:
        result = code.match(pattern, if_then_else)
        if result is not NO_MATCH:
            return result
    for pattern in _IF_THEN_PATTERNS:
        result = code.match(pattern, if_then)
        if result is not NO_MATCH:
            return result
    raise _syntax_error(code, context)


def _loop_iterations(count_code: Code, context: Context) -> int:
    count = as_python_value(evaluate(count_code, context))
    if not is_number(count):
        raise NihongoArgumentError.from_code("回数が数値ではありません。", context.parsing)
    if not math.isfinite(count):
        raise NihongoArgumentError.from_code("回数が有限の数値ではありません。", context.parsing)
    # Runs once per integer i with 0 <= i < count.
    return max(0, math.ceil(count))


def _parse_loop(code: Code, context: Context) -> object:
    tail = code.peek_last_token()
    if tail is None or tail.text not in kw.LOOP:
        return NO_MATCH

    def repeat(target: Code, count_code: Code) -> None:
        iterations = _loop_iterations(count_code, context)
        logger.debug("loop %d times: %s", iterations, target.render(" "))
        for _ in range(iterations):
            # Evaluation consumes a cursor, so every pass gets a fresh copy.
            evaluate(target.duplicate(), context)
        return None

    result = code.match(_LOOP_TARGET_FIRST, repeat)
    if result is not NO_MATCH:
        return result
    result = code.match(_LOOP_COUNT_FIRST, lambda count_code, target: repeat(target, count_code))
    if result is not NO_MATCH:
        return result
    raise _syntax_error(code, context)


def _parse_define_variable(code: Code, context: Context) -> object:
    def bind(name_code: Code, value_code: Code) -> None:
        name = name_code.render()
        if not name:
            raise _syntax_error(code, context, "変数名が指定されていません。")
        # Plain assignment into the one shared scope; there is no shadowing.
        context.scope[name] = evaluate(value_code, context)
        return None

    return code.match(_DEFINE_VARIABLE, bind)


def _parse_evaluate(code: Code, context: Context) -> object:
    head = code.peek_token()
    if head is None or head.text not in kw.EVALUATE_START:
        return NO_MATCH
    return code.match(_EVALUATE, lambda body: run_code(body, context))


def _mask_quoted(sentence: str) -> str:
    # Same length as ``sentence`` so indices still point into the original text.
    return _QUOTED_RE.sub(lambda m: "\0" * len(m.group(0)), sentence)


def find_function(sentence: str, functions: Iterable[BuiltinFunction]) -> BuiltinFunction | None:
    """Pick the built-in whose name occurs furthest right in ``sentence``.

    A candidate only counts when every one of its case particles appears
    before the first occurrence of its name. Text inside 「…」 literals is
    never searched.
    """
    sentence = _mask_quoted(sentence)
    found: BuiltinFunction | None = None
    found_index = -1
    for function in functions:
        index = sentence.find(function.name)
        if index == -1:
            continue
        preceding = sentence[:index]
        if not all(particle in preceding for particle in function.case_particles):
            continue
        if index > found_index:
            found = function
            found_index = index
    return found


def _split_arguments(region: str, particles: tuple[str, ...]) -> list[str]:
    pieces: list[str] = []
    for i, part in enumerate(_QUOTED_RE.split(region)):
        if i % 2:
            # Quoted literal: a particle inside it is not an argument boundary.
            pieces.append(part)
        elif part:
            pieces.extend(split_words(part, particles))
    return pieces


def apply_function(function: BuiltinFunction, code: Code, context: Context) -> object:
    sentence = code.render()
    region = sentence[: _mask_quoted(sentence).find(function.name)]
    line = code.head_line if code.head_line is not None else 1

    args: dict[str, object] = {}
    noun: list[str] = []
    for piece in _split_arguments(region, function.case_particles):
        if piece not in function.case_particles:
            noun.append(piece)
            continue
        if not noun:
            raise _syntax_error(code, context, "引数が指定されていません。")
        args[piece] = evaluate(tokenize("".join(noun), line), context)
        noun = []

    logger.debug("call %s with %s", function.name, sorted(args))
    return function.procedure(args, context)


def _parse_call_function(code: Code, context: Context) -> object:
    function = find_function(code.render(), context.functions)
    if function is None:
        return NO_MATCH
    return apply_function(function, code, context)


def _parse_call_variable(code: Code, context: Context) -> object:
    name = code.render()
    if name in context.scope:
        return context.scope[name]
    return NO_MATCH


def _parse_literal(code: Code, context: Context) -> object:
    text = code.render()

    m = _STRING_RE.fullmatch(text)
    if m:
        return m.group(1)

    if _NUMBER_RE.fullmatch(text):
        if "." in text:
            return float(text)
        return int(text)

    if text == kw.TRUE_LITERAL:
        return True
    if text == kw.FALSE_LITERAL:
        return False
    if text == kw.EMPTY_LITERAL:
        return None
    return NO_MATCH


_PRODUCTIONS: Final[tuple[Callable[[Code, Context], object], ...]] = (
    _parse_if,
    _parse_loop,
    _parse_define_variable,
    _parse_evaluate,
    _parse_call_function,
    _parse_call_variable,
    _parse_literal,
)


def evaluate(code: Code, context: Context) -> object:
    """Evaluate one statement, trying each production in priority order."""
    code.trim()
    if code.is_empty:
        raise _syntax_error(code, context, "式がありません。")

    statement = code.duplicate()
    previous = context.parsing
    context.parsing = statement
    logger.debug("evaluate (%s): %s", statement.position_message(), statement.render(" "))
    try:
        for production in _PRODUCTIONS:
            result = production(code, context)
            if result is not NO_MATCH:
                return result
        raise _syntax_error(statement, context)
    finally:
        context.parsing = previous


def run_code(code: Code, context: Context) -> object:
    """Evaluate statements line by line and return the last value."""
    result = None
    while True:
        line = code.read_line()
        if line is None:
            break
        line.trim()
        if line.is_empty:
            continue
        result = evaluate(line, context)
    return result


def run(script: str, context: Context | None = None) -> object:
    """Tokenize and run a whole script, creating a default Context if needed."""
    if context is None:
        context = Context()
    return run_code(tokenize(script), context)
