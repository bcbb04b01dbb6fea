"""Execution context: the shared scope, the built-in table and host sinks."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Callable, Final, Iterable

from .functions import BuiltinFunction, default_functions
from .values import describe_value, format_value, validate_value

if TYPE_CHECKING:
    from .code import Code

CONSOLE_NAME: Final[str] = "コンソール"
ALERT_NAME: Final[str] = "アラート"


def console_sink(value: object) -> None:
    print(format_value(value), file=sys.stdout)


def alert_sink(value: object) -> None:
    print(f"[{ALERT_NAME}] {format_value(value)}", file=sys.stderr)


def diagnostic_sink(value: object) -> None:
    print(describe_value(value), file=sys.stderr)


class Context:
    """State threaded through every evaluation of one run.

    ``scope`` is a single mapping shared by reference with all nested
    evaluation: a binding made inside a loop body or sub-expression
    overwrites the enclosing binding of the same name.
    """

    def __init__(
        self,
        scope: Mapping[str, object] | None = None,
        functions: Iterable[BuiltinFunction] | None = None,
        *,
        output: Callable[[object], object] = console_sink,
        alert: Callable[[object], object] = alert_sink,
        diagnostic: Callable[[object], object] = diagnostic_sink,
    ) -> None:
        self.scope: dict[str, object] = {CONSOLE_NAME: output, ALERT_NAME: alert}
        for name, value in (scope or {}).items():
            validate_value(value, where=f"scope[{name!r}]")
            self.scope[name] = value
        self.functions: tuple[BuiltinFunction, ...] = tuple(default_functions() if functions is None else functions)
        self.diagnostic = diagnostic
        # Statement being evaluated; argument errors report its position.
        self.parsing: Code | None = None
