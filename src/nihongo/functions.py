"""Built-in function table."""

from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from .errors import NihongoArgumentError
from .values import compare_values, format_value

if TYPE_CHECKING:
    from .context import Context


@dataclass(frozen=True)
class BuiltinFunction:
    """A built-in resolved by its name appearing in a statement's text."""

    name: str
    case_particles: tuple[str, ...]
    procedure: Callable[[dict[str, object], "Context"], object]


def _argument_error(message: str, context: Context) -> NihongoArgumentError:
    return NihongoArgumentError.from_code(message, context.parsing)


def _display(args: dict[str, object], context: Context) -> None:
    value = args.get("を")
    output = args.get("に")
    if not callable(output):
        raise _argument_error(f"「{format_value(output)}」に表示することはできません。", context)
    output(value)


def _debug_display(args: dict[str, object], context: Context) -> None:
    context.diagnostic(args.get("を"))


def _comparison(compare: Callable[[object, object], bool]) -> Callable[[dict[str, object], Context], bool]:
    def procedure(args: dict[str, object], context: Context) -> bool:
        subject = args.get("が")
        bound = args.get("より")
        operands = compare_values(subject, bound)
        if operands is None:
            raise _argument_error(f"「{format_value(subject)}」と「{format_value(bound)}」は比較できません。", context)
        return bool(compare(*operands))

    return procedure


def default_functions() -> tuple[BuiltinFunction, ...]:
    return (
        BuiltinFunction(name="表示", case_particles=("を", "に"), procedure=_display),
        BuiltinFunction(name="デバッグ表示", case_particles=("を",), procedure=_debug_display),
        BuiltinFunction(name="小さい", case_particles=("が", "より"), procedure=_comparison(operator.lt)),
        BuiltinFunction(name="大きい", case_particles=("が", "より"), procedure=_comparison(operator.gt)),
    )
