"""Runtime value model and validators for the にほんご evaluator."""

from __future__ import annotations

import math
import numbers
from enum import Enum

import jax.numpy as jnp

from .keywords import EMPTY_LITERAL, FALSE_LITERAL, STRING_END, STRING_START, TRUE_LITERAL


class ValueKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    EMPTY = "empty"
    CALLABLE = "callable"


_KIND_LABELS = {
    ValueKind.NUMBER: "数値",
    ValueKind.STRING: "文字列",
    ValueKind.BOOLEAN: "真偽値",
    ValueKind.EMPTY: "空",
    ValueKind.CALLABLE: "関数",
}


def _is_scalar_array(value: object) -> bool:
    return isinstance(value, jnp.ndarray) and value.ndim == 0


def as_python_value(value: object) -> object:
    """Unwrap 0-d JAX arrays handed in by a host into Python scalars."""
    if _is_scalar_array(value):
        return value.item()
    return value


def kind_of(value: object) -> ValueKind:
    value = as_python_value(value)
    if value is None:
        return ValueKind.EMPTY
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, numbers.Real):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if callable(value):
        return ValueKind.CALLABLE
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def is_number(value: object) -> bool:
    value = as_python_value(value)
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_truthy(value: object) -> bool:
    # Only 偽 and 空 are false; 0 and "" count as true.
    value = as_python_value(value)
    return not (value is False or value is None)


def validate_value(value: object, *, where: str = "value") -> None:
    try:
        kind_of(value)
    except TypeError as exc:
        raise TypeError(f"{where} has {exc}") from None


def format_value(value: object) -> str:
    """Render a value the way the console sink prints it."""
    value = as_python_value(value)
    if value is None:
        return EMPTY_LITERAL
    if value is True:
        return TRUE_LITERAL
    if value is False:
        return FALSE_LITERAL
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    if callable(value):
        name = getattr(value, "__name__", None) or type(value).__name__
        return f"<関数 {name}>"
    return str(value)


def describe_value(value: object) -> str:
    """Kind-tagged rendering for diagnostics, e.g. ``文字列: 「abc」``."""
    kind = kind_of(value)
    text = format_value(value)
    if kind is ValueKind.STRING:
        text = f"{STRING_START[0]}{text}{STRING_END[0]}"
    return f"{_KIND_LABELS[kind]}: {text}"


def compare_values(left: object, right: object) -> tuple[object, object] | None:
    """Return the operands as comparable Python values, or None if they cannot be ordered."""
    left = as_python_value(left)
    right = as_python_value(right)
    if is_number(left) and is_number(right):
        return left, right
    if isinstance(left, str) and isinstance(right, str):
        return left, right
    return None
