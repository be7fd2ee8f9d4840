"""Interpreter values and the coercion rules between them."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Number:
    value: float


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class Boolean:
    value: bool


Value = Number | Text | Boolean

ZERO = Number(0.0)

# Longest text that repetition or concatenation may produce
MAX_TEXT_LENGTH = 1_000_000


class ValueTypeError(Exception):
    """An operator was applied to operands it does not accept."""


class ValueDomainError(ValueError):
    """Operands of the right type whose result cannot be represented."""


def _bounded(text: str) -> Text:
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueDomainError(f"text longer than {MAX_TEXT_LENGTH} characters")
    return Text(text)


def to_text(value: Value) -> str:
    match value:
        case Number(n):
            return repr(n)
        case Text(s):
            return s
        case Boolean(b):
            return "true" if b else "false"
    raise ValueTypeError(f"not a value: {value!r}")


def add(a: Value, b: Value) -> Value:
    """Numeric sum, or concatenation when either side is not a number."""
    match a, b:
        case Number(x), Number(y):
            return Number(x + y)
    return _bounded(to_text(a) + to_text(b))


def subtract(a: Value, b: Value) -> Number:
    match a, b:
        case Number(x), Number(y):
            return Number(x - y)
    raise ValueTypeError("expected numbers on both sides of '-'")


def multiply(a: Value, b: Value) -> Value:
    """Numeric product, or repetition of a text by a number.

    The repetition count is truncated toward zero and must be finite; a
    result longer than ``MAX_TEXT_LENGTH`` raises ValueDomainError.
    """
    match a, b:
        case Number(x), Number(y):
            return Number(x * y)
        case Text(s), Number(n):
            if not math.isfinite(n):
                raise ValueDomainError("repetition count is not a finite number")
            count = max(0, int(n))
            if not s:
                return Text("")
            if count > MAX_TEXT_LENGTH // len(s):
                raise ValueDomainError(f"text longer than {MAX_TEXT_LENGTH} characters")
            return Text(s * count)
    raise ValueTypeError("invalid MULT on non-numbers")


def divide(a: Value, b: Value) -> Number:
    match a, b:
        case Number(_), Number(0.0):
            raise ZeroDivisionError("division by zero")
        case Number(x), Number(y):
            return Number(x / y)
    raise ValueTypeError("invalid DIVIDE on non-numbers")


def modulo(a: Value, b: Value) -> Number:
    """Floating remainder with the sign of the dividend."""
    match a, b:
        case Number(_), Number(0.0):
            raise ZeroDivisionError("modulo by zero")
        case Number(x), Number(y):
            try:
                return Number(math.fmod(x, y))
            except ValueError:
                raise ValueDomainError("modulo of an infinite number") from None
    raise ValueTypeError("invalid MODULO on non-numbers")


def power(a: Value, b: Value) -> Number:
    match a, b:
        case Number(x), Number(y):
            return Number(math.pow(x, y))
    raise ValueTypeError("expected exponentiation of numbers")


def negate(a: Value) -> Number:
    match a:
        case Number(x):
            return Number(-x)
    raise ValueTypeError("expected negation of a number")


def square_root(a: Value) -> Number:
    """Square root; negative operands clamp to 0.0."""
    match a:
        case Number(x) if x < 0:
            return ZERO
        case Number(x):
            return Number(math.sqrt(x))
    raise ValueTypeError("expected a number for SQRT")


_COMPARATORS = {
    "==": lambda x, y: x == y,
    "!=": lambda x, y: x != y,
    "<": lambda x, y: x < y,
    "<=": lambda x, y: x <= y,
    ">": lambda x, y: x > y,
    ">=": lambda x, y: x >= y,
}


def compare(op: str, a: Value, b: Value) -> Boolean:
    """Compare as text when either operand is text, numerically otherwise."""
    test = _COMPARATORS[op]
    match a, b:
        case Number(x), Number(y):
            return Boolean(test(x, y))
        case (Text(_), _) | (_, Text(_)):
            return Boolean(test(to_text(a), to_text(b)))
        case Boolean(x), Boolean(y):
            return Boolean(test(x, y))
    raise ValueTypeError("cannot compare a boolean with a number")
