"""Type Coercion Rules

Opportunistic conversion toward a declared type, used only by coercing
runs after the strict type check has failed. Each declared type name maps
to the rules that can produce it; rules are tried in order and the first
success wins.

Features:
- Type-safe coercion with Result types
- One rule class per source/target pair
- Numeric strings follow the usual literal grammar (sign, fraction, exponent)
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

from shapecheck.errors import Err, Ok, Result
from .equality import is_integral, is_number, json_kind

T = TypeVar("T")

NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
INTEGER_LITERAL = re.compile(r"^\s*[+-]?\d+\s*$")


def is_numeric_string(value: Any) -> bool:
    return isinstance(value, str) and NUMERIC_STRING.match(value) is not None


def _parse_number(text: str) -> Result[int | float, str]:
    """Parse a numeric string, keeping integer literals exact."""
    if INTEGER_LITERAL.match(text):
        try:
            return Ok(int(text))
        except ValueError as e:
            # Longer than the interpreter's int conversion limit
            return Err(str(e))
    number = float(text)
    if not math.isfinite(number):
        return Err(f"'{text.strip()}' is out of range")
    return Ok(number)


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[T]):
    """Base class for coercion rules.

    Each rule defines:
    - Whether a value is a candidate for this conversion
    - The actual conversion logic
    """

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value is a candidate for this rule."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, str]:
        """Coerce value. Returns Result."""


# ============================================================================
# Numbers
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericStringToNumber(CoercionRule[int | float]):
    """``"42"`` -> 42, ``"2.5"`` -> 2.5, ``"1e3"`` -> 1000.0"""

    def can_coerce(self, value: Any) -> bool:
        return is_numeric_string(value)

    def coerce(self, value: Any) -> Result[int | float, str]:
        return _parse_number(value)


@dataclass(frozen=True, slots=True)
class NumericStringToInteger(CoercionRule[int]):
    """Numeric strings with an integral value: ``"42"``, ``"4.0"``, ``"1e3"``."""

    def can_coerce(self, value: Any) -> bool:
        return is_numeric_string(value)

    def coerce(self, value: Any) -> Result[int, str]:
        parsed = _parse_number(value)
        if parsed.is_err():
            return parsed
        if not is_integral(number := parsed.unwrap()):
            return Err(f"'{value.strip()}' is not an integer")
        return Ok(int(number))


@dataclass(frozen=True, slots=True)
class BoolToNumber(CoercionRule[int]):
    """``True`` -> 1, ``False`` -> 0"""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, bool)

    def coerce(self, value: Any) -> Result[int, str]:
        return Ok(1 if value else 0)


# ============================================================================
# Strings
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumberToString(CoercionRule[str]):
    """Decimal text; integral floats drop the trailing ``.0``."""

    def can_coerce(self, value: Any) -> bool:
        return is_number(value)

    def coerce(self, value: Any) -> Result[str, str]:
        if isinstance(value, float) and is_integral(value):
            return Ok(str(int(value)))
        try:
            return Ok(str(value))
        except ValueError as e:
            return Err(str(e))


@dataclass(frozen=True, slots=True)
class BoolToString(CoercionRule[str]):

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, bool)

    def coerce(self, value: Any) -> Result[str, str]:
        return Ok("true" if value else "false")


@dataclass(frozen=True, slots=True)
class NullToString(CoercionRule[str]):

    def can_coerce(self, value: Any) -> bool:
        return value is None

    def coerce(self, value: Any) -> Result[str, str]:
        return Ok("")


# ============================================================================
# Booleans
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericToBool(CoercionRule[bool]):
    """Numbers and numeric strings: anything but zero is true."""

    def can_coerce(self, value: Any) -> bool:
        return is_number(value) or is_numeric_string(value)

    def coerce(self, value: Any) -> Result[bool, str]:
        number = float(value) if isinstance(value, str) else value
        return Ok(number != 0)


@dataclass(frozen=True, slots=True)
class WordToBool(CoercionRule[bool]):
    """``"yes"``/``"true"`` and ``"no"``/``"false"``."""
    true_values: frozenset[str] = frozenset({"yes", "true"})
    false_values: frozenset[str] = frozenset({"no", "false"})

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and (value in self.true_values or value in self.false_values)

    def coerce(self, value: Any) -> Result[bool, str]:
        if value in self.true_values:
            return Ok(True)
        if value in self.false_values:
            return Ok(False)
        return Err(f"Cannot coerce '{value}' to boolean")


@dataclass(frozen=True, slots=True)
class BlankToFalse(CoercionRule[bool]):
    """``None`` and ``""`` read as false."""

    def can_coerce(self, value: Any) -> bool:
        return value is None or value == ""

    def coerce(self, value: Any) -> Result[bool, str]:
        return Ok(False)


# ============================================================================
# Containers
# ============================================================================

@dataclass(frozen=True, slots=True)
class EmptyStringToObject(CoercionRule[dict]):

    def can_coerce(self, value: Any) -> bool:
        return value == ""

    def coerce(self, value: Any) -> Result[dict, str]:
        return Ok({})


@dataclass(frozen=True, slots=True)
class EmptyStringToArray(CoercionRule[list]):

    def can_coerce(self, value: Any) -> bool:
        return value == ""

    def coerce(self, value: Any) -> Result[list, str]:
        return Ok([])


RULES_BY_TYPE: dict[str, tuple[CoercionRule, ...]] = {
    "number": (NumericStringToNumber(), BoolToNumber()),
    "integer": (NumericStringToInteger(), BoolToNumber()),
    "string": (NumberToString(), BoolToString(), NullToString()),
    "boolean": (NumericToBool(), WordToBool(), BlankToFalse()),
    "object": (EmptyStringToObject(),),
    "array": (EmptyStringToArray(),),
    "null": (),
}


def coerce_to_types(value: Any, types: Sequence[str]) -> Result[Any, str]:
    """Try each declared type in order; the first successful rule wins.

    Usage:
        coerce_to_types("42", ("integer",))   # Ok(42)
        coerce_to_types("abc", ("integer",))  # Err(...)
    """
    for type_name in types:
        for rule in RULES_BY_TYPE.get(type_name, ()):
            if rule.can_coerce(value) and (result := rule.coerce(value)).is_ok():
                return result
    return Err(f"Cannot coerce {json_kind(value)} to {' or '.join(types)}")
