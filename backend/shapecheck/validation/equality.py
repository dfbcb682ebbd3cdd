"""Runtime kinds and structural equality for data trees."""
from __future__ import annotations

import math
from typing import Any


def json_kind(value: Any) -> str:
    """Return the tree kind of a value.

    One of ``null``, ``boolean``, ``number``, ``string``, ``array``,
    ``object``; any other Python type reports its class name.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integral(value: Any) -> bool:
    """True for ints and finite floats without a fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()


def describe_kind(value: Any) -> str:
    """Kind name used in type-mismatch messages; integral floats read as ``integer``."""
    if is_integral(value):
        return "integer"
    return json_kind(value)


def structurally_equal(a: Any, b: Any) -> bool:
    """Deep, kind-strict equality.

    Booleans never equal numbers, ints and floats compare numerically,
    objects need identical key sets and arrays identical lengths.
    """
    kind = json_kind(a)
    if kind != json_kind(b):
        return False
    if kind == "object":
        if a.keys() != b.keys():
            return False
        return all(structurally_equal(value, b[key]) for key, value in a.items())
    if kind == "array":
        if len(a) != len(b):
            return False
        return all(structurally_equal(x, y) for x, y in zip(a, b))
    return a == b


def matches_type(value: Any, type_name: str) -> bool:
    """Strict membership test for one ``type`` keyword name."""
    if type_name == "integer":
        return is_integral(value)
    if type_name == "number":
        return is_number(value)
    return json_kind(value) == type_name
