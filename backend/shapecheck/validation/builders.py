"""Finding Builders

Ergonomic constructors for every finding code. Paths are relative to the
dispatch that emits them; the dispatcher re-roots them on the way up.
"""
from __future__ import annotations

from typing import Any, Sequence

from shapecheck.errors import Err, ErrorCode
from .equality import is_integral
from .errors import Finding, SchemaFault
from .pointer import pointer_join


def number_text(value: Any) -> str:
    """Render a keyword number the way schema authors write it (``5``, not ``5.0``)."""
    if isinstance(value, float) and is_integral(value):
        return str(int(value))
    return str(value)


def schema_fault(schema_path: str, message: str) -> Err[SchemaFault]:
    """Create a fault for a malformed keyword."""
    return Err(SchemaFault(schema_path=schema_path, message=message))


# =============================================================================
# Type / Enum
# =============================================================================

def invalid_type(actual_kind: str) -> Finding:
    return Finding(ErrorCode.INVALID_TYPE, "", "/type", f"Invalid type: {actual_kind}")


def enum_mismatch() -> Finding:
    return Finding(ErrorCode.ENUM_MISMATCH, "", "/enum", "Value must be one of the enum options")


# =============================================================================
# Composite
# =============================================================================

def any_of_missing(groups: Sequence[tuple[Finding, ...]]) -> Finding:
    return Finding(
        ErrorCode.ANY_OF_MISSING,
        "",
        "/anyOf",
        "Value must satisfy at least one of the options",
        sub_findings=tuple(groups),
    )


def one_of_missing(groups: Sequence[tuple[Finding, ...]]) -> Finding:
    return Finding(
        ErrorCode.ONE_OF_MISSING,
        "",
        "/oneOf",
        "Value must satisfy one of the options",
        sub_findings=tuple(groups),
    )


def one_of_multiple(first: int, second: int) -> Finding:
    return Finding(
        ErrorCode.ONE_OF_MULTIPLE,
        "",
        "/oneOf",
        f"Value satisfies more than one of the options ({first} and {second})",
    )


def not_passed() -> Finding:
    return Finding(ErrorCode.NOT_PASSED, "", "/not", "Value satisfies prohibited schema")


# =============================================================================
# Number
# =============================================================================

def not_multiple_of(divisor: Any) -> Finding:
    return Finding(ErrorCode.NUMBER_MULTIPLE_OF, "", "/multipleOf", f"Number must be a multiple of {number_text(divisor)}")


def below_minimum(minimum: Any, *, exclusive: bool) -> Finding:
    if exclusive:
        return Finding(ErrorCode.NUMBER_MINIMUM_EXCLUSIVE, "", "/minimum", f"Number must be > {number_text(minimum)}")
    return Finding(ErrorCode.NUMBER_MINIMUM, "", "/minimum", f"Number must be >= {number_text(minimum)}")


def above_maximum(maximum: Any, *, exclusive: bool) -> Finding:
    if exclusive:
        return Finding(ErrorCode.NUMBER_MAXIMUM_EXCLUSIVE, "", "/maximum", f"Number must be < {number_text(maximum)}")
    return Finding(ErrorCode.NUMBER_MAXIMUM, "", "/maximum", f"Number must be <= {number_text(maximum)}")


# =============================================================================
# String
# =============================================================================

def string_too_short(min_length: int) -> Finding:
    return Finding(
        ErrorCode.STRING_LENGTH_SHORT, "", "/minLength",
        f"String must be at least {number_text(min_length)} characters long",
    )


def string_too_long(max_length: int) -> Finding:
    return Finding(
        ErrorCode.STRING_LENGTH_LONG, "", "/maxLength",
        f"String must be at most {number_text(max_length)} characters long",
    )


def pattern_mismatch(pattern: str) -> Finding:
    return Finding(ErrorCode.STRING_PATTERN, "", "/pattern", f"String does not match pattern: {pattern}")


# =============================================================================
# Object
# =============================================================================

def too_few_properties(minimum: int) -> Finding:
    message = ("Object cannot be empty" if minimum == 1
               else f"Object must have at least {number_text(minimum)} defined properties")
    return Finding(ErrorCode.OBJECT_PROPERTIES_MINIMUM, "", "/minProperties", message)


def too_many_properties(maximum: int) -> Finding:
    message = ("Object must have at most one defined property" if maximum == 1
               else f"Object must have at most {number_text(maximum)} defined properties")
    return Finding(ErrorCode.OBJECT_PROPERTIES_MAXIMUM, "", "/maxProperties", message)


def required_missing(index: int, key: str) -> Finding:
    return Finding(
        ErrorCode.OBJECT_REQUIRED, "", pointer_join(["required", index]),
        f"Missing required property: {key}",
    )


def additional_property(key: str) -> Finding:
    return Finding(
        ErrorCode.OBJECT_ADDITIONAL_PROPERTIES, pointer_join([key]), "/additionalProperties",
        "Additional properties not allowed",
    )


def dependency_missing(key: str, dependency: str, index: int | None = None) -> Finding:
    parts: list[str | int] = ["dependencies", key]
    if index is not None:
        parts.append(index)
    return Finding(
        ErrorCode.OBJECT_DEPENDENCY_KEY, "", pointer_join(parts),
        f"Property {key} depends on {dependency}",
    )


def no_default(key: str) -> Finding:
    return Finding(
        ErrorCode.OBJECT_NO_DEFAULT, "", pointer_join(["properties", key]),
        f"Missing default value for property: {key}",
    )


# =============================================================================
# Array
# =============================================================================

def array_too_short(min_items: int) -> Finding:
    return Finding(
        ErrorCode.ARRAY_LENGTH_SHORT, "", "/minItems",
        f"Array is too short (must have at least {number_text(min_items)} items)",
    )


def array_too_long(max_items: int) -> Finding:
    return Finding(
        ErrorCode.ARRAY_LENGTH_LONG, "", "/maxItems",
        f"Array is too long (must have at most {number_text(max_items)} items)",
    )


def items_not_unique(first: int, second: int) -> Finding:
    return Finding(
        ErrorCode.ARRAY_UNIQUE, "", "/uniqueItems",
        f"Array items must be unique (items {first} and {second})",
    )


def additional_item(index: int, declared: int) -> Finding:
    return Finding(
        ErrorCode.ARRAY_ADDITIONAL_ITEMS, pointer_join([index]), "/additionalItems",
        f"Additional items (index {declared} or more) are not allowed",
    )
