"""Monadic Error Handling Types

Result/Either types for deterministic propagation of validation
outcomes through the recursive dispatcher. Every stage returns a Result
instead of unwinding the stack, so short-circuiting is explicit at each
call site.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
E = TypeVar("E")


class ErrorCode(Enum):
    """Stable finding codes.

    Numbering groups codes by domain:
    0-9: type/enum
    10-19: composite keywords
    1xx: numbers
    2xx: strings
    3xx: objects
    4xx: arrays
    """
    # Type/enum
    INVALID_TYPE = 0
    ENUM_MISMATCH = 1

    # Composite
    ANY_OF_MISSING = 10
    ONE_OF_MISSING = 11
    ONE_OF_MULTIPLE = 12
    NOT_PASSED = 13

    # Number
    NUMBER_MULTIPLE_OF = 100
    NUMBER_MINIMUM = 101
    NUMBER_MINIMUM_EXCLUSIVE = 102
    NUMBER_MAXIMUM = 103
    NUMBER_MAXIMUM_EXCLUSIVE = 104

    # String
    STRING_LENGTH_SHORT = 200
    STRING_LENGTH_LONG = 201
    STRING_PATTERN = 202

    # Object
    OBJECT_PROPERTIES_MINIMUM = 300
    OBJECT_PROPERTIES_MAXIMUM = 301
    OBJECT_REQUIRED = 302
    OBJECT_ADDITIONAL_PROPERTIES = 303
    OBJECT_DEPENDENCY_KEY = 304
    OBJECT_NO_DEFAULT = 305

    # Array
    ARRAY_LENGTH_SHORT = 400
    ARRAY_LENGTH_LONG = 401
    ARRAY_UNIQUE = 402
    ARRAY_ADDITIONAL_ITEMS = 403
    ARRAY_INDEX_TYPE = 404

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if code == 0:
            return "type"
        if code < 10:
            return "enum"
        if code < 100:
            return "composite"
        if code < 200:
            return "number"
        if code < 300:
            return "string"
        if code < 400:
            return "object"
        return "array"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result monad."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result monad."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raises because Err has no value to unwrap."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        """Extract the error."""
        return self.error


# Type alias for Result monad
Result = Union[Ok[T], Err[E]]
