"""Per-Domain Constraint Validators

Atomic validators for the leaf keywords of each data domain (strings,
numbers, arrays, object sizes, enums). Each one checks a single keyword
and reports at most one finding; nested keywords that need recursion live
in the dispatcher.

Features:
- Frozen dataclass validators for immutability
- Compiled regex caching
- Keyword shape checked while building, so a malformed keyword faults
  before any data is inspected
"""
from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from typing import Any, Iterator, Mapping, Sequence

from shapecheck.errors import Err, Ok, Result
from . import builders
from .equality import is_number, structurally_equal
from .errors import Finding, SchemaFault

PATTERN_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
}


@lru_cache(maxsize=512)
def compile_pattern(pattern: str, flags: str = "") -> Result[re.Pattern, str]:
    """Compile a schema regex once per process.

    ``flags`` uses the letters of ``patternFlags``; ``u`` is accepted and has
    no effect because str patterns are always Unicode.
    """
    value = 0
    for letter in flags:
        if (flag := PATTERN_FLAGS.get(letter)) is None:
            return Err(f"Unknown pattern flag: {letter}")
        value |= flag
    try:
        return Ok(re.compile(pattern, value))
    except re.error as e:
        return Err(f"Invalid pattern {pattern!r}: {e}")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a single keyword check."""
    is_valid: bool
    finding: Finding | None = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, finding: Finding) -> ValidationResult: return cls(is_valid=False, finding=finding)


_VALID = ValidationResult.valid()


class AtomicValidator(ABC):
    """Base class for single-keyword validators."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value of this validator's domain."""


def run_validators(validators: Sequence[AtomicValidator], value: Any) -> Iterator[Finding]:
    """Yield the finding of every validator that rejects ``value``, in order."""
    for validator in validators:
        if not (result := validator.validate(value)).is_valid:
            yield result.finding


# ============================================================================
# Enum
# ============================================================================

@dataclass(frozen=True, slots=True)
class EnumMember(AtomicValidator):
    """Value must structurally equal one of the options."""
    options: tuple[Any, ...]

    def validate(self, value: Any) -> ValidationResult:
        if any(structurally_equal(value, option) for option in self.options):
            return _VALID
        return ValidationResult.invalid(builders.enum_mismatch())


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(AtomicValidator):
    """Minimum length in code points."""
    min_length: int | float

    def validate(self, value: str) -> ValidationResult:
        if len(value) < self.min_length:
            return ValidationResult.invalid(builders.string_too_short(self.min_length))
        return _VALID


@dataclass(frozen=True, slots=True)
class MaxLength(AtomicValidator):
    """Maximum length in code points."""
    max_length: int | float

    def validate(self, value: str) -> ValidationResult:
        if len(value) > self.max_length:
            return ValidationResult.invalid(builders.string_too_long(self.max_length))
        return _VALID


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """Unanchored regex search."""
    pattern: str
    compiled: re.Pattern

    def validate(self, value: str) -> ValidationResult:
        if self.compiled.search(value) is None:
            return ValidationResult.invalid(builders.pattern_mismatch(self.pattern))
        return _VALID


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class MultipleOf(AtomicValidator):
    divisor: int | float

    def validate(self, value: int | float) -> ValidationResult:
        if isinstance(value, int) and isinstance(self.divisor, int):
            remainder = value % self.divisor
        else:
            try:
                quotient = value / self.divisor
            except OverflowError:
                quotient = math.inf
            if math.isfinite(quotient):
                remainder = quotient % 1
            else:
                # Outside float range; divide exactly
                remainder = (Fraction(value) / Fraction(self.divisor)) % 1
        if remainder != 0:
            return ValidationResult.invalid(builders.not_multiple_of(self.divisor))
        return _VALID


@dataclass(frozen=True, slots=True)
class Minimum(AtomicValidator):
    minimum: int | float
    exclusive: bool = False

    def validate(self, value: int | float) -> ValidationResult:
        if value < self.minimum or (self.exclusive and value == self.minimum):
            return ValidationResult.invalid(builders.below_minimum(self.minimum, exclusive=self.exclusive))
        return _VALID


@dataclass(frozen=True, slots=True)
class Maximum(AtomicValidator):
    maximum: int | float
    exclusive: bool = False

    def validate(self, value: int | float) -> ValidationResult:
        if value > self.maximum or (self.exclusive and value == self.maximum):
            return ValidationResult.invalid(builders.above_maximum(self.maximum, exclusive=self.exclusive))
        return _VALID


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class ListLength(AtomicValidator):
    """Bound on array length; one validator per keyword."""
    bound: int | float
    upper: bool = False

    def validate(self, value: list) -> ValidationResult:
        if self.upper and len(value) > self.bound:
            return ValidationResult.invalid(builders.array_too_long(self.bound))
        if not self.upper and len(value) < self.bound:
            return ValidationResult.invalid(builders.array_too_short(self.bound))
        return _VALID


@dataclass(frozen=True, slots=True)
class UniqueItems(AtomicValidator):
    """Reports only the first duplicate pair, scanning in index order."""

    def validate(self, value: list) -> ValidationResult:
        for first, item in enumerate(value):
            for second in range(first + 1, len(value)):
                if structurally_equal(item, value[second]):
                    return ValidationResult.invalid(builders.items_not_unique(first, second))
        return _VALID


@dataclass(frozen=True, slots=True)
class PropertyCount(AtomicValidator):
    """Bound on the number of keys; one validator per keyword."""
    bound: int | float
    upper: bool = False

    def validate(self, value: dict) -> ValidationResult:
        if self.upper and len(value) > self.bound:
            return ValidationResult.invalid(builders.too_many_properties(self.bound))
        if not self.upper and len(value) < self.bound:
            return ValidationResult.invalid(builders.too_few_properties(self.bound))
        return _VALID


# ============================================================================
# Building validators from schema keywords
# ============================================================================

Validators = tuple[AtomicValidator, ...]


def _bound(schema: Mapping[str, Any], keyword: str) -> Result[int | float | None, SchemaFault]:
    """Read a non-negative numeric keyword, or None when absent."""
    if keyword not in schema:
        return Ok(None)
    if not is_number(value := schema[keyword]) or value < 0:
        return builders.schema_fault(f"/{keyword}", f"{keyword} must be a non-negative number")
    return Ok(value)


def _limit(schema: Mapping[str, Any], keyword: str) -> Result[int | float | None, SchemaFault]:
    if keyword not in schema:
        return Ok(None)
    if not is_number(value := schema[keyword]):
        return builders.schema_fault(f"/{keyword}", f"{keyword} must be a number")
    return Ok(value)


def enum_validators(schema: Mapping[str, Any]) -> Result[Validators, SchemaFault]:
    if "enum" not in schema:
        return Ok(())
    if not isinstance(options := schema["enum"], list):
        return builders.schema_fault("/enum", "enum must be of type array")
    return Ok((EnumMember(tuple(options)),))


def string_validators(schema: Mapping[str, Any]) -> Result[Validators, SchemaFault]:
    validators: list[AtomicValidator] = []
    for keyword, cls in (("minLength", MinLength), ("maxLength", MaxLength)):
        bound = _bound(schema, keyword)
        if bound.is_err():
            return bound
        if (value := bound.unwrap()) is not None:
            validators.append(cls(value))

    if "pattern" in schema:
        pattern, flags = schema["pattern"], schema.get("patternFlags", "")
        if not isinstance(pattern, str):
            return builders.schema_fault("/pattern", "pattern must be a string")
        if not isinstance(flags, str) or any(letter not in PATTERN_FLAGS for letter in flags):
            return builders.schema_fault("/patternFlags", f"Invalid pattern flags: {flags!r}")
        compiled = compile_pattern(pattern, flags)
        if compiled.is_err():
            return builders.schema_fault("/pattern", compiled.unwrap_err())
        validators.append(RegexPattern(pattern, compiled.unwrap()))
    return Ok(tuple(validators))


def number_validators(schema: Mapping[str, Any]) -> Result[Validators, SchemaFault]:
    validators: list[AtomicValidator] = []
    if "multipleOf" in schema:
        if not is_number(divisor := schema["multipleOf"]) or divisor <= 0:
            return builders.schema_fault("/multipleOf", "multipleOf must be a positive number")
        validators.append(MultipleOf(divisor))

    minimum = _limit(schema, "minimum")
    if minimum.is_err():
        return minimum
    if (value := minimum.unwrap()) is not None:
        validators.append(Minimum(value, exclusive=bool(schema.get("exclusiveMinimum", False))))

    maximum = _limit(schema, "maximum")
    if maximum.is_err():
        return maximum
    if (value := maximum.unwrap()) is not None:
        validators.append(Maximum(value, exclusive=bool(schema.get("exclusiveMaximum", False))))
    return Ok(tuple(validators))


def array_validators(schema: Mapping[str, Any]) -> Result[Validators, SchemaFault]:
    """minItems, maxItems and uniqueItems; ``items`` recursion is the dispatcher's."""
    validators: list[AtomicValidator] = []
    for keyword, upper in (("minItems", False), ("maxItems", True)):
        bound = _bound(schema, keyword)
        if bound.is_err():
            return bound
        if (value := bound.unwrap()) is not None:
            validators.append(ListLength(value, upper=upper))
    # Presence alone enables the check
    if "uniqueItems" in schema:
        validators.append(UniqueItems())
    return Ok(tuple(validators))


def property_count_validators(schema: Mapping[str, Any]) -> Result[Validators, SchemaFault]:
    validators: list[AtomicValidator] = []
    for keyword, upper in (("minProperties", False), ("maxProperties", True)):
        bound = _bound(schema, keyword)
        if bound.is_err():
            return bound
        if (value := bound.unwrap()) is not None:
            validators.append(PropertyCount(value, upper=upper))
    return Ok(tuple(validators))
