"""Schema keyword model: modes, options, and shape-polymorphic keywords

A schema node is a plain ``dict``; nothing here compiles or rewrites it.
Keywords whose value may be a boolean, a schema, or a list of keys
(``additionalProperties``, ``additionalItems``, ``dependencies``) are
resolved once per visit into a closed tagged variant, so checkers match on
the variant instead of inspecting raw values.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from shapecheck.errors import Err, Ok, Result

TYPE_NAMES = frozenset({"object", "array", "string", "number", "integer", "boolean", "null"})


class ValidationMode(str, Enum):
    """Finding accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class ValidationOptions(BaseModel):
    """Caller-facing option flags. All default to False."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    no_implicit_default: bool = Field(
        default=False,
        description="Never derive a default from a property's declared type; explicit defaults still apply.",
    )
    set_missing_to_default: bool = Field(
        default=False,
        description="While coercing, also fill absent optional properties that declare an explicit default.",
    )
    enable_ignore_null_properties: bool = Field(
        default=False,
        description="Recognize the non-standard ignoreNullProperties keyword.",
    )

    @classmethod
    def parse(cls, options: ValidationOptions | Mapping[str, Any] | None) -> ValidationOptions:
        """Accept an options instance, a plain mapping, or None."""
        if options is None:
            return DEFAULT_OPTIONS
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))


DEFAULT_OPTIONS = ValidationOptions()


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Per-run configuration shared by every dispatch of one call."""
    mode: ValidationMode = ValidationMode.COLLECT_ALL
    coerce: bool = False
    options: ValidationOptions = DEFAULT_OPTIONS
    max_errors: int | None = None

    @property
    def fail_fast(self) -> bool:
        return self.mode is ValidationMode.FAIL_FAST

    def with_coercion(self, enabled: bool) -> ValidationConfig:
        """Coercion can only be narrowed, never switched on by a child."""
        if self.coerce and not enabled:
            return replace(self, coerce=False)
        return self


# ============================================================================
# Tagged keyword variants
# ============================================================================

@dataclass(frozen=True, slots=True)
class Forbidden:
    """``false``: nothing beyond the declared members is allowed."""


@dataclass(frozen=True, slots=True)
class AllowAny:
    """``true``: anything beyond the declared members is allowed."""


@dataclass(frozen=True, slots=True)
class SubSchema:
    """A nested schema the member must satisfy."""
    schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class KeyList:
    """Sibling keys that must all be present."""
    keys: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class KeyName:
    """A single sibling key that must be present."""
    key: str


FORBIDDEN = Forbidden()
ALLOW_ANY = AllowAny()

Additional = Union[Forbidden, AllowAny, SubSchema]
Dependency = Union[SubSchema, KeyList, KeyName]


def resolve_additional(value: Any) -> Result[Additional, str]:
    """Resolve ``additionalProperties`` / ``additionalItems``."""
    if value is True:
        return Ok(ALLOW_ANY)
    if value is False:
        return Ok(FORBIDDEN)
    if isinstance(value, dict):
        return Ok(SubSchema(value))
    return Err("must be a boolean or an object")


def resolve_dependency(value: Any) -> Result[Dependency, str]:
    """Resolve one ``dependencies`` entry by the kind of its value."""
    if isinstance(value, dict):
        return Ok(SubSchema(value))
    if isinstance(value, str):
        return Ok(KeyName(value))
    if isinstance(value, list) and all(isinstance(key, str) for key in value):
        return Ok(KeyList(tuple(value)))
    return Err("must be an object, a key name, or a list of key names")


def declared_types(schema: Mapping[str, Any]) -> Result[tuple[str, ...], str]:
    """Read the ``type`` keyword as an ordered tuple of type names.

    Returns an empty tuple when the keyword is absent.
    """
    if "type" not in schema:
        return Ok(())
    raw = schema["type"]
    types = (raw,) if isinstance(raw, str) else raw
    if not isinstance(types, (list, tuple)) or not all(isinstance(t, str) for t in types):
        return Err("type must be a string or an array of strings")
    if unknown := [t for t in types if t not in TYPE_NAMES]:
        return Err(f"Unknown type: {unknown[0]}")
    return Ok(tuple(types))
