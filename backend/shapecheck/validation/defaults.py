"""Default value synthesis for absent object properties (coercing runs only)."""
from __future__ import annotations

import copy
from typing import Any

from .schema import SubSchema, ValidationOptions, declared_types, resolve_additional
from .validators import compile_pattern

# Declared-type fallbacks, used when a property schema has no explicit default
IMPLICIT_DEFAULTS: dict[str, Any] = {
    "null": None,
    "boolean": True,
    "integer": 0,
    "number": 0,
    "string": "",
    "object": {},
    "array": [],
}

_MISSING = object()


def property_schema(schema: dict[str, Any], key: str) -> dict[str, Any] | None:
    """Find the sub-schema governing ``key``.

    Order: ``properties[key]``, the first matching ``patternProperties``
    entry, then ``additionalProperties`` when it is a schema.
    """
    properties = schema.get("properties")
    if isinstance(properties, dict) and isinstance(sub := properties.get(key), dict):
        return sub

    patterns = schema.get("patternProperties")
    if isinstance(patterns, dict):
        for pattern, sub in patterns.items():
            compiled = compile_pattern(pattern)
            if compiled.is_ok() and compiled.unwrap().search(key) and isinstance(sub, dict):
                return sub

    if "additionalProperties" in schema:
        additional = resolve_additional(schema["additionalProperties"])
        if additional.is_ok() and isinstance(resolved := additional.unwrap(), SubSchema):
            return resolved.schema
    return None


def default_for(sub_schema: dict[str, Any], options: ValidationOptions) -> Any:
    """Return the value to write for a property, or ``_MISSING``."""
    if "default" in sub_schema:
        return copy.deepcopy(sub_schema["default"])
    if options.no_implicit_default:
        return _MISSING
    types = declared_types(sub_schema)
    for type_name in types.unwrap_or(()):
        if type_name in IMPLICIT_DEFAULTS:
            return copy.deepcopy(IMPLICIT_DEFAULTS[type_name])
    return _MISSING


def synthesize_default(
    target: dict[str, Any],
    schema: dict[str, Any],
    key: str,
    options: ValidationOptions,
) -> bool:
    """Write a default for ``target[key]``.

    Returns True when a value was written, False when no default can be
    derived (no governing sub-schema, no explicit default with implicit
    defaults disabled, or no declared type with a fallback).
    """
    if (sub_schema := property_schema(schema, key)) is None:
        return False
    if (value := default_for(sub_schema, options)) is _MISSING:
        return False
    target[key] = value
    return True
