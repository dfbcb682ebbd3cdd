"""Schema Validation Engine

Validates in-memory data trees against JSON-Schema-style (draft-4 keyword
set) schemas, reporting every violation with pointer paths into both
trees, and optionally coerces a copy of the data toward the declared
types and defaults.

Key Features:
- Fixed keyword stage order with short-circuiting Result propagation
- Fail-fast or collect-all finding accumulation
- Opt-in coercion with copy-on-branch semantics for anyOf/oneOf
- Default synthesis for missing properties
- Schema faults reported once, re-rooted to the offending keyword

Usage:
    from shapecheck.validation import validate, coerce, is_valid

    schema = {"type": "object", "required": ["port"],
              "properties": {"port": {"type": "integer", "minimum": 1}}}

    outcome = validate({"port": 0}, schema)
    for finding in outcome.findings:
        print(finding.data_path, finding.message)

    coerce({"port": "8080"}, schema).value  # {"port": 8080}
"""

# Facades
from .boundaries import (
    SchemaValidator,
    validate,
    is_valid,
    coerce,
)

# Findings and outcomes
from .errors import (
    Finding,
    SchemaFault,
    Outcome,
    ValidationError,
    FindingAccumulator,
    FailFastAccumulator,
    CollectAllAccumulator,
    create_accumulator,
)

# Options and keyword model
from .schema import (
    ValidationMode,
    ValidationOptions,
    ValidationConfig,
    Forbidden,
    AllowAny,
    SubSchema,
    KeyList,
    KeyName,
    resolve_additional,
    resolve_dependency,
    declared_types,
)

from .dispatcher import Dispatcher
from .coercion import coerce_to_types
from .defaults import synthesize_default
from .equality import structurally_equal
from .pointer import pointer_join

__all__ = [
    # Facades
    "SchemaValidator",
    "validate",
    "is_valid",
    "coerce",
    # Findings
    "Finding",
    "SchemaFault",
    "Outcome",
    "ValidationError",
    "FindingAccumulator",
    "FailFastAccumulator",
    "CollectAllAccumulator",
    "create_accumulator",
    # Schema model
    "ValidationMode",
    "ValidationOptions",
    "ValidationConfig",
    "Forbidden",
    "AllowAny",
    "SubSchema",
    "KeyList",
    "KeyName",
    "resolve_additional",
    "resolve_dependency",
    "declared_types",
    # Engine
    "Dispatcher",
    "coerce_to_types",
    "synthesize_default",
    "structurally_equal",
    "pointer_join",
]
