"""shapecheck: structural validation and coercion for JSON-like data."""

__version__ = "0.1.0"

from shapecheck.errors import ErrorCode, SchemaFaultError
from shapecheck.validation import (
    Finding,
    Outcome,
    SchemaFault,
    SchemaValidator,
    ValidationError,
    ValidationOptions,
    coerce,
    is_valid,
    pointer_join,
    structurally_equal,
    validate,
)

__all__ = [
    "__version__",
    "ErrorCode",
    "SchemaFaultError",
    "Finding",
    "Outcome",
    "SchemaFault",
    "SchemaValidator",
    "ValidationError",
    "ValidationOptions",
    "coerce",
    "is_valid",
    "pointer_join",
    "structurally_equal",
    "validate",
]
