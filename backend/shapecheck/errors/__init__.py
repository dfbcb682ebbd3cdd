"""Monadic Error Handling

Key components:
- Result[T, E]: Monadic container for success/failure
- ErrorCode: stable finding codes
- SchemaFaultError: exception raised at the public boundary for bad schemas

Usage:
    from shapecheck.errors import Ok, Err, Result, ErrorCode

    match validator.validate_result(data):
        case Ok(outcome):
            print(outcome.valid)
        case Err(fault):
            log.error("schema_fault", schema_path=fault.schema_path)
"""
from .types import (
    Result,
    Ok,
    Err,
    ErrorCode,
)

from .handlers import (
    SchemaFaultError,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "ErrorCode",
    "SchemaFaultError",
    "raise_result",
]
