"""Exception Boundary

The engine passes faults around as values; this helper turns them into
exceptions at the public entry points, for callers that don't use the
Result monad.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from .types import Result

if TYPE_CHECKING:
    from shapecheck.validation.errors import SchemaFault

T = TypeVar("T")


class SchemaFaultError(Exception):
    """Exception wrapper for SchemaFault.

    Raised when the schema itself is malformed; the data was never fully
    checked, so no validity verdict exists.
    """

    def __init__(self, fault: SchemaFault):
        self.fault = fault
        super().__init__(str(fault))

    @property
    def schema_path(self) -> str:
        return self.fault.schema_path


def raise_result(result: Result[T, SchemaFault]) -> T:
    """Return the Ok value, or raise SchemaFaultError for an Err.

    Usage:
        outcome = raise_result(validator.validate_result(data))
    """
    if result.is_err():
        raise SchemaFaultError(result.unwrap_err())
    return result.unwrap()
