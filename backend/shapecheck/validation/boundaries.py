"""Public Entry Points

The three facades callers use, plus a schema-bound validator:

- validate: collect every finding, never mutate the data
- is_valid: stop at the first finding, answer yes/no
- coerce: work on a deep copy, convert toward declared types and defaults

A malformed schema raises SchemaFaultError from the facades; the
``*_result`` methods of SchemaValidator return it as ``Err(fault)`` instead.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Union

from shapecheck.errors import Err, Ok, Result, raise_result
from shapecheck.logging import validation_logger
from .dispatcher import Dispatcher
from .errors import Outcome, SchemaFault
from .schema import ValidationConfig, ValidationMode, ValidationOptions

OptionsLike = Union[ValidationOptions, Mapping[str, Any], None]


def _run(data: Any, schema: Any, config: ValidationConfig) -> Result[Outcome, SchemaFault]:
    dispatcher = Dispatcher.run(data, schema, config)
    log = validation_logger()
    if dispatcher.fault is not None:
        log.warning("schema_fault", schema_path=dispatcher.fault.schema_path, message=dispatcher.fault.message)
        return Err(dispatcher.fault)

    findings = dispatcher.findings
    result_data = dispatcher.data if config.coerce else data
    outcome = Outcome(
        valid=not findings,
        findings=findings,
        data=result_data,
        value=result_data if config.coerce and not findings else None,
        mode=config.mode,
    )
    log.debug(
        "validation_completed",
        mode=config.mode.value,
        coerce=config.coerce,
        valid=outcome.valid,
        error_count=len(findings),
    )
    return Ok(outcome)


class SchemaValidator:
    """Validator bound to one schema and one set of options.

    Usage:
        validator = SchemaValidator(schema, {"no_implicit_default": True})
        outcome = validator.validate(payload)
        match validator.coerce_result(payload):
            case Ok(outcome): ...
            case Err(fault): ...
    """

    __slots__ = ("schema", "options", "max_errors")

    def __init__(self, schema: Any, options: OptionsLike = None, *, max_errors: int | None = None):
        self.schema = schema
        if max_errors is not None and max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {max_errors}")
        self.options = ValidationOptions.parse(options)
        self.max_errors = max_errors

    def _config(self, mode: ValidationMode, coerce: bool = False) -> ValidationConfig:
        return ValidationConfig(mode=mode, coerce=coerce, options=self.options, max_errors=self.max_errors)

    def validate_result(self, data: Any, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Result[Outcome, SchemaFault]:
        """Validate without coercion. The data is never modified."""
        return _run(data, self.schema, self._config(mode))

    def coerce_result(self, data: Any, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Result[Outcome, SchemaFault]:
        """Coerce a deep copy of the data; the caller's tree is left untouched."""
        return _run(copy.deepcopy(data), self.schema, self._config(mode, coerce=True))

    def validate(self, data: Any, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Outcome:
        return raise_result(self.validate_result(data, mode))

    def is_valid(self, data: Any) -> bool:
        return self.validate(data, ValidationMode.FAIL_FAST).valid

    def coerce(self, data: Any, mode: ValidationMode = ValidationMode.COLLECT_ALL) -> Outcome:
        return raise_result(self.coerce_result(data, mode))


def validate(data: Any, schema: Any, options: OptionsLike = None) -> Outcome:
    """Validate ``data`` against ``schema``, collecting every finding."""
    return SchemaValidator(schema, options).validate(data)


def is_valid(data: Any, schema: Any, options: OptionsLike = None) -> bool:
    """Fail-fast validity check."""
    return SchemaValidator(schema, options).is_valid(data)


def coerce(data: Any, schema: Any, options: OptionsLike = None) -> Outcome:
    """Coerce a copy of ``data`` toward ``schema``.

    ``outcome.value`` holds the converted tree when the outcome is valid.
    """
    return SchemaValidator(schema, options).coerce(data)
