"""Validation Finding System

Findings carry pointer paths into both trees, a stable code, and, for
anyOf/oneOf, the grouped findings of every failing alternative. Schema
faults are a separate record because they stop the run instead of
accumulating. Supports both fail-fast and collect-all accumulation modes.

Finding Format:
{
    "code": "OBJECT_REQUIRED",
    "code_num": 302,
    "category": "object",
    "data_path": "/user",
    "schema_path": "/properties/user/required/0",
    "message": "Missing required property: email"
}
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union, final

from shapecheck.errors import ErrorCode, Ok
from .schema import ValidationMode


@dataclass(frozen=True, slots=True)
class Finding:
    """One validation violation.

    - data_path: pointer to the offending node in the data tree
    - schema_path: pointer to the keyword that rejected it
    - sub_findings: one group per failing alternative (anyOf/oneOf only)
    """
    code: ErrorCode
    data_path: str
    schema_path: str
    message: str
    sub_findings: tuple[tuple[Finding, ...], ...] = ()

    def prefixed(self, data_prefix: str, schema_prefix: str) -> Finding:
        """Re-root this finding (and every nested one) under a parent position."""
        if not data_prefix and not schema_prefix:
            return self
        return Finding(
            code=self.code,
            data_path=data_prefix + self.data_path,
            schema_path=schema_prefix + self.schema_path,
            message=self.message,
            sub_findings=tuple(
                tuple(sub.prefixed(data_prefix, schema_prefix) for sub in group)
                for group in self.sub_findings
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for reports."""
        result = {
            "code": self.code.name,
            "code_num": self.code.value,
            "category": self.code.category,
            "data_path": self.data_path,
            "schema_path": self.schema_path,
            "message": self.message,
        }
        if self.sub_findings:
            result["sub_findings"] = [[sub.to_dict() for sub in group] for group in self.sub_findings]
        return result

    def __str__(self) -> str:
        return f"{self.data_path or '<root>'}: {self.message} [{self.code.name}]"


@dataclass(frozen=True, slots=True)
class SchemaFault:
    """A malformed schema keyword. Aborts the whole run."""
    schema_path: str
    message: str

    def prefixed(self, schema_prefix: str) -> SchemaFault:
        return SchemaFault(schema_path=schema_prefix + self.schema_path, message=self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"schema_path": self.schema_path, "message": self.message}

    def __str__(self) -> str:
        return f"{self.schema_path or '<root>'}: {self.message}"


@final
@dataclass(frozen=True, slots=True)
class Halted:
    """Stop signal: fail-fast mode has recorded its finding."""


HALT = Halted()
CONTINUE: Ok[None] = Ok(None)

# Reasons a dispatch stops before running every stage
Abort = Union[Halted, SchemaFault]


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of one validation call."""
    valid: bool
    findings: tuple[Finding, ...] = ()
    data: Any = None
    value: Any = None
    fault: SchemaFault | None = None
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    @property
    def first_finding(self) -> Finding | None:
        return self.findings[0] if self.findings else None

    @property
    def by_data_path(self) -> dict[str, list[Finding]]:
        """Group findings by data path."""
        result: dict[str, list[Finding]] = {}
        for finding in self.findings:
            result.setdefault(finding.data_path, []).append(finding)
        return result

    def findings_for(self, data_path: str) -> list[Finding]:
        return [f for f in self.findings if f.data_path == data_path]

    def codes(self) -> list[ErrorCode]:
        return [f.code for f in self.findings]

    def raise_if_invalid(self, message: str = "Validation failed") -> None:
        """Raise ValidationError if the outcome carries findings."""
        if not self.valid:
            raise ValidationError(message=message, findings=list(self.findings), mode=self.mode)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "valid": self.valid,
            "mode": self.mode.value,
            "error_count": len(self.findings),
            "errors": [f.to_dict() for f in self.findings],
        }
        if self.fault is not None:
            result["fault"] = self.fault.to_dict()
        return result


@dataclass
class ValidationError(Exception):
    """Raised by ``Outcome.raise_if_invalid`` with every finding attached."""
    message: str
    findings: list[Finding]
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.findings: return self.message
        if len(self.findings) == 1: return str(self.findings[0])
        return f"{self.message} ({len(self.findings)} errors)"

    @property
    def first_finding(self) -> Finding | None: return self.findings[0] if self.findings else None


class FindingAccumulator(ABC):
    """Abstract base for finding accumulation strategies."""

    @abstractmethod
    def add(self, finding: Finding) -> bool:
        """Add a finding. Returns True if validation should continue."""

    @abstractmethod
    def get_findings(self) -> list[Finding]:
        """Get accumulated findings."""

    @abstractmethod
    def has_findings(self) -> bool:
        """Check if any findings accumulated."""

    @property
    @abstractmethod
    def mode(self) -> ValidationMode:
        """Get the accumulation mode."""


@dataclass
class FailFastAccumulator(FindingAccumulator):
    """Fail-fast accumulator: stops on first finding."""
    _finding: Finding | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.FAIL_FAST

    def add(self, finding: Finding) -> bool:
        if self._finding is None: self._finding = finding
        return False

    def get_findings(self) -> list[Finding]: return [self._finding] if self._finding else []

    def has_findings(self) -> bool: return self._finding is not None


@dataclass
class CollectAllAccumulator(FindingAccumulator):
    """Collect-all accumulator: gathers every finding, optionally capped at max_errors."""
    _findings: list[Finding] = field(default_factory=list)
    max_errors: int | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.COLLECT_ALL

    def add(self, finding: Finding) -> bool:
        if self.max_errors is None or len(self._findings) < self.max_errors: self._findings.append(finding)
        return self.max_errors is None or len(self._findings) < self.max_errors

    def get_findings(self) -> list[Finding]: return self._findings.copy()

    def has_findings(self) -> bool: return len(self._findings) > 0


def create_accumulator(mode: ValidationMode, max_errors: int | None = None) -> FindingAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator(max_errors=max_errors)
