"""Validation Error System

Structured errors with dotted paths, constraints, and the offending values.
Supports both fail-fast and collect-all accumulation modes.

Message Format:
    Bad input.items.2.name: 42, expected string
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shapeguard.errors import AppError, Err, ErrorCode, validation_error
from .rules import UNDEFINED


class ValidationMode(str, Enum):
    """Validation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class SchemaDefinitionError(TypeError):
    """A schema was built incorrectly. Raised at construction time, never while parsing."""


def render_value(value: Any) -> str:
    """Render an input value the way failure messages show it."""
    if value is UNDEFINED: return "undefined"
    if value is None: return "null"
    if isinstance(value, bool): return "true" if value else "false"
    if isinstance(value, str): return value
    return repr(value)


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Detailed validation error for a single location.

    - field_path: dotted path to offending value (e.g., "input.items.2.name")
    - constraint: type of constraint violated (e.g., "number", "rule", "union")
    - actual_value: the value that failed
    - message: optional human-readable detail
    - code: taxonomy code
    """
    field_path: str
    constraint: str
    actual_value: Any = UNDEFINED
    message: str | None = None
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC

    def describe(self) -> str:
        """Render as ``Bad <path>: <value>[, <detail>]``."""
        text = f"Bad {self.field_path}: {render_value(self.actual_value)}"
        return f"{text}, {self.message}" if self.message else text

    def to_dict(self) -> dict[str, Any]:
        result = {"field": self.field_path, "constraint": self.constraint, "code": self.code.name}
        if self.message:
            result["message"] = self.message
        if self.actual_value is not UNDEFINED:
            result["value"] = self.actual_value
        return result


@dataclass
class ValidationError(Exception):
    """Validation error with structured details.

    In fail-fast mode it carries exactly one detail and its message is that
    detail's ``Bad ...`` rendering.
    """
    message: str
    details: list[ValidationErrorDetail]
    mode: ValidationMode = ValidationMode.FAIL_FAST

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str: return self.message

    @property
    def first_error(self) -> ValidationErrorDetail | None: return self.details[0] if self.details else None

    @property
    def field_errors(self) -> dict[str, list[ValidationErrorDetail]]:
        """Group errors by field path."""
        result: dict[str, list[ValidationErrorDetail]] = {}
        for detail in self.details:
            result.setdefault(detail.field_path, []).append(detail)
        return result

    def get_errors_for_field(self, field_path: str) -> list[ValidationErrorDetail]:
        return [d for d in self.details if d.field_path == field_path]

    def to_app_error(self, origin: str = "parse") -> AppError:
        """Convert to AppError for Result-style callers."""
        return self.to_err(origin).unwrap_err()

    def to_err(self, origin: str = "parse") -> Err[AppError]:
        if len(self.details) == 1:
            d = self.details[0]
            return validation_error(self.message, code=d.code, field=d.field_path, constraint=d.constraint,
                origin=origin, cause=self)
        return validation_error(self.message, origin=origin, cause=self, validation_mode=self.mode.value,
            error_count=len(self.details), errors=[d.to_dict() for d in self.details])

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"type": "validation_error", "message": self.message, "mode": self.mode.value,
            "error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}}

    @classmethod
    def from_details(cls, details: list[ValidationErrorDetail], mode: ValidationMode) -> ValidationError:
        if len(details) == 1:
            return cls(message=details[0].describe(), details=list(details), mode=mode)
        return cls(message=f"Validation failed ({len(details)} errors)", details=list(details), mode=mode)


class ValidationErrorAccumulator(ABC):
    """Abstract base for error accumulation strategies."""

    @abstractmethod
    def add_error(self, detail: ValidationErrorDetail) -> bool:
        """Add error detail. Returns True if should continue, False if should stop."""

    @abstractmethod
    def get_errors(self) -> list[ValidationErrorDetail]:
        """Get accumulated errors."""

    @property
    @abstractmethod
    def mode(self) -> ValidationMode:
        """Get the accumulation mode."""

    def has_errors(self) -> bool: return bool(self.get_errors())

    def to_validation_error(self) -> ValidationError | None:
        """Convert to ValidationError if errors exist."""
        if not self.has_errors(): return None
        return ValidationError.from_details(self.get_errors(), self.mode)

    def raise_if_errors(self) -> None:
        if (error := self.to_validation_error()) is not None:
            raise error


@dataclass
class FailFastAccumulator(ValidationErrorAccumulator):
    """Fail-fast accumulator: stops on first error."""
    _error: ValidationErrorDetail | None = None

    @property
    def mode(self) -> ValidationMode: return ValidationMode.FAIL_FAST

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if self._error is None: self._error = detail
        return False

    def get_errors(self) -> list[ValidationErrorDetail]: return [self._error] if self._error else []


@dataclass
class CollectAllAccumulator(ValidationErrorAccumulator):
    """Collect-all accumulator: gathers all errors up to max_errors."""
    _errors: list[ValidationErrorDetail] = field(default_factory=list)
    max_errors: int = 50

    @property
    def mode(self) -> ValidationMode: return ValidationMode.COLLECT_ALL

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        if len(self._errors) < self.max_errors: self._errors.append(detail)
        return len(self._errors) < self.max_errors

    def get_errors(self) -> list[ValidationErrorDetail]: return self._errors.copy()


def create_accumulator(mode: ValidationMode, max_errors: int = 50) -> ValidationErrorAccumulator:
    """Factory for creating accumulators based on mode."""
    return FailFastAccumulator() if mode == ValidationMode.FAIL_FAST else CollectAllAccumulator(max_errors=max_errors)
