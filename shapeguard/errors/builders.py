"""Error Builders

Ergonomic constructors for typed validation errors.
"""
from typing import Any

from .types import AppError, Err, ErrorCode, ErrorContext


def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: Any = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, "value": value, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))
