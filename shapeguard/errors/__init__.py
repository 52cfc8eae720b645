"""Monadic Error Handling

Result type plus typed application errors, used by the validation package
for non-raising entry points.

Usage:
    from shapeguard.errors import Ok, Err

    match schema.safe_parse(payload):
        case Ok(value):
            handle(value)
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    ok,
    err,
)

from .builders import (
    validation_error,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "ok",
    "err",
    "validation_error",
]
