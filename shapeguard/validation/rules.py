"""Rule Contract and Shipped Rules

A rule is a plain predicate over an already-typed value. It passes by
returning something truthy, fails silently by returning something falsy, or
fails with an explanation by returning `fail_with(message)`:

    def is_even(value: int) -> bool | RuleFailure:
        return value % 2 == 0 or fail_with("must be even")

Rules are checked left to right after the structural checks of their node;
the first failing rule stops the node.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar, Union

from shapeguard.errors import ErrorCode

T = TypeVar("T")

MAX_SAFE_INTEGER = 2**53 - 1


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """Falsy rule result carrying a human-readable reason."""
    message: str
    code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION

    def __bool__(self) -> bool:
        return False


Rule = Callable[[T], Union[bool, RuleFailure]]


def fail_with(message: str, code: ErrorCode = ErrorCode.E2005_CONSTRAINT_VIOLATION) -> RuleFailure:
    """Signal a rule failure with a custom message."""
    return RuleFailure(message, code)


class _Undefined:
    """Marker for an absent value, distinct from ``None``."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict) -> _Undefined:
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


# ============================================================================
# Collaborator helpers
# ============================================================================

def is_string_record(value: Any) -> bool:
    """True for a plain ``dict`` whose keys are all strings."""
    return type(value) is dict and all(isinstance(key, str) for key in value)


def try_parse_date(text: str) -> datetime | None:
    """Best-effort ISO-8601 parse. Naive values are read as UTC."""
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00") if text.endswith("Z") else text)
    except (TypeError, ValueError):
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    utc = moment.astimezone(timezone.utc)
    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}.{utc.microsecond // 1000:03d}Z"
    )


def _primitive_key(value: Any) -> tuple[str, Any] | None:
    """Hashable identity for primitive values; ints and floats share the number kind."""
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        return ("number", "NaN" if value != value else value)
    if isinstance(value, str):
        return ("string", value)
    if value is None:
        return ("null", None)
    return None


def same_value(a: Any, b: Any) -> bool:
    """Strict equality: primitives compare by kind and value, everything else by identity."""
    key = _primitive_key(a)
    return key == _primitive_key(b) if key is not None else a is b


def distinct_values(items: list) -> list:
    """First occurrence of every value, in order."""
    seen: set[tuple[str, Any]] = set()
    result = []
    for item in items:
        key = _primitive_key(item) or ("object", id(item))
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result


# ============================================================================
# Shipped rules
# ============================================================================

def is_not_empty(value: str) -> bool | RuleFailure:
    return value != "" or fail_with("cannot be empty")


def is_valid_timestamp(value: str) -> bool | RuleFailure:
    """Accepts only strings that survive an exact ISO-8601 round-trip."""
    parsed = try_parse_date(value)
    return (parsed is not None and format_timestamp(parsed) == value) or fail_with("must be a valid timestamp", ErrorCode.E2002_INVALID_FORMAT)


def is_array_distinct(value: list) -> bool | RuleFailure:
    return len(distinct_values(value)) == len(value) or fail_with("must have distinct elements")


def is_safe_integer(value: int | float) -> bool | RuleFailure:
    if isinstance(value, float) and not value.is_integer():
        return fail_with("must be an integer")
    return abs(value) <= MAX_SAFE_INTEGER or fail_with("must be an integer")


def pattern_rule(pattern: str | re.Pattern) -> Rule[str]:
    """Rule requiring the whole string to match ``pattern``."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def matches_pattern(value: str) -> bool | RuleFailure:
        return compiled.fullmatch(value) is not None or fail_with(f"must match {compiled.pattern}", ErrorCode.E2002_INVALID_FORMAT)

    return matches_pattern


def at_least(minimum: Any) -> Rule[Any]:
    def is_at_least(value: Any) -> bool | RuleFailure:
        return value >= minimum or fail_with(f"must be at least {minimum}", ErrorCode.E2003_OUT_OF_RANGE)

    return is_at_least


def at_most(maximum: Any) -> Rule[Any]:
    def is_at_most(value: Any) -> bool | RuleFailure:
        return value <= maximum or fail_with(f"must be at most {maximum}", ErrorCode.E2003_OUT_OF_RANGE)

    return is_at_most
