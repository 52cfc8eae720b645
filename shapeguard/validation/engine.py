"""Validation Engine

Recursive descent over a schema node and an input value in lock-step.
Coerced values are written back into the input in place; the first unmet
contract is reported with its dotted path.
"""
from __future__ import annotations

import copy
import math
from contextlib import contextmanager
from typing import Any, Iterator

from shapeguard.config import get_settings
from shapeguard.errors import ErrorCode
from shapeguard.logging import get_logger

from .describe import describe, describe_sample
from .errors import (
    ValidationErrorAccumulator, ValidationErrorDetail, ValidationMode, create_accumulator,
)
from .nodes import (
    ArrayNode, BaseNode, BooleanNode, ImplicitObjectNode, LiteralNode,
    NumberNode, ObjectNode, RecordNode, StringNode, UnionNode,
)
from .rules import UNDEFINED, Rule, RuleFailure, distinct_values, is_string_record, same_value

log = get_logger("validation.engine")

_FAILED: Any = object()


class _AlternativeFailed(Exception):
    """A union branch did not match."""


class ParseContext:
    """Per-call state: the current path, error accumulation, and nesting depth."""

    __slots__ = ("accumulator", "max_depth", "depth", "_path", "_trials")

    def __init__(self, root_name: str, accumulator: ValidationErrorAccumulator, max_depth: int):
        self.accumulator, self.max_depth, self.depth = accumulator, max_depth, 0
        self._path: list[str | int] = [root_name]
        self._trials = 0

    def push_path(self, segment: str | int) -> None:
        self._path.append(segment)

    def pop_path(self) -> str | int:
        return self._path.pop()

    @property
    def current_path(self) -> str:
        return ".".join(str(segment) for segment in self._path)

    @property
    def error_count(self) -> int:
        return len(self.accumulator.get_errors())

    @contextmanager
    def descend(self, segment: str | int) -> Iterator[None]:
        self.push_path(segment)
        try:
            yield
        finally:
            self.pop_path()

    @contextmanager
    def trial(self) -> Iterator[None]:
        """Failures inside raise `_AlternativeFailed` instead of being reported."""
        self._trials += 1
        try:
            yield
        finally:
            self._trials -= 1

    def fail(self, value: Any, message: str | None = None, *, constraint: str,
             code: ErrorCode = ErrorCode.E2004_INVALID_TYPE) -> Any:
        """Report a failure at the current path. Raises unless errors are being collected."""
        if self._trials:
            raise _AlternativeFailed()
        if value is UNDEFINED and code is ErrorCode.E2004_INVALID_TYPE:
            code = ErrorCode.E2001_REQUIRED_FIELD_MISSING
        detail = ValidationErrorDetail(field_path=self.current_path, constraint=constraint,
            actual_value=value, message=message, code=code)
        log.debug("schema_parse_failed", path=detail.field_path, constraint=constraint, code=code.name)
        if not self.accumulator.add_error(detail):
            raise self.accumulator.to_validation_error()
        return _FAILED


def check_rules(value: Any, rules: tuple[Rule, ...], ctx: ParseContext) -> Any:
    for rule in rules:
        result = rule(value)
        if isinstance(result, RuleFailure):
            return ctx.fail(value, result.message, constraint="rule", code=result.code)
        if not result:
            return ctx.fail(value, constraint="rule", code=ErrorCode.E2005_CONSTRAINT_VIOLATION)
    return value


def to_number(text: str) -> int | float | None:
    """Numeric reading of ``text``, or None when it is not a number."""
    stripped = text.strip()
    if not stripped or "_" in stripped or not stripped.isascii():
        return None
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        converted = float(stripped)
    except ValueError:
        return None
    return converted if math.isfinite(converted) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ============================================================================
# Per-kind handlers
# ============================================================================

def _apply_fields(value: Any, fields, rules: tuple[Rule, ...], ctx: ParseContext) -> Any:
    if not is_string_record(value):
        return ctx.fail(value, "expected object", constraint="object")
    errors_before = ctx.error_count
    for name, shape in fields.items():
        current = value.get(name, UNDEFINED)
        with ctx.descend(name):
            resolved = apply_schema(current, shape, ctx)
        if resolved is UNDEFINED:
            value.pop(name, None)
        elif resolved is not current:
            value[name] = resolved
    # rules only ever see fully validated containers
    if ctx.error_count > errors_before:
        return _FAILED
    return check_rules(value, rules, ctx)


def _apply_number(value: Any, node: NumberNode, ctx: ParseContext) -> Any:
    if _is_number(value):
        resolved = value
    elif isinstance(value, str) and node.convert_string:
        resolved = to_number(value)
        if resolved is None:
            return ctx.fail(value, "unable to convert to number", constraint="number",
                code=ErrorCode.E2002_INVALID_FORMAT)
    else:
        return ctx.fail(value, "expected number", constraint="number")
    return check_rules(resolved, (*(rule for _, rule in node.bounds), *node.rules), ctx)


def _apply_array(value: Any, node: ArrayNode, ctx: ParseContext) -> Any:
    if not isinstance(value, list):
        return ctx.fail(value, "expected array", constraint="array")
    errors_before = ctx.error_count
    for index, item in enumerate(value):
        with ctx.descend(index):
            resolved = apply_schema(item, node.item, ctx)
        if resolved is not item:
            value[index] = resolved
    if ctx.error_count > errors_before or check_rules(value, node.rules, ctx) is _FAILED:
        return _FAILED
    if node.distinct:
        deduplicated = distinct_values(value)
        if len(deduplicated) != len(value):
            return deduplicated
    return value


def _apply_record(value: Any, node: RecordNode, ctx: ParseContext) -> Any:
    if not isinstance(node.key, StringNode):
        return ctx.fail(value, "only string-keyed objects are supported", constraint="record",
            code=ErrorCode.E2005_CONSTRAINT_VIOLATION)
    if not is_string_record(value):
        return ctx.fail(value, "expected object", constraint="object")
    errors_before = ctx.error_count
    for key, item in list(value.items()):
        apply_schema(key, node.key, ctx)
        with ctx.descend(key):
            resolved = apply_schema(item, node.value, ctx)
        if resolved is UNDEFINED:
            del value[key]
        elif resolved is not item:
            value[key] = resolved
    if ctx.error_count > errors_before:
        return _FAILED
    return check_rules(value, node.rules, ctx)


def _apply_union(value: Any, node: UnionNode, ctx: ParseContext) -> Any:
    """First matching branch wins. Branches are tried on a copy, so a rejected
    branch leaves no defaults or coercions behind in the input."""
    for branch in (node.lhs, node.rhs):
        try:
            with ctx.trial():
                apply_schema(copy.deepcopy(value), branch, ctx)
        except _AlternativeFailed:
            continue
        resolved = apply_schema(value, branch, ctx)
        return check_rules(resolved, node.rules, ctx)
    return ctx.fail(value, f"expected {describe(node.lhs)} | {describe(node.rhs)}", constraint="union",
        code=ErrorCode.E2005_CONSTRAINT_VIOLATION)


def _apply_sample(value: Any, sample: Any, ctx: ParseContext) -> Any:
    """A plain value used as a field shape validates by its own type."""
    match sample:
        case bool():
            matches = isinstance(value, bool)
        case int() | float():
            matches = _is_number(value)
        case str():
            matches = isinstance(value, str)
        case list() | tuple():
            matches = isinstance(value, list)
        case None:
            matches = value is None
        case _:
            matches = isinstance(value, type(sample))
    if not matches:
        return ctx.fail(value, f"expected {describe_sample(sample)}", constraint="sample")
    return value


def _dispatch(value: Any, node: BaseNode, ctx: ParseContext) -> Any:
    match node:
        case ObjectNode(fields=fields) | ImplicitObjectNode(fields=fields):
            return _apply_fields(value, fields, node.rules, ctx)
        case NumberNode():
            return _apply_number(value, node, ctx)
        case StringNode():
            if not isinstance(value, str):
                return ctx.fail(value, "expected string", constraint="string")
            return check_rules(value, node.rules, ctx)
        case ArrayNode():
            return _apply_array(value, node, ctx)
        case RecordNode():
            return _apply_record(value, node, ctx)
        case LiteralNode(value=expected):
            if not same_value(value, expected):
                return ctx.fail(value, "unexpected literal value", constraint="literal",
                    code=ErrorCode.E2005_CONSTRAINT_VIOLATION)
            return check_rules(value, node.rules, ctx)
        case BooleanNode():
            if not isinstance(value, bool):
                return ctx.fail(value, "expected boolean", constraint="boolean")
            return check_rules(value, node.rules, ctx)
        case UnionNode():
            return _apply_union(value, node, ctx)
    raise TypeError(f"Unsupported schema node: {node!r}")


def apply_schema(value: Any, node: Any, ctx: ParseContext) -> Any:
    """Validate ``value`` against ``node`` and return its resolved form.

    The result is the same object when nothing was coerced, a replacement
    value otherwise (default substituted, string converted, array
    de-duplicated), or UNDEFINED for an absent optional value.
    """
    if not isinstance(node, BaseNode):
        return _apply_sample(value, node, ctx)
    if node.optional and value is UNDEFINED:
        return value
    if node.nullable and value is None:
        return value

    original = value
    if value is UNDEFINED and node.default is not UNDEFINED:
        value = copy.deepcopy(node.default)

    ctx.depth += 1
    try:
        if ctx.depth > ctx.max_depth:
            resolved = ctx.fail(value, "maximum nesting depth exceeded", constraint="depth",
                code=ErrorCode.E9003_ASSERTION_FAILED)
        else:
            resolved = _dispatch(value, node, ctx)
    finally:
        ctx.depth -= 1

    if resolved is _FAILED:
        return original
    if resolved is not original:
        log.debug("value_coerced", path=ctx.current_path, kind=type(node).__name__)
    return resolved


def parse(node: BaseNode, value: Any = UNDEFINED, name: str | None = None, *,
          mode: ValidationMode = ValidationMode.FAIL_FAST) -> Any:
    """Run one validation pass and return the resolved input.

    Raises:
        ValidationError: on the first failure, or with every collected failure
            in COLLECT_ALL mode.
    """
    settings = get_settings()
    accumulator = create_accumulator(mode, settings.MAX_ERRORS)
    ctx = ParseContext(settings.DEFAULT_ROOT_NAME if name is None else name, accumulator, settings.MAX_DEPTH)
    resolved = apply_schema(value, node, ctx)
    accumulator.raise_if_errors()
    return resolved
