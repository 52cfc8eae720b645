"""Schema Builder

`Schema` is the public handle around an immutable node. Modifiers return a
new handle; the receiver never changes, so a schema shared by several
parents cannot drift.

Usage:
    from shapeguard import array, integer, object, string

    Order = object({
        "id": string(r"[a-z0-9-]+"),
        "quantity": integer().min(1),
        "tags": array(string()).distinct().optional(),
    })
    order = Order.parse(payload, "order")
"""
from __future__ import annotations

import dataclasses
import re
from types import MappingProxyType
from typing import Any, Generic, Mapping, TypeVar

from shapeguard.errors import Ok, Result

from . import engine
from .describe import describe
from .errors import SchemaDefinitionError, ValidationError, ValidationMode
from .nodes import (
    ArrayNode, BaseNode, BooleanNode, ImplicitObjectNode, LiteralNode,
    NumberNode, ObjectNode, RecordNode, StringNode, UnionNode,
)
from .rules import (
    UNDEFINED, Rule, at_least, at_most, is_safe_integer, is_string_record,
    is_valid_timestamp, pattern_rule,
)

T = TypeVar("T")


class Schema(Generic[T]):
    """Validation handle wrapping a schema node."""

    __slots__ = ("_node",)

    def __init__(self, node: BaseNode):
        self._node = node

    @property
    def node(self) -> BaseNode:
        return self._node

    def _derive(self, **changes: Any) -> Schema[T]:
        return Schema(dataclasses.replace(self._node, **changes))

    def _require(self, kind: type[BaseNode], modifier: str) -> None:
        if not isinstance(self._node, kind):
            raise SchemaDefinitionError(f"{modifier}() is not supported on {describe(self._node)} schemas")

    # Modifiers

    def default(self, value: Any) -> Schema[T]:
        return self._derive(default=value)

    def optional(self) -> Schema[T]:
        return self._derive(optional=True)

    def nullable(self) -> Schema[T]:
        return self._derive(nullable=True)

    def convert_string(self) -> Schema[T]:
        self._require(NumberNode, "convert_string")
        return self._derive(convert_string=True)

    def min(self, value: int | float) -> Schema[T]:
        self._require(NumberNode, "min")
        _require_number(value, "min")
        return self._derive(min_value=value, bounds=(("min", at_least(value)), *self._other_bounds("min")))

    def max(self, value: int | float) -> Schema[T]:
        self._require(NumberNode, "max")
        _require_number(value, "max")
        return self._derive(max_value=value, bounds=(("max", at_most(value)), *self._other_bounds("max")))

    def distinct(self) -> Schema[T]:
        self._require(ArrayNode, "distinct")
        return self._derive(distinct=True)

    def _other_bounds(self, side: str) -> tuple[tuple[str, Rule], ...]:
        node: NumberNode = self._node  # type: ignore[assignment]
        return tuple(bound for bound in node.bounds if bound[0] != side)

    # Parsing

    def parse(self, input: Any = UNDEFINED, name: str | None = None, *,
              mode: ValidationMode = ValidationMode.FAIL_FAST) -> T:
        """Validate ``input`` in place and return its normalized form.

        Raises:
            ValidationError: message ``"Bad <path>: <value>[, <detail>]"``.
        """
        return engine.parse(self._node, input, name, mode=mode)

    def safe_parse(self, input: Any = UNDEFINED, name: str | None = None, *,
                   mode: ValidationMode = ValidationMode.FAIL_FAST) -> Result[T, Any]:
        """Like `parse`, but returns ``Ok(value)`` or ``Err(AppError)``."""
        try:
            return Ok(self.parse(input, name, mode=mode))
        except ValidationError as e:
            return e.to_err(origin=name or "parse")

    # Description

    def describe(self) -> str:
        return describe(self._node)

    def __str__(self) -> str:
        return describe(self._node)

    def __repr__(self) -> str:
        return f"Schema({describe(self._node)})"


def _require_number(value: Any, modifier: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaDefinitionError(f"{modifier}() expects a number, got {value!r}")


def _as_node(shape: Any, role: str) -> BaseNode:
    """Accept a Schema or a plain mapping standing in for an object shape."""
    if isinstance(shape, Schema):
        return shape.node
    if is_string_record(shape):
        return ImplicitObjectNode(fields=_normalize_fields(shape))
    raise SchemaDefinitionError(f"{role} must be a schema or a plain mapping, got {type(shape).__name__}")


def _normalize_fields(shape: Mapping[str, Any]) -> Mapping[str, Any]:
    fields: dict[str, Any] = {}
    for name, value in shape.items():
        if isinstance(value, Schema):
            fields[name] = value.node
        elif is_string_record(value):
            fields[name] = ImplicitObjectNode(fields=_normalize_fields(value))
        else:
            fields[name] = value
    return MappingProxyType(fields)


# ============================================================================
# Factories
# ============================================================================

def boolean(*rules: Rule[bool]) -> Schema[bool]:
    return Schema(BooleanNode(rules=rules))


def number(*rules: Rule[float]) -> Schema[float]:
    return Schema(NumberNode(rules=rules))


def integer(*rules: Rule[int]) -> Schema[int]:
    """Number restricted to safe integers."""
    return number(is_safe_integer, *rules)


def string(*rules_or_patterns: Rule[str] | str | re.Pattern) -> Schema[str]:
    """String schema. Patterns (``str`` or compiled) must match the whole value."""
    rules = tuple(rule if callable(rule) else pattern_rule(rule) for rule in rules_or_patterns)
    return Schema(StringNode(rules=rules))


def timestamp(*rules_or_patterns: Rule[str] | str | re.Pattern) -> Schema[str]:
    """String holding an ISO-8601 timestamp in ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form."""
    return string(is_valid_timestamp, *rules_or_patterns)


def array(item: Schema[T] | Mapping[str, Any], *rules: Rule[list]) -> Schema[list[T]]:
    return Schema(ArrayNode(item=_as_node(item, "array item"), rules=rules))


def record(key: Schema[str], value: Schema[T] | Mapping[str, Any], *rules: Rule[dict]) -> Schema[dict[str, T]]:
    """String-keyed mapping. A non-string key schema fails at parse time."""
    return Schema(RecordNode(key=_as_node(key, "record key"), value=_as_node(value, "record value"), rules=rules))


def object(shape: Mapping[str, Any], *rules: Rule[dict]) -> Schema[dict[str, Any]]:
    if not is_string_record(shape):
        raise SchemaDefinitionError(f"object shape must be a plain mapping, got {type(shape).__name__}")
    return Schema(ObjectNode(fields=_normalize_fields(shape), rules=rules))


def literal(value: T, *rules: Rule[T]) -> Schema[T]:
    return Schema(LiteralNode(value=value, rules=rules))


def union(lhs: Schema[Any] | Mapping[str, Any], rhs: Schema[Any] | Mapping[str, Any], *rules: Rule[Any]) -> Schema[Any]:
    return Schema(UnionNode(lhs=_as_node(lhs, "union lhs"), rhs=_as_node(rhs, "union rhs"), rules=rules))
