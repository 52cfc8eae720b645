"""Human-readable type expressions for schema nodes."""
from __future__ import annotations

from typing import Any, Mapping

from .nodes import (
    ArrayNode, BaseNode, BooleanNode, ImplicitObjectNode, LiteralNode,
    NumberNode, ObjectNode, RecordNode, StringNode, UnionNode,
)
from .rules import is_string_record


def describe_literal(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def describe_sample(value: Any) -> str:
    """Type name of a plain value standing in for a field shape."""
    if isinstance(value, BaseNode):
        return describe(value)
    if isinstance(value, (list, tuple)):
        return "any[]"
    if is_string_record(value):
        return describe_fields(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def describe_fields(fields: Mapping[str, Any]) -> str:
    props = [f"{name}: {describe_sample(shape)}" for name, shape in fields.items()]
    return f"{{ {', '.join(props)} }}" if props else "{}"


def describe(node: BaseNode | Mapping[str, Any]) -> str:
    """Render a node, or a plain mapping used as a shape, as a type expression."""
    if not isinstance(node, BaseNode):
        return describe_sample(node)

    match node:
        case BooleanNode():
            base = "boolean"
        case NumberNode():
            base = "number"
        case StringNode():
            base = "string"
        case UnionNode(lhs=lhs, rhs=rhs):
            base = f"{describe(lhs)} | {describe(rhs)}"
        case ArrayNode(item=item):
            base = f"Array<{describe(item)}>"
        case LiteralNode(value=value):
            base = describe_literal(value)
        case ObjectNode(fields=fields) | ImplicitObjectNode(fields=fields):
            base = describe_fields(fields)
        case RecordNode(key=key, value=value):
            base = f"Record<{describe(key)}, {describe(value)}>"
        case _:
            raise TypeError(f"Unable to compute description for {node!r}")

    if node.nullable:
        base = f"({base} | null)"
    if node.optional:
        base += "?"
    return base
