"""Schema Nodes

One frozen dataclass per schema kind. Nodes are immutable; modifiers build
new nodes with `dataclasses.replace`, sharing child nodes structurally.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from .rules import UNDEFINED, Rule


@dataclass(frozen=True, slots=True, kw_only=True)
class BaseNode:
    """Fields shared by every kind."""
    rules: tuple[Rule, ...] = ()
    default: Any = UNDEFINED
    optional: bool = False
    nullable: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class BooleanNode(BaseNode):
    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class NumberNode(BaseNode):
    convert_string: bool = False
    min_value: Any = None
    max_value: Any = None
    # (side, rule) pairs for min/max, most recently set first
    bounds: tuple[tuple[str, Rule], ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class StringNode(BaseNode):
    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class ArrayNode(BaseNode):
    item: SchemaNode
    distinct: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class RecordNode(BaseNode):
    key: SchemaNode
    value: SchemaNode


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectNode(BaseNode):
    """Explicit object schema. Field shapes are nodes, implicit shapes, or sample values."""
    fields: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True, kw_only=True)
class LiteralNode(BaseNode):
    value: Any


@dataclass(frozen=True, slots=True, kw_only=True)
class UnionNode(BaseNode):
    lhs: SchemaNode
    rhs: SchemaNode


@dataclass(frozen=True, slots=True, kw_only=True)
class ImplicitObjectNode(BaseNode):
    """A plain mapping used directly as an object shape."""
    fields: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


SchemaNode = Union[
    BooleanNode, NumberNode, StringNode, ArrayNode, RecordNode,
    ObjectNode, LiteralNode, UnionNode, ImplicitObjectNode,
]
