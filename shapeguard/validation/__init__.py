"""Declarative Validation System

Schemas describe the expected shape of untrusted input. Parsing checks the
input against the shape, applies coercions and defaults in place, and
reports the first violation with a dotted path.

Key Features:
- Factories for every kind (boolean, number, integer, string, timestamp,
  array, record, object, literal, union)
- Immutable modifiers (default, optional, nullable, min, max,
  convert_string, distinct)
- Plain predicate rules with optional failure messages
- Fail-fast by default, opt-in collect-all accumulation
- Human-readable type descriptions

Usage:
    from shapeguard.validation import object, string, integer, ValidationError

    User = object({"name": string(is_not_empty), "age": integer().min(0)})
    try:
        user = User.parse(payload, "user")
    except ValidationError as e:
        log.warning("bad_payload", error=str(e))
"""

from .rules import (
    UNDEFINED,
    Rule,
    RuleFailure,
    fail_with,
    is_not_empty,
    is_valid_timestamp,
    is_array_distinct,
    is_safe_integer,
    is_string_record,
    try_parse_date,
)

from .nodes import (
    SchemaNode,
    BaseNode,
    BooleanNode,
    NumberNode,
    StringNode,
    ArrayNode,
    RecordNode,
    ObjectNode,
    LiteralNode,
    UnionNode,
    ImplicitObjectNode,
)

from .errors import (
    ValidationMode,
    ValidationError,
    ValidationErrorDetail,
    SchemaDefinitionError,
)

from .describe import describe

from .builder import (
    Schema,
    boolean,
    number,
    integer,
    string,
    timestamp,
    array,
    record,
    object,
    literal,
    union,
)

__all__ = [
    # Rules
    "UNDEFINED",
    "Rule",
    "RuleFailure",
    "fail_with",
    "is_not_empty",
    "is_valid_timestamp",
    "is_array_distinct",
    "is_safe_integer",
    "is_string_record",
    "try_parse_date",
    # Nodes
    "SchemaNode",
    "BaseNode",
    "BooleanNode",
    "NumberNode",
    "StringNode",
    "ArrayNode",
    "RecordNode",
    "ObjectNode",
    "LiteralNode",
    "UnionNode",
    "ImplicitObjectNode",
    # Errors
    "ValidationMode",
    "ValidationError",
    "ValidationErrorDetail",
    "SchemaDefinitionError",
    # Builders
    "Schema",
    "describe",
    "boolean",
    "number",
    "integer",
    "string",
    "timestamp",
    "array",
    "record",
    "object",
    "literal",
    "union",
]
