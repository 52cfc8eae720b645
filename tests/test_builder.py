"""Tests for schema construction and modifiers."""
import dataclasses
import re

import pytest

from shapeguard import (
    Schema,
    SchemaDefinitionError,
    ValidationError,
    array,
    is_safe_integer,
    is_valid_timestamp,
    integer,
    number,
    object,
    record,
    string,
    timestamp,
    union,
)
from shapeguard.validation import ImplicitObjectNode, NumberNode, ObjectNode, StringNode


class TestImmutability:
    """Modifiers return new schemas and never touch the receiver."""

    def test_modifier_returns_new_schema(self):
        base = number()
        bounded = base.min(1)
        assert bounded is not base
        assert base.node.min_value is None
        assert base.node.bounds == ()
        assert bounded.node.min_value == 1

    def test_shared_child_is_unaffected(self):
        name = string()
        user = object({"name": name})
        name.optional()
        with pytest.raises(ValidationError, match="Bad input.name: undefined"):
            user.parse({})

    def test_nodes_are_frozen(self):
        node = string().node
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.optional = True

    def test_object_fields_are_read_only(self):
        fields = object({"a": string()}).node.fields
        with pytest.raises(TypeError):
            fields["b"] = string().node

    def test_shape_mapping_is_copied(self):
        shape = {"a": string()}
        schema = object(shape)
        shape["b"] = number()
        assert list(schema.node.fields) == ["a"]


class TestFactories:
    """Test node construction."""

    def test_object_wraps_nodes(self):
        node = object({"a": string(), "b": {"c": number()}, "d": 1}).node
        assert isinstance(node, ObjectNode)
        assert isinstance(node.fields["a"], StringNode)
        assert isinstance(node.fields["b"], ImplicitObjectNode)
        assert node.fields["d"] == 1

    def test_integer_prepends_safe_integer_rule(self):
        rule = lambda v: True
        node = integer(rule).node
        assert isinstance(node, NumberNode)
        assert node.rules == (is_safe_integer, rule)

    def test_timestamp_prepends_timestamp_rule(self):
        assert timestamp().node.rules == (is_valid_timestamp,)
        assert timestamp().parse("2024-01-15T10:30:00.000Z") == "2024-01-15T10:30:00.000Z"
        with pytest.raises(ValidationError, match="must be a valid timestamp"):
            timestamp().parse("2024-01-15T10:30:00Z")

    def test_string_mixes_rules_and_patterns(self):
        schema = string(r"[a-z]+", lambda s: len(s) < 4)
        assert len(schema.node.rules) == 2
        assert schema.parse("abc") == "abc"
        with pytest.raises(ValidationError, match=r"^Bad input: abcd$"):
            schema.parse("abcd")

    def test_union_accepts_plain_mapping(self):
        schema = union({"kind": string()}, number())
        assert schema.parse({"kind": "a"}) == {"kind": "a"}
        assert schema.parse(4) == 4

    def test_default_and_node_property(self):
        schema = string().default("x")
        assert schema.node.default == "x"
        assert isinstance(schema, Schema)


class TestDefinitionErrors:
    """Invalid schemas fail at construction time."""

    @pytest.mark.parametrize("build, message", [
        (lambda: string().min(1), "min() is not supported on string schemas"),
        (lambda: string().max(1), "max() is not supported on string schemas"),
        (lambda: array(string()).convert_string(), "convert_string() is not supported on Array<string> schemas"),
        (lambda: number().distinct(), "distinct() is not supported on number schemas"),
        (lambda: number().min("1"), "min() expects a number"),
        (lambda: number().max(True), "max() expects a number"),
        (lambda: object([]), "object shape must be a plain mapping"),
        (lambda: object(string()), "object shape must be a plain mapping"),
        (lambda: array(1), "array item must be a schema or a plain mapping"),
        (lambda: record(string(), "x"), "record value must be a schema or a plain mapping"),
        (lambda: union(string(), None), "union rhs must be a schema or a plain mapping"),
    ])
    def test_rejected(self, build, message):
        with pytest.raises(SchemaDefinitionError, match=re.escape(message)):
            build()

    def test_is_a_type_error(self):
        with pytest.raises(TypeError):
            number().distinct()

    def test_non_string_record_key_is_a_parse_failure(self):
        schema = record(number(), string())
        with pytest.raises(ValidationError, match="only string-keyed objects are supported"):
            schema.parse({})
