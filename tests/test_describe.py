"""Tests for type descriptions."""
import pytest

from shapeguard import (
    array,
    boolean,
    describe,
    integer,
    literal,
    number,
    object,
    record,
    string,
    timestamp,
    union,
)


@pytest.mark.parametrize("schema, expected", [
    (boolean(), "boolean"),
    (number(), "number"),
    (integer(), "number"),
    (string(), "string"),
    (timestamp(), "string"),
    (union(string(), number()), "string | number"),
    (union(union(literal("a"), literal("b")), literal("c")), "'a' | 'b' | 'c'"),
    (array(string()), "Array<string>"),
    (array({"a": string()}), "Array<{ a: string }>"),
    (record(string(), number()), "Record<string, number>"),
    (literal("a"), "'a'"),
    (literal(1), "1"),
    (literal(True), "true"),
    (literal(None), "null"),
    (object({}), "{}"),
    (object({"a": string(), "b": array(number())}), "{ a: string, b: Array<number> }"),
])
def test_describe_kinds(schema, expected):
    assert schema.describe() == expected


def test_implicit_object_leaves():
    schema = object({
        "nested": {"c": number()},
        "arr": [],
        "nothing": None,
        "flag": True,
        "count": 1,
        "name": "x",
    })
    assert describe(schema.node) == (
        "{ nested: { c: number }, arr: any[], nothing: null, flag: boolean, count: number, name: string }"
    )


def test_plain_mapping():
    assert describe({"a": 1, "b": {}}) == "{ a: number, b: {} }"


class TestWrapping:
    """Nullable wraps the base, optional appends a marker."""

    def test_nullable(self):
        assert string().nullable().describe() == "(string | null)"

    def test_optional(self):
        assert string().optional().describe() == "string?"

    def test_both(self):
        assert string().nullable().optional().describe() == "(string | null)?"

    def test_nested(self):
        schema = object({"a": union(string(), number()).optional()})
        assert schema.describe() == "{ a: string | number? }"

    def test_str_and_repr(self):
        schema = array(string().nullable())
        assert str(schema) == "Array<(string | null)>"
        assert repr(schema) == "Schema(Array<(string | null)>)"
