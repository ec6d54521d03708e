"""Tests for the command catalog table."""

from __future__ import annotations

from kvgate.gateway.catalog import CATALOG, iter_operations, lookup
from kvgate.models.arguments import SCHEMAS
from kvgate.models.results import ShapeTag

EXPECTED_TOOLS = [
    "set", "get", "delete", "list",
    "hset", "hget", "hgetall", "hdel",
    "sadd", "srem", "smembers",
    "zadd", "zrange", "zrem",
    "json_set", "json_get",
]


def test_catalog_lists_every_tool_in_order():
    assert [op.name for op in iter_operations()] == EXPECTED_TOOLS


def test_every_row_has_a_schema():
    assert set(CATALOG) == set(SCHEMAS)


def test_every_row_has_a_description():
    assert all(op.description for op in iter_operations())


def test_lookup_unknown_is_none():
    assert lookup("flushall") is None


class TestInputSchemas:
    def test_required_fields_declared(self):
        schema = lookup("hset").input_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["key", "field", "value"]

    def test_aliases_used_for_property_names(self):
        props = lookup("zrange").input_schema()["properties"]
        assert "withScores" in props
        assert "with_scores" not in props

    def test_optional_pattern_not_required(self):
        schema = lookup("list").input_schema()
        assert "pattern" in schema["properties"]
        assert "required" not in schema

    def test_delete_key_accepts_string_or_array(self):
        key_schema = lookup("delete").input_schema()["properties"]["key"]
        types = {option["type"] for option in key_schema["anyOf"]}
        assert types == {"string", "array"}


def test_zrange_shape_depends_on_with_scores():
    op = lookup("zrange")
    plain = op.arguments.model_validate({"key": "z", "start": 0, "stop": 1})
    scored = op.arguments.model_validate({"key": "z", "start": 0, "stop": 1, "withScores": True})
    assert op.resolve_shape(plain) is ShapeTag.SEQUENCE
    assert op.resolve_shape(scored) is ShapeTag.SCORED_SEQUENCE
