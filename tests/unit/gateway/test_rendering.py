"""Tests for rendering backend results as text."""

from __future__ import annotations

import json

import pytest

from kvgate.gateway.rendering import RenderContext, format_score, pair_scores, render
from kvgate.models.results import ShapeTag


def _ctx(**kwargs):
    return RenderContext(**kwargs)


class TestScalar:
    def test_present_value_is_verbatim(self):
        ctx = _ctx(fields={"key": "k"}, missing="Key not found: {key}")
        assert render(ShapeTag.SCALAR, "  raw\nvalue ", ctx) == "  raw\nvalue "

    def test_empty_string_is_still_a_value(self):
        ctx = _ctx(fields={"key": "k"}, missing="Key not found: {key}")
        assert render(ShapeTag.SCALAR, "", ctx) == ""

    def test_absent_uses_missing_template(self):
        ctx = _ctx(fields={"key": "k"}, missing="Key not found: {key}")
        assert render(ShapeTag.SCALAR, None, ctx) == "Key not found: k"


class TestMapping:
    def test_empty(self):
        assert render(ShapeTag.MAPPING, {}, _ctx(empty="Hash is empty")) == "Hash is empty"

    def test_lines_follow_backend_order(self):
        text = render(ShapeTag.MAPPING, {"b": "2", "a": "1"}, _ctx())
        assert text == "b: 2\na: 1"


class TestSequence:
    def test_empty(self):
        assert render(ShapeTag.SEQUENCE, [], _ctx(empty="Set is empty")) == "Set is empty"

    def test_newline_joined_in_order(self):
        assert render(ShapeTag.SEQUENCE, ["z", "a"], _ctx()) == "z\na"


class TestScoredSequence:
    def test_flat_reply_is_paired_positionally(self):
        text = render(ShapeTag.SCORED_SEQUENCE, ["a", "1", "b", "2"], _ctx())
        assert text.splitlines() == ["a (score: 1)", "b (score: 2)"]

    def test_tuple_pairs_accepted(self):
        text = render(ShapeTag.SCORED_SEQUENCE, [("a", 1.0), ("b", 2.5)], _ctx())
        assert text.splitlines() == ["a (score: 1)", "b (score: 2.5)"]

    def test_empty(self):
        ctx = _ctx(empty="No members found in range")
        assert render(ShapeTag.SCORED_SEQUENCE, [], ctx) == "No members found in range"

    def test_pair_scores_flat(self):
        assert pair_scores(["x", "-1.5", "y", "3"]) == [("x", "-1.5"), ("y", "3")]

    @pytest.mark.parametrize("score,text", [
        (1.0, "1"), (-2.0, "-2"), (0.5, "0.5"), (1e20, "1e+20"), (3, "3"), ("7", "7"),
    ])
    def test_format_score(self, score, text):
        assert format_score(score) == text


class TestTree:
    def test_pretty_printed_with_two_spaces(self):
        value = {"a": [1, 2], "b": {"c": None}}
        text = render(ShapeTag.TREE, value, _ctx())
        assert text == json.dumps(value, indent=2)
        assert json.loads(text) == value
        assert "\n  " in text

    def test_absent_tree_uses_missing_template(self):
        ctx = _ctx(fields={"key": "doc"}, missing="Key not found: {key}")
        assert render(ShapeTag.TREE, None, ctx) == "Key not found: doc"

    def test_non_ascii_is_kept(self):
        assert render(ShapeTag.TREE, "café", _ctx()) == '"café"'


class TestMessages:
    def test_count_uses_numeral(self):
        ctx = _ctx(fields={"key": "h", "count": 1}, message="Successfully deleted {count} fields from hash {key}")
        assert render(ShapeTag.COUNT, 0, ctx) == "Successfully deleted 1 fields from hash h"

    def test_callable_template(self):
        ctx = _ctx(fields={"n": 3}, message=lambda f: f"n={f['n']}")
        assert render(ShapeTag.CONFIRMATION, None, ctx) == "n=3"
