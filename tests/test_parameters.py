"""Unit tests for the ordered parameter accumulator."""
from __future__ import annotations

import pytest

from mortar.compile.mysql import MySQLDialect
from mortar.compile.parameters import ParameterMap, count_placeholders
from mortar.errors import StatementError, StructureError


@pytest.fixture()
def params() -> ParameterMap:
    return ParameterMap(MySQLDialect())


def test_named_keys_are_suffixed(params):
    assert params.bind("x", 1) == ":x"
    assert params.bind("x", 2) == ":x2"
    assert params.bind("x", 3) == ":x3"
    assert params.values == {"x": 1, "x2": 2, "x3": 3}


def test_values_keep_bind_order(params):
    for name in ("b", "a", "c"):
        params.bind(name, name)
    assert list(params.values) == ["b", "a", "c"]


def test_values_is_a_copy(params):
    params.bind("x", 1)
    params.values["x"] = 2
    assert params.values == {"x": 1}


def test_use_placeholders_on_empty_map(params):
    assert params.use_placeholders()
    assert params.bind("x", 1) == "?"
    assert params.bind("x", 2) == "?"
    assert params.values == {0: 1, 1: 2}


def test_use_placeholders_refused_after_named(params):
    params.bind("x", 1)
    assert not params.use_placeholders()
    assert params.bind("y", 2) == ":y"


def test_positional_after_named_raises(params):
    params.bind("x", 1)
    with pytest.raises(StatementError):
        params.bind_positional(2)


def test_merge_rebinds_named_values(params):
    params.bind("value", "parent")
    sql = params.merge({"value": "child"}, "SELECT 1 WHERE `value` = :value")
    assert sql == "SELECT 1 WHERE `value` = :value2"
    assert params.values == {"value": "parent", "value2": "child"}


def test_merge_positional_into_named(params):
    params.bind("x", 0)
    sql = params.merge({0: 1, 1: 2}, "`id` IN (?, ?)")
    assert sql == "`id` IN (:param, :param2)"
    assert params.values == {"x": 0, "param": 1, "param2": 2}


def test_merge_positional_into_positional(params):
    params.use_placeholders()
    params.bind("x", 0)
    assert params.merge({0: 1}, "`id` = ?") == "`id` = ?"
    assert params.values == {0: 0, 1: 1}


def test_merge_ignores_tokens_inside_quotes(params):
    sql = params.merge({"a": 1}, "`x:y` = ':z' AND `a` = :a")
    assert sql == "`x:y` = ':z' AND `a` = :a"


def test_merge_with_missing_value_raises(params):
    with pytest.raises(StructureError):
        params.merge({}, "`a` = :a")


def test_merge_with_unused_value_raises(params):
    with pytest.raises(StructureError):
        params.merge({"a": 1, "b": 2}, "`a` = :a")


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT 1", 0),
        ("`x` = :x AND `y` = :y2", 2),
        ("`id` IN (?, ?, ?)", 3),
        ("`a:b` = ':c' AND `d` = '?'", 0),
        ("`x` = 'it''s' AND `y` = :y", 1),
    ],
)
def test_count_placeholders(sql, expected):
    assert count_placeholders(sql) == expected


def test_take_pending_hands_out_keys_once(params):
    params.bind("x", 1)
    params.bind("y", 2)
    assert params.take_pending() == ["x", "y"]
    assert params.take_pending() == []
    params.bind("x", 3)
    assert params.take_pending() == ["x2"]


def test_ordered_renumbers_positional_values(params):
    params.use_placeholders()
    for value in ("a", "b", "c"):
        params.bind("x", value)
    assert params.ordered([2, 0]) == {0: "c", 1: "a", 2: "b"}


def test_ordered_keeps_named_keys(params):
    params.bind("x", 1)
    params.bind("y", 2)
    assert list(params.ordered(["y"]).items()) == [("y", 2), ("x", 1)]
