"""Unit tests for INSERT, UPDATE and DELETE."""
from __future__ import annotations

import pytest

from mortar.database import Database
from mortar.errors import StatementError, StructureError, ValueTypeError


@pytest.fixture()
def prefixed_db(make_settings) -> Database:
    return Database(settings=make_settings(table_prefix="prefix_"))


# ---------------------------------------------------------------------------
# INSERT
# ---------------------------------------------------------------------------


def test_insert_binds_each_column(prefixed_db):
    compiled = prefixed_db.insert("tbl_widgets").values({"x": 1, "y": "TEST", "z": True}).compile()
    assert compiled.sql == "INSERT INTO `prefix_widgets` (`x`, `y`, `z`) VALUES (:x, :y, :z)"
    assert compiled.params == {"x": 1, "y": "TEST", "z": True}
    assert compiled.kind == "INSERT"


def test_insert_update_on_duplicate_key(db):
    insert = db.insert("tbl_insert").values({"x": 1, "y": None, "z": "a"})
    insert.update_on_duplicate_key()
    assert insert.compile().sql == (
        "INSERT INTO `sym_insert` (`x`, `y`, `z`) VALUES (:x, :y, :z) "
        "ON DUPLICATE KEY UPDATE `x` = VALUES(`x`), `y` = VALUES(`y`), `z` = VALUES(`z`)"
    )
    assert insert.get_values() == {"x": 1, "y": None, "z": "a"}


def test_insert_without_values_is_a_violation(db):
    with pytest.raises(StructureError) as exc:
        db.insert("tbl_insert").compile()
    assert exc.value.violations == ["'columns' is required", "'values' is required"]


@pytest.mark.parametrize("values", [{}, [("x", 1)], None])
def test_insert_rejects_non_mappings(db, values):
    with pytest.raises(StatementError):
        db.insert("tbl_insert").values(values)


def test_insert_rejects_unbindable_values(db):
    with pytest.raises(ValueTypeError):
        db.insert("tbl_insert").values({"x": [1, 2]})


def test_update_on_duplicate_key_needs_values(db):
    with pytest.raises(StatementError):
        db.insert("tbl_insert").update_on_duplicate_key()


# ---------------------------------------------------------------------------
# UPDATE
# ---------------------------------------------------------------------------


def test_update_with_where_and_limit(db):
    compiled = (
        db.update("tbl_sections")
        .set({"name": "News", "hidden": None})
        .where({"id": 4})
        .limit(1)
        .compile()
    )
    assert compiled.sql == (
        "UPDATE `sym_sections` SET `name` = :name, `hidden` = :hidden "
        "WHERE `id` = :id LIMIT 1"
    )
    assert compiled.params == {"name": "News", "hidden": None, "id": 4}


def test_update_column_expression(db):
    compiled = (
        db.update("tbl_sections")
        .set({"sortorder": "$sortorder - 1"})
        .where({"sortorder": {">": 3}})
        .compile()
    )
    assert compiled.sql == (
        "UPDATE `sym_sections` SET `sortorder` = `sortorder` - 1 "
        "WHERE `sortorder` > :sortorder"
    )
    assert compiled.params == {"sortorder": 3}


def test_update_repeated_set_extends_list(db):
    update = db.update("tbl_sections").set({"a": 1}).set({"a": 2})
    assert update.generate_sql() == "UPDATE `sym_sections` SET `a` = :a, `a` = :a2"


def test_update_without_set_is_a_violation(db):
    with pytest.raises(StructureError) as exc:
        db.update("tbl_sections").where({"id": 1}).compile()
    assert exc.value.violations == ["'values' is required"]


# ---------------------------------------------------------------------------
# DELETE
# ---------------------------------------------------------------------------


def test_delete_with_condition(prefixed_db):
    compiled = prefixed_db.delete("tbl_widgets").where({"x": 1}).compile()
    assert compiled.sql == "DELETE FROM `prefix_widgets` WHERE `x` = :x"
    assert compiled.params == {"x": 1}


def test_delete_without_prefix(db):
    assert db.delete("delete").where({"x": 1}).compile().sql == (
        "DELETE FROM `delete` WHERE `x` = :x"
    )


def test_delete_everything_with_limit(db):
    assert db.delete("tbl_cache").limit(5).compile().sql == "DELETE FROM `sym_cache` LIMIT 5"


def test_delete_in_list(db):
    compiled = db.delete("tbl_entries").where({"id": {"in": [7, 8]}}).compile()
    assert compiled.sql == "DELETE FROM `sym_entries` WHERE `id` IN (?, ?)"
    assert compiled.params == {0: 7, 1: 8}


def test_update_values_follow_placeholder_order(db):
    compiled = db.update("tbl_t").where({"id": {"in": [1, 2]}}).set({"a": 7}).compile()
    assert compiled.sql == "UPDATE `sym_t` SET `a` = ? WHERE `id` IN (?, ?)"
    assert compiled.params == {0: 7, 1: 1, 2: 2}
    assert compiled.bind_params() == [7, 1, 2]
