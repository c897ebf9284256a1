"""Unit tests for CREATE TABLE, SHOW, OPTIMIZE and TRUNCATE."""
from __future__ import annotations

import pytest

from mortar.database import Database
from mortar.errors import StatementError, StructureError, ValueTypeError
from mortar.schema.kinds import ShowKind

# ---------------------------------------------------------------------------
# CREATE TABLE
# ---------------------------------------------------------------------------


def test_create_table(db):
    create = (
        db.create("tbl_authors")
        .if_not_exists()
        .fields({"id": {"type": "int(11)", "auto": True}, "username": "varchar(20)"})
        .keys({"id": "primary", "username": "unique"})
        .engine("InnoDB")
        .charset("utf8")
        .collate("utf8_unicode_ci")
    )
    compiled = create.compile()
    assert compiled.sql == (
        "CREATE TABLE IF NOT EXISTS `sym_authors` ("
        "`id` int(11) unsigned NOT NULL AUTO_INCREMENT, "
        "`username` varchar(20) NOT NULL, "
        "PRIMARY KEY (`id`), UNIQUE KEY `username` (`username`)"
        ") ENGINE=InnoDB DEFAULT CHARSET=utf8 COLLATE=utf8_unicode_ci"
    )
    assert compiled.params == {}
    assert compiled.kind == "CREATE"


def test_create_without_keys(db):
    assert db.create("tbl_cache").fields({"hash": "char(32)"}).compile().sql == (
        "CREATE TABLE `sym_cache` (`hash` char(32) NOT NULL)"
    )


def test_collate_before_fields_reaches_textual_columns(db):
    create = db.create("tbl_cache").collate("utf8_bin").fields({"hash": "char(32)", "n": "int"})
    assert create.generate_sql() == (
        "CREATE TABLE `sym_cache` (`hash` char(32) COLLATE utf8_bin NOT NULL, "
        "`n` int unsigned NOT NULL) COLLATE=utf8_bin"
    )


def test_configured_collation_is_the_fallback(make_settings):
    db = Database(settings=make_settings(collation="utf8mb4_unicode_ci"))
    create = db.create("tbl_cache").fields({"hash": "char(32)"})
    assert create.generate_sql() == (
        "CREATE TABLE `sym_cache` (`hash` char(32) COLLATE utf8mb4_unicode_ci NOT NULL)"
    )


def test_create_needs_fields(db):
    with pytest.raises(StructureError) as exc:
        db.create("tbl_cache").engine("MyISAM").compile()
    assert exc.value.violations == ["'fields' is required"]


def test_fields_and_keys_must_be_mappings(db):
    with pytest.raises(ValueTypeError):
        db.create("tbl_cache").fields("id")
    with pytest.raises(ValueTypeError):
        db.create("tbl_cache").keys(["id"])


# ---------------------------------------------------------------------------
# SHOW
# ---------------------------------------------------------------------------


def test_show_tables(db):
    assert db.show().compile().sql == "SHOW TABLES"


def test_show_tables_like_uses_physical_prefix(db):
    compiled = db.show().like("tbl_entries_data_%").compile()
    assert compiled.sql == "SHOW TABLES LIKE ?"
    assert compiled.params == {0: "sym_entries_data_%"}
    assert compiled.bind_params() == ["sym_entries_data_%"]


def test_show_like_value_precedes_where_values(db):
    compiled = db.show().where({"Name": {"in": ["a", "b"]}}).like("tbl_%").compile()
    assert compiled.sql == "SHOW TABLES LIKE ? WHERE `Name` IN (?, ?)"
    assert compiled.bind_params() == ["sym_%", "a", "b"]


def test_show_columns_with_where(db):
    compiled = db.show(ShowKind.COLUMNS).from_("tbl_entries").where({"Field": "id"}).compile()
    assert compiled.sql == "SHOW COLUMNS FROM `sym_entries` WHERE `Field` = :Field"
    assert compiled.params == {"Field": "id"}


def test_show_kind_is_case_insensitive(db):
    assert db.show("index").from_("tbl_entries").compile().sql == (
        "SHOW INDEX FROM `sym_entries`"
    )


def test_show_columns_needs_a_table(db):
    with pytest.raises(StructureError) as exc:
        db.show("columns").compile()
    assert exc.value.violations == ["SHOW COLUMNS needs a table"]


def test_show_rejects_unknown_kind(db):
    with pytest.raises(StatementError) as exc:
        db.show("databases")
    assert exc.value.details["allowed"] == ["TABLES", "COLUMNS", "INDEX"]


# ---------------------------------------------------------------------------
# OPTIMIZE / TRUNCATE
# ---------------------------------------------------------------------------


def test_optimize(db):
    compiled = db.optimize("tbl_entries").compile()
    assert compiled.sql == "OPTIMIZE TABLE `sym_entries`"
    assert compiled.kind == "OPTIMIZE"


def test_truncate(db):
    compiled = db.truncate("tbl_cache").compile()
    assert compiled.sql == "TRUNCATE TABLE `sym_cache`"
    assert compiled.kind == "TRUNCATE"
