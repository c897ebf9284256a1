"""Unit tests for column and key definitions and their DDL fragments."""
from __future__ import annotations

import logging

import pytest

from mortar.compile.definitions import (
    ColumnDefinitionBuilder,
    KeyDefinitionBuilder,
    type_family,
)
from mortar.errors import DefinitionError, ValueTypeError
from mortar.schema.definitions import ColumnDefinition, KeyDefinition
from mortar.schema.kinds import KeyKind


@pytest.fixture()
def columns(normalizer) -> ColumnDefinitionBuilder:
    return ColumnDefinitionBuilder(normalizer)


@pytest.fixture()
def keys(normalizer) -> KeyDefinitionBuilder:
    return KeyDefinitionBuilder(normalizer)


def _column(columns, name, options, collate=None):
    return columns.build(ColumnDefinition.describe(name, options), collate)


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


def test_describe_from_type_string():
    definition = ColumnDefinition.describe("title", "varchar(255)")
    assert definition.type == "varchar(255)"
    assert not definition.null
    assert not definition.signed


def test_describe_requires_type():
    with pytest.raises(DefinitionError) as exc:
        ColumnDefinition.describe("title", {"null": True})
    assert exc.value.details == {"name": "title"}


def test_describe_rejects_unknown_options():
    with pytest.raises(DefinitionError):
        ColumnDefinition.describe("title", {"type": "int", "length": 3})


def test_describe_rejects_other_shapes():
    with pytest.raises(ValueTypeError):
        ColumnDefinition.describe("title", 12)


def test_key_describe_defaults_columns_to_name():
    key = KeyDefinition.describe("handle", "UNIQUE")
    assert key.kind is KeyKind.UNIQUE
    assert key.columns == ["handle"]


def test_key_describe_rejects_unknown_kind():
    with pytest.raises(DefinitionError):
        KeyDefinition.describe("geo", "spatial")


@pytest.mark.parametrize(
    ("sql_type", "family"),
    [
        ("int(11)", "integer"),
        ("BIGINT", "integer"),
        ("decimal(5,2)", "numeric"),
        ("varchar(255)", "string"),
        ("enum", "enum"),
        ("datetime", "temporal"),
        ("point", None),
    ],
)
def test_type_family(sql_type, family):
    assert type_family(sql_type) == family


# ---------------------------------------------------------------------------
# Column fragments
# ---------------------------------------------------------------------------


def test_auto_increment_integer(columns):
    assert _column(columns, "id", {"type": "int(11)", "auto": True}) == (
        "`id` int(11) unsigned NOT NULL AUTO_INCREMENT"
    )


def test_signed_nullable_numeric(columns):
    assert _column(columns, "score", {"type": "decimal(5,2)", "signed": True, "null": True}) == (
        "`score` decimal(5,2) DEFAULT NULL"
    )


def test_string_with_default_collation(columns):
    assert _column(columns, "title", "VARCHAR(255)", "utf8_unicode_ci") == (
        "`title` varchar(255) COLLATE utf8_unicode_ci NOT NULL"
    )


def test_own_collation_wins(columns):
    options = {"type": "text", "collate": "utf8mb4_bin"}
    assert _column(columns, "body", options, "utf8_unicode_ci") == (
        "`body` text COLLATE utf8mb4_bin NOT NULL"
    )


def test_enum_values_and_default(columns):
    options = {"type": "enum", "values": ["yes", "no"], "default": "no"}
    assert _column(columns, "hide", options) == "`hide` enum('yes', 'no') NOT NULL DEFAULT 'no'"


def test_default_is_quoted(columns):
    assert _column(columns, "label", {"type": "varchar(20)", "default": "it's"}) == (
        "`label` varchar(20) NOT NULL DEFAULT 'it\\'s'"
    )


def test_auto_ignored_on_non_integers(columns):
    assert _column(columns, "created", {"type": "datetime", "auto": True}) == (
        "`created` datetime NOT NULL"
    )


def test_unknown_type_is_emitted_bare(columns, caplog):
    with caplog.at_level(logging.WARNING, logger="mortar.compile.definitions"):
        assert _column(columns, "shape", "POINT") == "`shape` point"
    assert "unrecognised type" in caplog.text


# ---------------------------------------------------------------------------
# Key fragments
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("name", "options", "expected"),
    [
        ("id", "primary", "PRIMARY KEY (`id`)"),
        ("handle", "unique", "UNIQUE KEY `handle` (`handle`)"),
        ("section", "key", "KEY `section` (`section`)"),
        ("pair", {"type": "index", "cols": ["a", "b"]}, "INDEX `pair` (`a`, `b`)"),
        ("body", {"type": "fulltext"}, "FULLTEXT KEY `body` (`body`)"),
    ],
)
def test_key_fragments(keys, name, options, expected):
    assert keys.build(KeyDefinition.describe(name, options)) == expected


def test_key_operation_prefix(keys):
    key = KeyDefinition.describe("handle", "unique")
    assert keys.build(key, "add") == "ADD UNIQUE KEY `handle` (`handle`)"
