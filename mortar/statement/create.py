"""CREATE TABLE statements."""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mortar.compile.definitions import ColumnDefinitionBuilder, KeyDefinitionBuilder
from mortar.schema.definitions import ColumnDefinition, KeyDefinition
from mortar.schema.kinds import StatementKind
from mortar.statement.base import Category, Statement, require_mapping

if TYPE_CHECKING:
    from mortar.database import Database

_BODY = frozenset({"fields", "keys"})


class Create(Statement):
    """``CREATE TABLE [IF NOT EXISTS] t (columns, keys) [table options]``.

    Textual columns without their own collation use the statement's
    ``collate()`` (set it before ``fields()``), then the configured default::

        db.create("tbl_authors").if_not_exists().fields({
            "id": {"type": "int(11)", "auto": True},
            "username": "varchar(20)",
        }).keys({"id": "primary", "username": "unique"})
    """

    KIND = StatementKind.CREATE
    STRUCTURE = (
        Category("statement"),
        Category("if_not_exists"),
        Category("table"),
        Category("fields", separator=", "),
        Category("keys", separator=", "),
        Category("engine", prefix="ENGINE="),
        Category("charset", prefix="DEFAULT CHARSET="),
        Category("collate", prefix="COLLATE="),
    )
    SINGLETONS = frozenset(
        {"statement", "if_not_exists", "table", "engine", "charset", "collate"}
    )
    REQUIRED = frozenset({"statement", "table", "fields"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self._collate: str | None = None
        self._columns = ColumnDefinitionBuilder(self._norm)
        self._keys = KeyDefinitionBuilder(self._norm)
        self.append("statement", "CREATE TABLE")
        self.append("table", self._norm.table(table))

    def if_not_exists(self) -> Create:
        return self.append("if_not_exists", "IF NOT EXISTS")

    def fields(self, fields: Mapping[str, Any]) -> Create:
        collate = self._collate or self._ctx.settings.collation
        for name, options in require_mapping(fields, "column definition map").items():
            definition = ColumnDefinition.describe(name, options)
            self.append("fields", self._columns.build(definition, collate))
        return self

    def keys(self, keys: Mapping[str, Any]) -> Create:
        for name, options in require_mapping(keys, "key definition map").items():
            self.append("keys", self._keys.build(KeyDefinition.describe(name, options)))
        return self

    def engine(self, engine: str) -> Create:
        return self.append("engine", engine)

    def charset(self, charset: str) -> Create:
        return self.append("charset", charset)

    def collate(self, collate: str) -> Create:
        self._collate = collate
        return self.append("collate", collate)

    def _join_categories(self, rendered: list[tuple[Category, str]]) -> str:
        parts = []
        body = [sql for c, sql in rendered if c.name in _BODY]
        for category, sql in rendered:
            if category.name in _BODY:
                if body:
                    parts.append(f"({', '.join(body)})")
                    body = []
                continue
            parts.append(sql)
        return " ".join(parts)
