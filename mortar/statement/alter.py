"""ALTER TABLE statements.

Every alteration is its own category; the present ones are joined with
``, `` after the table name, and a trailing ``FIRST`` / ``AFTER col``
attaches to the last alteration::

    db.alter("tbl_fields").add({"hide": {"type": "enum", "values": ["yes", "no"]}})
    # ALTER TABLE `sym_fields` ADD COLUMN `hide` enum('yes', 'no') NOT NULL
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mortar.compile.definitions import ColumnDefinitionBuilder, KeyDefinitionBuilder
from mortar.errors import StatementError
from mortar.schema.definitions import ColumnDefinition, KeyDefinition
from mortar.schema.kinds import KeyKind, StatementKind
from mortar.statement.base import Category, Statement, require_mapping

if TYPE_CHECKING:
    from mortar.database import Database

_HEAD = frozenset({"statement", "table"})
_POSITION = frozenset({"first", "after"})


def _as_list(value: str | list[str]) -> list[str]:
    return [value] if isinstance(value, str) else list(value)


class Alter(Statement):
    """An ``ALTER TABLE`` statement over one table."""

    KIND = StatementKind.ALTER
    STRUCTURE = (
        Category("statement"),
        Category("table"),
        Category("add_columns", separator=", "),
        Category("drop_columns", separator=", "),
        Category("change_columns", separator=", "),
        Category("add_key", separator=", "),
        Category("drop_key", separator=", "),
        Category("add_index", separator=", "),
        Category("drop_index", separator=", "),
        Category("add_primary_key", separator=", "),
        Category("drop_primary_key"),
        Category("first"),
        Category("after"),
    )
    SINGLETONS = frozenset({"statement", "table", "drop_primary_key", "first", "after"})
    REQUIRED = frozenset({"statement", "table"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self._collate: str | None = None
        self._columns = ColumnDefinitionBuilder(self._norm)
        self._keys = KeyDefinitionBuilder(self._norm)
        self.append("statement", "ALTER TABLE")
        self.append("table", self._norm.table(table))

    def collate(self, collate: str) -> Alter:
        """Collation for textual columns added or changed afterwards."""
        self._collate = collate
        return self

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def _column_sql(self, name: str, options: Any) -> str:
        definition = ColumnDefinition.describe(name, options)
        return self._columns.build(definition, self._collate)

    def add(self, columns: Mapping[str, Any]) -> Alter:
        for name, options in require_mapping(columns, "column definition map").items():
            self.append("add_columns", f"ADD COLUMN {self._column_sql(name, options)}")
        return self

    def drop(self, columns: str | list[str]) -> Alter:
        for column in _as_list(columns):
            self.append("drop_columns", f"DROP COLUMN {self._norm.tick(column)}")
        return self

    def change(self, old_columns: str | list[str], new_columns: Mapping[str, Any]) -> Alter:
        """Rename and redefine columns, pairing ``old_columns`` with ``new_columns`` in order.

        Raises:
            StatementError: If the two sides differ in length.
        """
        new_columns = require_mapping(new_columns, "column definition map")
        old_columns = _as_list(old_columns)
        if len(old_columns) != len(new_columns):
            raise StatementError(
                "change() needs one new definition per old column.",
                details={"old": old_columns, "new": list(new_columns)},
            )
        for old, (name, options) in zip(old_columns, new_columns.items()):
            self.append(
                "change_columns",
                f"CHANGE COLUMN {self._norm.tick(old)} {self._column_sql(name, options)}",
            )
        return self

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _add_keys(self, category: str, keys: Any, kind: KeyKind) -> Alter:
        if isinstance(keys, str):
            keys = {keys: kind.value}
        for name, options in require_mapping(keys, "key definition map").items():
            definition = KeyDefinition.describe(name, options)
            self.append(category, self._keys.build(definition, "ADD"))
        return self

    def add_key(self, keys: str | Mapping[str, Any]) -> Alter:
        return self._add_keys("add_key", keys, KeyKind.KEY)

    def add_index(self, keys: str | Mapping[str, Any]) -> Alter:
        return self._add_keys("add_index", keys, KeyKind.INDEX)

    def add_primary_key(self, keys: str | Mapping[str, Any]) -> Alter:
        return self._add_keys("add_primary_key", keys, KeyKind.PRIMARY)

    def drop_key(self, keys: str | list[str]) -> Alter:
        for key in _as_list(keys):
            self.append("drop_key", f"DROP KEY {self._norm.tick(key)}")
        return self

    def drop_index(self, keys: str | list[str]) -> Alter:
        for key in _as_list(keys):
            self.append("drop_index", f"DROP INDEX {self._norm.tick(key)}")
        return self

    def drop_primary_key(self) -> Alter:
        return self.append("drop_primary_key", "DROP PRIMARY KEY")

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    def first(self) -> Alter:
        return self.append("first", "FIRST")

    def after(self, column: str) -> Alter:
        return self.append("after", f"AFTER {self._norm.tick(column)}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _extra_violations(self) -> list[str]:
        violations = []
        alterations = [
            c.name for c in self.STRUCTURE if c.name not in _HEAD | _POSITION
        ]
        if not any(self.contains(name) for name in alterations):
            violations.append("at least one alteration is required")
        if self.contains("first") and self.contains("after"):
            violations.append("'first' and 'after' are exclusive")
        return violations

    def _join_categories(self, rendered: list[tuple[Category, str]]) -> str:
        head = [sql for c, sql in rendered if c.name in _HEAD]
        body = [sql for c, sql in rendered if c.name not in _HEAD | _POSITION]
        position = [sql for c, sql in rendered if c.name in _POSITION]
        sql = " ".join(head)
        if body:
            sql += " " + ", ".join(body)
        if position:
            sql += " " + " ".join(position)
        return sql
