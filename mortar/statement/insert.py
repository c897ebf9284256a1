"""INSERT statements."""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mortar.compile.identifiers import is_scalar
from mortar.errors import StatementError, ValueTypeError
from mortar.schema.kinds import StatementKind
from mortar.statement.base import Category, Statement

if TYPE_CHECKING:
    from mortar.database import Database


class Insert(Statement):
    """``INSERT INTO t (cols) VALUES (...) [ON DUPLICATE KEY UPDATE ...]``.

    Every value is bound under its column name::

        db.insert("tbl_sections").values({"name": "Articles", "sortorder": 1})
        # INSERT INTO `sym_sections` (`name`, `sortorder`) VALUES (:name, :sortorder)
    """

    KIND = StatementKind.INSERT
    STRUCTURE = (
        Category("statement"),
        Category("table"),
        Category("columns"),
        Category("values"),
        Category("on_duplicate", prefix="ON DUPLICATE KEY UPDATE "),
    )
    SINGLETONS = frozenset({"statement", "table", "columns", "values", "on_duplicate"})
    REQUIRED = frozenset({"statement", "table", "columns", "values"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self._columns: list[str] = []
        self.append("statement", "INSERT INTO")
        self.append("table", self._norm.table(table))

    def values(self, values: Mapping[str, Any]) -> Insert:
        """Set the inserted row.

        Raises:
            StatementError: If ``values`` is not a non-empty mapping.
            ValueTypeError: If a value cannot be bound.
        """
        if not isinstance(values, Mapping) or not values:
            raise StatementError("INSERT values must be a non-empty mapping.")
        for column, value in values.items():
            if not is_scalar(value):
                raise ValueTypeError(value, f"value for '{column}'")
        self._columns = list(values)
        self.append("columns", f"({self._norm.tick_list(self._columns)})")
        tokens = [self.bind(column, value) for column, value in values.items()]
        self.append("values", f"VALUES ({', '.join(tokens)})")
        return self

    def update_on_duplicate_key(self) -> Insert:
        """Overwrite every inserted column when the row already exists.

        Raises:
            StatementError: If ``values()`` was not called first.
        """
        if not self._columns:
            raise StatementError("update_on_duplicate_key() must follow values().")
        updates = ", ".join(
            f"{tick} = VALUES({tick})" for tick in map(self._norm.tick, self._columns)
        )
        return self.append("on_duplicate", updates)
