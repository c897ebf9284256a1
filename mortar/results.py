"""Typed result views over a DB-API cursor.

``StatementResult``
    Outcome of a statement that returns no rows (INSERT, UPDATE, DDL).

``QueryResult``
    Row access for SELECT / SHOW.  Rows are read lazily from the cursor and
    returned as dicts keyed by the column names of ``cursor.description``.
"""
from __future__ import annotations

from typing import Any


class StatementResult:
    """The success flag and driver cursor of an executed statement.

    Args:
        success: Whether the driver reported success.
        cursor: The DB-API cursor the statement ran on.
    """

    def __init__(self, success: bool, cursor: Any) -> None:
        self._success = bool(success)
        self._cursor = cursor

    def __bool__(self) -> bool:
        return self._success

    @property
    def cursor(self) -> Any:
        return self._cursor

    def success(self) -> bool:
        return self._success

    @property
    def row_count(self) -> int:
        """Rows affected as reported by the driver (``-1`` when unknown)."""
        return getattr(self._cursor, "rowcount", -1)

    @property
    def last_insert_id(self) -> int | None:
        return getattr(self._cursor, "lastrowid", None)


class QueryResult(StatementResult):
    """Row access for statements that produce a result set."""

    def _columns(self) -> list[str]:
        description = getattr(self._cursor, "description", None) or ()
        return [d[0] for d in description]

    def _as_dict(self, row: Any) -> dict[str, Any]:
        if isinstance(row, dict):
            return row
        return dict(zip(self._columns(), row))

    def next(self) -> dict[str, Any] | None:
        """Return the next row, or ``None`` when the result set is exhausted."""
        row = self._cursor.fetchone()
        if row is None:
            return None
        return self._as_dict(row)

    def rows(self) -> list[dict[str, Any]]:
        """Return every remaining row."""
        return [self._as_dict(row) for row in self._cursor.fetchall()]

    def rows_indexed_by(self, column: str) -> dict[Any, dict[str, Any]]:
        """Return the remaining rows keyed by the value of ``column``."""
        return {row[column]: row for row in self.rows()}

    def column(self, column: str | int) -> list[Any]:
        """Return the values of one column across the remaining rows.

        Args:
            column: Column name, or its position in the projection.
        """
        names = self._columns()
        key = names[column] if isinstance(column, int) else column
        return [row[key] for row in self.rows()]

    def variable(self, column: str | int) -> Any:
        """Return one value of the next row, or ``None`` when there is none."""
        row = self.next()
        if row is None:
            return None
        if isinstance(column, int):
            return list(row.values())[column]
        return row.get(column)
