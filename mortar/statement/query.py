"""SELECT statements.

``Query`` builds ``SELECT [SQL_NO_CACHE] [DISTINCT] projection FROM ...``
with joins, WHERE, GROUP BY, HAVING, ORDER BY, LIMIT and OFFSET.
``SubQuery`` is the same builder without the cache hint, meant to be used
as a value inside another statement's conditions::

    ids = db.subquery(["entry_id"]).from_("tbl_entries_data_4").where({"value": "x"})
    db.select().from_("tbl_entries", "e").where({"e.id": {"in": ids}})
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mortar.errors import StatementError
from mortar.results import QueryResult
from mortar.schema.kinds import JoinKind, SortDirection, StatementKind
from mortar.statement.base import Category, Statement, non_negative_int

if TYPE_CHECKING:
    from mortar.database import Database


class Query(Statement):
    """A SELECT statement.

    Args:
        db: The database facade.
        projection: Optional columns / expressions to select.
    """

    KIND = StatementKind.SELECT
    STRUCTURE = (
        Category("statement"),
        Category("cache"),
        Category("distinct"),
        Category("projection", separator=", "),
        Category("table", prefix="FROM "),
        Category("join"),
        Category("where", prefix="WHERE ", separator=" AND "),
        Category("group_by", prefix="GROUP BY ", separator=", "),
        Category("having", prefix="HAVING ", separator=" AND "),
        Category("order_by", prefix="ORDER BY ", separator=", "),
        Category("limit", prefix="LIMIT "),
        Category("offset", prefix="OFFSET "),
    )
    SINGLETONS = frozenset({"statement", "cache", "distinct", "table", "limit", "offset"})
    REQUIRED = frozenset({"statement", "table"})

    #: Emit ``SQL_NO_CACHE`` when the settings ask for it.
    CACHE_HINT = True

    def __init__(self, db: Database, projection: list[str] | str | None = None) -> None:
        super().__init__(db)
        self._joins_with_on: set[int] = set()
        self.append("statement", "SELECT")
        if self.CACHE_HINT and self._ctx.settings.query_cache_hint:
            self.append("cache", "SQL_NO_CACHE")
        if projection:
            self.projection(projection)

    @classmethod
    def bound_to(cls, db: Database, table: str | None = None) -> Query:
        query = cls(db)
        if table is not None:
            query.from_(table)
        return query

    # ------------------------------------------------------------------
    # SELECT / FROM
    # ------------------------------------------------------------------

    def distinct(self) -> Query:
        return self.append("distinct", "DISTINCT")

    def projection(self, columns: list[str] | str) -> Query:
        """Add columns or expressions to the select list."""
        if isinstance(columns, str):
            columns = [columns]
        for column in columns:
            self.append("projection", self._norm.column(column))
        return self

    def from_(self, table: str, alias: str | None = None) -> Query:
        return self.append("table", self._norm.table(table, alias))

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def _join(self, kind: JoinKind, table: str, alias: str | None) -> Query:
        return self.append("join", f"{kind.value} {self._norm.table(table, alias)}")

    def join(self, table: str, alias: str | None = None) -> Query:
        return self._join(JoinKind.JOIN, table, alias)

    def inner_join(self, table: str, alias: str | None = None) -> Query:
        return self._join(JoinKind.INNER, table, alias)

    def left_join(self, table: str, alias: str | None = None) -> Query:
        return self._join(JoinKind.LEFT, table, alias)

    def right_join(self, table: str, alias: str | None = None) -> Query:
        return self._join(JoinKind.RIGHT, table, alias)

    def outer_join(self, table: str, alias: str | None = None) -> Query:
        return self._join(JoinKind.OUTER, table, alias)

    def on(self, conditions: Any) -> Query:
        """Attach join conditions to the most recent join.

        A second call on the same join AND-joins the conditions.

        Raises:
            StatementError: If no join precedes the call.
        """
        joins = self.parts("join")
        if not joins:
            raise StatementError("on() must follow a join.")
        index = len(joins) - 1
        keyword = "AND" if index in self._joins_with_on else "ON"
        self._replace_last("join", f"{joins[-1]} {keyword} {self.build_conditions(conditions)}")
        self._joins_with_on.add(index)
        return self

    # ------------------------------------------------------------------
    # Filtering and grouping
    # ------------------------------------------------------------------

    def where(self, conditions: Any) -> Query:
        """Add WHERE conditions; repeated calls are AND-joined."""
        return self.append("where", self.build_conditions(conditions))

    def group_by(self, columns: list[str] | str) -> Query:
        if isinstance(columns, str):
            columns = [columns]
        for column in columns:
            self.append("group_by", self._norm.column(column))
        return self

    def having(self, conditions: Any) -> Query:
        return self.append("having", self.build_conditions(conditions))

    # ------------------------------------------------------------------
    # Ordering and paging
    # ------------------------------------------------------------------

    def order_by(
        self,
        columns: Mapping[str, str] | str,
        direction: str | SortDirection = SortDirection.ASC,
    ) -> Query:
        """Append sort terms.

        Args:
            columns: ``{column: direction}`` or a single column name.
            direction: Direction used when ``columns`` is a single name.
                ``RAND`` ignores the column and sorts randomly.

        Raises:
            StatementError: On an unknown direction.
        """
        if isinstance(columns, str):
            columns = {columns: direction}
        for column, value in columns.items():
            parsed = SortDirection.parse(value)
            if parsed is None:
                raise StatementError(
                    f"Invalid sort direction {value!r} for '{column}'.",
                    details={"column": column, "direction": repr(value)},
                )
            if parsed is SortDirection.RAND:
                self.append("order_by", self._ctx.dialect.random_function())
            else:
                self.append("order_by", f"{self._norm.column(column)} {parsed.value}")
        return self

    def limit(self, limit: int) -> Query:
        return self.append("limit", str(non_negative_int(limit, "LIMIT")))

    def offset(self, offset: int) -> Query:
        return self.append("offset", str(non_negative_int(offset, "OFFSET")))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def finalize(self) -> Query:
        """Select ``*`` when no projection was given."""
        if not self.contains("projection"):
            self.append("projection", "*")
        return self

    def results(self, success: bool, cursor: Any) -> QueryResult:
        return QueryResult(success, cursor)


class SubQuery(Query):
    """A SELECT embeddable as a condition value; never carries the cache hint."""

    CACHE_HINT = False
