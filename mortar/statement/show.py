"""SHOW statements."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mortar.errors import StatementError
from mortar.results import QueryResult
from mortar.schema.kinds import ShowKind, StatementKind
from mortar.statement.base import Category, Statement

if TYPE_CHECKING:
    from mortar.database import Database


class Show(Statement):
    """``SHOW TABLES|COLUMNS|INDEX [FROM t] [LIKE ?] [WHERE ...]``.

    The LIKE pattern goes through table prefix substitution, so
    ``like("tbl_entries_data_%")`` matches the physical tables.

    Args:
        db: The database facade.
        kind: What to list; defaults to tables.
    """

    KIND = StatementKind.SHOW
    STRUCTURE = (
        Category("statement"),
        Category("kind"),
        Category("table", prefix="FROM "),
        Category("like", prefix="LIKE "),
        Category("where", prefix="WHERE ", separator=" AND "),
    )
    SINGLETONS = frozenset({"statement", "kind", "table", "like"})
    REQUIRED = frozenset({"statement", "kind"})

    def __init__(self, db: Database, kind: ShowKind | str = ShowKind.TABLES) -> None:
        super().__init__(db)
        try:
            self._kind = ShowKind(kind.upper() if isinstance(kind, str) else kind)
        except ValueError:
            raise StatementError(
                f"Cannot SHOW {kind!r}.",
                details={"kind": repr(kind), "allowed": [k.value for k in ShowKind]},
            ) from None
        self.append("statement", "SHOW")
        self.append("kind", self._kind.value)

    @classmethod
    def bound_to(cls, db: Database, table: str | None = None) -> Show:
        show = cls(db)
        if table is not None:
            show.like(table)
        return show

    def from_(self, table: str) -> Show:
        return self.append("table", self._norm.table(table))

    def like(self, pattern: str) -> Show:
        if not isinstance(pattern, str):
            raise StatementError("LIKE expects a string pattern.")
        self.use_placeholders()
        token = self.bind("like", self._norm.replace_table_prefix(pattern))
        return self.append("like", token)

    def where(self, conditions: Any) -> Show:
        return self.append("where", self.build_conditions(conditions))

    def _extra_violations(self) -> list[str]:
        if self._kind is not ShowKind.TABLES and not self.contains("table"):
            return [f"SHOW {self._kind.value} needs a table"]
        return []

    def results(self, success: bool, cursor: Any) -> QueryResult:
        return QueryResult(success, cursor)
