"""DELETE statements."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mortar.schema.kinds import StatementKind
from mortar.statement.base import Category, Statement, non_negative_int

if TYPE_CHECKING:
    from mortar.database import Database


class Delete(Statement):
    """``DELETE FROM t [WHERE ...] [LIMIT n]``."""

    KIND = StatementKind.DELETE
    STRUCTURE = (
        Category("statement"),
        Category("table"),
        Category("where", prefix="WHERE ", separator=" AND "),
        Category("limit", prefix="LIMIT "),
    )
    SINGLETONS = frozenset({"statement", "table", "limit"})
    REQUIRED = frozenset({"statement", "table"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self.append("statement", "DELETE FROM")
        self.append("table", self._norm.table(table))

    def where(self, conditions: Any) -> Delete:
        return self.append("where", self.build_conditions(conditions))

    def limit(self, limit: int) -> Delete:
        return self.append("limit", str(non_negative_int(limit, "LIMIT")))
