"""UPDATE statements."""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mortar.schema.kinds import StatementKind
from mortar.statement.base import Category, Statement, non_negative_int

if TYPE_CHECKING:
    from mortar.database import Database


class Update(Statement):
    """``UPDATE t SET a = :a[, ...] [WHERE ...] [LIMIT n]``.

    ``$``-prefixed values are column expressions, not literals::

        db.update("tbl_sections").set({"sortorder": "$sortorder - 1"})
        # UPDATE `sym_sections` SET `sortorder` = `sortorder` - 1
    """

    KIND = StatementKind.UPDATE
    STRUCTURE = (
        Category("statement"),
        Category("table"),
        Category("values", prefix="SET ", separator=", "),
        Category("where", prefix="WHERE ", separator=" AND "),
        Category("limit", prefix="LIMIT "),
    )
    SINGLETONS = frozenset({"statement", "table", "limit"})
    REQUIRED = frozenset({"statement", "table", "values"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self.append("statement", "UPDATE")
        self.append("table", self._norm.table(table))

    def set(self, values: Mapping[str, Any]) -> Update:
        """Assign ``{column: value}``; repeated calls extend the SET list."""
        return self.append("values", self.build_assignments(values))

    def where(self, conditions: Any) -> Update:
        return self.append("where", self.build_conditions(conditions))

    def limit(self, limit: int) -> Update:
        return self.append("limit", str(non_negative_int(limit, "LIMIT")))
