"""Single-table maintenance statements: OPTIMIZE and TRUNCATE."""
from __future__ import annotations

from typing import TYPE_CHECKING

from mortar.schema.kinds import StatementKind
from mortar.statement.base import Category, Statement

if TYPE_CHECKING:
    from mortar.database import Database


class _TableStatement(Statement):
    """``<VERB> TABLE t`` over exactly one table."""

    VERB = ""
    STRUCTURE = (Category("statement"), Category("table"))
    SINGLETONS = frozenset({"statement", "table"})
    REQUIRED = frozenset({"statement", "table"})

    def __init__(self, db: Database, table: str) -> None:
        super().__init__(db)
        self.append("statement", f"{self.VERB} TABLE")
        self.append("table", self._norm.table(table))


class Optimize(_TableStatement):
    KIND = StatementKind.OPTIMIZE
    VERB = "OPTIMIZE"


class Truncate(_TableStatement):
    KIND = StatementKind.TRUNCATE
    VERB = "TRUNCATE"
