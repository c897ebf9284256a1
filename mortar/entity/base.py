"""Base class of the entity queries.

An entity query is a SELECT over one fixed table and alias whose helpers
qualify columns with that alias.  Finalizing selects ``alias.*`` and sorts
by ``alias.id`` when nothing else was asked for.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.schema.conditions import Compare, In
from mortar.schema.kinds import SortDirection
from mortar.statement.query import Query

if TYPE_CHECKING:
    from mortar.database import Database


class EntityQuery(Query):
    """A :class:`Query` bound to ``TABLE AS ALIAS``.

    Args:
        db: The database facade.
        projection: Optional columns to select instead of ``alias.*``.
    """

    TABLE: ClassVar[str]
    ALIAS: ClassVar[str]

    def __init__(self, db: Database, projection: list[str] | str | None = None) -> None:
        super().__init__(db, projection)
        self.from_(self.TABLE, self.ALIAS)

    @classmethod
    def bound_to(cls, db: Database, table: str | None = None) -> EntityQuery:
        return cls(db)

    def column(self, name: str) -> str:
        """Qualify ``name`` with the entity alias."""
        return f"{self.ALIAS}.{name}"

    def _where_column(self, column: str, value: Any) -> EntityQuery:
        return self.where(Compare(column=self.column(column), value=value))

    def _where_columns_in(self, column: str, values: Iterable[Any]) -> EntityQuery:
        return self.where(In(column=self.column(column), values=list(values)))

    def sort(
        self, column: str, direction: str | SortDirection = SortDirection.ASC
    ) -> EntityQuery:
        """Order by an alias-qualified column."""
        return self.order_by(self.column(column), direction)

    def finalize(self) -> EntityQuery:
        if not self.contains("projection"):
            self.projection(self.column("*"))
        if not self.contains("order_by"):
            self.order_by(self.column("id"), SortDirection.ASC)
        return self
