"""Entry queries.

``EntryQuery`` selects from ``tbl_entries AS e`` and joins attribute data
tables (``tbl_entries_data_<id> AS f<id>``) on demand, at most once per
attribute.  System fields are filtered and sorted through the ``FILTERS``
and ``SORTS`` registries; attributes through their adapters::

    (EntryQuery(db)
        .section(4)
        .filter("system:creation-date", ["2018-03"])
        .filter(FieldAdapter(12), ["news"])
        .sort(FieldAdapter(12), "desc"))
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from mortar.compile.registry import ActionRegistry
from mortar.entity.adapters import FieldAdapter, group, non_empty, parse_operator
from mortar.entity.base import EntityQuery
from mortar.entity.dates import DateFilterParser, is_negated, strip_not
from mortar.errors import StatementError
from mortar.schema.conditions import ColumnRef, Compare
from mortar.schema.kinds import ComparisonOp, JoinKind, LogicalOp, SortDirection

if TYPE_CHECKING:
    from mortar.database import Database

logger = logging.getLogger(__name__)

#: System field filters: ``(query, values, operator) -> None``.
FILTERS = ActionRegistry("filter")

#: System field sorts: ``(query, direction) -> None``.
SORTS = ActionRegistry("sort")


class EntryQuery(EntityQuery):
    """Entries of one or more sections."""

    TABLE = "tbl_entries"
    ALIAS = "e"

    #: Attribute data tables: ``tbl_entries_data_<field id>``.
    DATA_TABLE = "tbl_entries_data_{}"

    def __init__(self, db: Database, projection: list[str] | str | None = None) -> None:
        super().__init__(db, projection)
        self._section_id: int | None = None
        self._joined_fields: set[int] = set()

    @property
    def section_id(self) -> int | None:
        """The section given to :meth:`section`, if any."""
        return self._section_id

    def section(self, section_id: int) -> EntryQuery:
        self._section_id = section_id
        return self._where_column("section_id", section_id)

    def entry(self, entry_id: int) -> EntryQuery:
        return self._where_column("id", entry_id)

    def entries(self, entry_ids: Iterable[int]) -> EntryQuery:
        return self._where_columns_in("id", entry_ids)

    # ------------------------------------------------------------------
    # Attribute joins
    # ------------------------------------------------------------------

    @staticmethod
    def field_alias(field_id: int) -> str:
        return f"f{field_id}"

    def _join_field(self, kind: JoinKind, field_id: int | str) -> EntryQuery:
        try:
            field_id = int(field_id)
        except (TypeError, ValueError):
            raise StatementError(
                f"Field ids must be integers, got {field_id!r}.",
                details={"field_id": repr(field_id)},
            ) from None
        if field_id in self._joined_fields:
            return self
        alias = self.field_alias(field_id)
        self._join(kind, self.DATA_TABLE.format(field_id), alias)
        self.on(Compare(column=self.column("id"), value=ColumnRef(name=f"{alias}.entry_id")))
        self._joined_fields.add(field_id)
        logger.debug("Joined data table of field %s as %s (%s)", field_id, alias, kind.value)
        return self

    def join_field(self, field_id: int) -> EntryQuery:
        return self._join_field(JoinKind.JOIN, field_id)

    def inner_join_field(self, field_id: int) -> EntryQuery:
        return self._join_field(JoinKind.INNER, field_id)

    def left_join_field(self, field_id: int) -> EntryQuery:
        return self._join_field(JoinKind.LEFT, field_id)

    def right_join_field(self, field_id: int) -> EntryQuery:
        return self._join_field(JoinKind.RIGHT, field_id)

    def outer_join_field(self, field_id: int) -> EntryQuery:
        return self._join_field(JoinKind.OUTER, field_id)

    def where_field(self, field_id: int, conditions: Any) -> EntryQuery:
        """Left join the attribute table, then add ``conditions``."""
        self.left_join_field(field_id)
        return self.where(conditions)

    # ------------------------------------------------------------------
    # Filtering and sorting
    # ------------------------------------------------------------------

    def filter(
        self,
        target: str | FieldAdapter,
        values: Iterable[Any],
        operator: str | LogicalOp = LogicalOp.OR,
    ) -> EntryQuery:
        """Filter on a system field (``system:id``) or an attribute adapter.

        Raises:
            StatementError: On an unknown system field or operator.
        """
        if isinstance(target, FieldAdapter):
            return target.filter(self, values, operator)
        FILTERS.require(target)(self, values, parse_operator(operator))
        return self

    def sort(
        self,
        target: str | FieldAdapter,
        direction: str | SortDirection = SortDirection.ASC,
    ) -> EntryQuery:
        """Sort on a system field or an attribute adapter.

        ``RAND`` / ``RANDOM`` orders randomly whatever the target.

        Raises:
            StatementError: On an unknown target or direction.
        """
        if isinstance(target, FieldAdapter):
            return target.sort(self, direction)
        handler = SORTS.require(target)
        parsed = SortDirection.parse(direction)
        if parsed is None:
            raise StatementError(
                f"Invalid sort direction {direction!r} for '{target}'.",
                details={"target": target, "direction": repr(direction)},
            )
        handler(self, parsed)
        return self


# ---------------------------------------------------------------------------
# System fields
# ---------------------------------------------------------------------------


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


@FILTERS.register("system:id")
def _filter_system_id(query: EntryQuery, values: Any, operator: LogicalOp) -> None:
    values = non_empty(values)
    negated = is_negated(values)
    ids = [i for i in (_to_int(strip_not(v)) for v in values) if i]
    if not ids:
        return
    op = ComparisonOp.NE if negated else ComparisonOp.EQ
    terms = [Compare(column=query.column("id"), op=op, value=i) for i in ids]
    query.where(group(terms, LogicalOp.AND if negated else operator))


def _filter_system_date(column: str):
    def handler(query: EntryQuery, values: Any, operator: LogicalOp) -> None:
        parser = DateFilterParser(query.column(column))
        terms, negated = parser.terms(non_empty(values))
        if terms:
            query.where(group(terms, LogicalOp.AND if negated else operator))

    return handler


FILTERS.register("system:creation-date")(_filter_system_date("creation_date_gmt"))
FILTERS.register("system:modification-date")(_filter_system_date("modification_date_gmt"))


def _sort_system(column: str):
    def handler(query: EntryQuery, direction: SortDirection) -> None:
        query.order_by(query.column(column), direction)

    return handler


SORTS.register("system:id")(_sort_system("id"))
SORTS.register("system:creation-date")(_sort_system("creation_date_gmt"))
SORTS.register("system:modification-date")(_sort_system("modification_date_gmt"))
