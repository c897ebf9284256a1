"""Attribute adapters for entry queries.

An adapter knows how one attribute's data table is filtered and sorted.
Filtering and sorting join the attribute table (``f<id>``) on demand::

    FieldAdapter(4).filter(query, ["news", "sports"])
    # LEFT JOIN `tbl_entries_data_4` AS `f4` ON `e`.`id` = `f4`.`entry_id`
    # WHERE (`f4`.`value` = :f4_value OR `f4`.`value` = :f4_value2)

Filter values:

* ``value``             exact match
* ``not: value``        negates the whole filter (every value ``!=``, AND-joined)
* ``regexp: pattern``   ``REGEXP`` match
* ``sql: null``         ``IS NULL``; ``sql: not null`` gives ``IS NOT NULL``
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from mortar.entity.dates import DateFilterParser, is_negated, strip_not
from mortar.errors import StatementError
from mortar.schema.conditions import And, Compare, Condition, Or
from mortar.schema.kinds import ComparisonOp, LogicalOp, SortDirection

if TYPE_CHECKING:
    from mortar.entity.entries import EntryQuery

logger = logging.getLogger(__name__)

REGEXP_PREFIX = "regexp:"
SQL_PREFIX = "sql:"


def parse_operator(operator: str | LogicalOp) -> LogicalOp:
    """Return the logical operator joining several filter values.

    Raises:
        StatementError: If ``operator`` is neither ``or`` nor ``and``.
    """
    try:
        return LogicalOp(operator.lower() if isinstance(operator, str) else operator)
    except ValueError:
        raise StatementError(
            f"Filter operator must be 'or' or 'and', got {operator!r}.",
            details={"operator": repr(operator)},
        ) from None


def group(terms: list[Condition], operator: LogicalOp) -> Condition:
    if operator is LogicalOp.AND:
        return And(children=terms)
    return Or(children=terms)


def non_empty(values: Any) -> list[Any]:
    """Return ``values`` as a list without ``None`` and blank strings."""
    if isinstance(values, (str, int, float)) or values is None:
        values = [values]
    return [v for v in values if v is not None and str(v).strip() != ""]


class FieldAdapter:
    """Filters and sorts on one column of an attribute's data table.

    Args:
        field_id: The attribute id; its table is ``tbl_entries_data_<id>``.
        column: The data table column holding the value.
    """

    def __init__(self, field_id: int, column: str = "value") -> None:
        self.field_id = field_id
        self.column = column

    def __repr__(self) -> str:
        return f"{type(self).__name__}(field_id={self.field_id!r}, column={self.column!r})"

    @property
    def alias(self) -> str:
        return f"f{self.field_id}"

    @property
    def qualified_column(self) -> str:
        return f"{self.alias}.{self.column}"

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def _term(self, value: Any) -> Condition:
        column = self.qualified_column
        if isinstance(value, str):
            text = value.strip()
            lowered = text.lower()
            if lowered.startswith(REGEXP_PREFIX):
                pattern = text[len(REGEXP_PREFIX):].strip()
                return Compare(column=column, op=ComparisonOp.REGEXP, value=pattern)
            if lowered.startswith(SQL_PREFIX):
                keyword = lowered[len(SQL_PREFIX):].strip()
                if keyword == "null":
                    return Compare(column=column, op=ComparisonOp.EQ, value=None)
                if keyword == "not null":
                    return Compare(column=column, op=ComparisonOp.NE, value=None)
        return Compare(column=column, op=ComparisonOp.EQ, value=value)

    def conditions(
        self, values: Iterable[Any], operator: str | LogicalOp = LogicalOp.OR
    ) -> Condition | None:
        """Lower filter values to one grouped condition, or ``None`` if all are empty."""
        op = parse_operator(operator)
        values = non_empty(values)
        if not values:
            return None
        if is_negated(values):
            column = self.qualified_column
            terms = [
                Compare(column=column, op=ComparisonOp.NE, value=strip_not(v))
                for v in values
            ]
            return group(terms, LogicalOp.AND)
        return group([self._term(v) for v in values], op)

    def filter(
        self, query: EntryQuery, values: Iterable[Any], operator: str | LogicalOp = LogicalOp.OR
    ) -> EntryQuery:
        """Join the attribute table and restrict ``query`` to matching entries."""
        condition = self.conditions(values, operator)
        if condition is None:
            logger.debug("Ignoring empty filter on field %s", self.field_id)
            return query
        return query.where_field(self.field_id, condition)

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def sort(
        self, query: EntryQuery, direction: str | SortDirection = SortDirection.ASC
    ) -> EntryQuery:
        """Order ``query`` by this attribute; random order needs no join.

        Raises:
            StatementError: On an unknown direction.
        """
        parsed = SortDirection.parse(direction)
        if parsed is None:
            raise StatementError(
                f"Invalid sort direction {direction!r} for field {self.field_id}.",
                details={"field_id": self.field_id, "direction": repr(direction)},
            )
        if parsed is SortDirection.RAND:
            return query.order_by(self.qualified_column, parsed)
        query.left_join_field(self.field_id)
        return query.order_by(self.qualified_column, parsed)


class DateFieldAdapter(FieldAdapter):
    """Filters a timestamp column with the textual date filters.

    A single resulting term is applied as is; several are grouped.
    """

    def __init__(self, field_id: int, column: str = "date") -> None:
        super().__init__(field_id, column)

    def conditions(
        self, values: Iterable[Any], operator: str | LogicalOp = LogicalOp.OR
    ) -> Condition | None:
        op = parse_operator(operator)
        terms, negated = DateFilterParser(self.qualified_column).terms(non_empty(values))
        if not terms:
            return None
        if len(terms) == 1:
            return terms[0]
        return group(terms, LogicalOp.AND if negated else op)
