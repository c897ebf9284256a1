"""mortar entity queries: entries, fields, pages and sections."""
from mortar.entity.adapters import DateFieldAdapter, FieldAdapter
from mortar.entity.base import EntityQuery
from mortar.entity.dates import DateFilterParser, Period, parse_period
from mortar.entity.entries import FILTERS, SORTS, EntryQuery
from mortar.entity.fields import FieldQuery
from mortar.entity.pages import PageQuery
from mortar.entity.sections import SectionQuery

__all__ = [
    "FILTERS",
    "SORTS",
    "DateFieldAdapter",
    "DateFilterParser",
    "EntityQuery",
    "EntryQuery",
    "FieldAdapter",
    "FieldQuery",
    "PageQuery",
    "Period",
    "SectionQuery",
    "parse_period",
]
