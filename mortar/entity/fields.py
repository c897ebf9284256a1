"""Field (attribute schema) queries over ``tbl_fields AS f``."""
from __future__ import annotations

from collections.abc import Iterable

from mortar.entity.base import EntityQuery


class FieldQuery(EntityQuery):
    TABLE = "tbl_fields"
    ALIAS = "f"

    def section(self, section_id: int) -> FieldQuery:
        """Fields belonging to ``section_id``."""
        return self._where_column("parent_section", section_id)

    def field(self, field_id: int) -> FieldQuery:
        return self._where_column("id", field_id)

    def fields(self, field_ids: Iterable[int]) -> FieldQuery:
        return self._where_columns_in("id", field_ids)

    def type(self, field_type: str) -> FieldQuery:
        return self._where_column("type", field_type)

    def location(self, location: str) -> FieldQuery:
        """Fields shown in ``location`` (``main`` or ``sidebar``)."""
        return self._where_column("location", location)
