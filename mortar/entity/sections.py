"""Section queries over ``tbl_sections AS s``."""
from __future__ import annotations

from collections.abc import Iterable

from mortar.entity.base import EntityQuery


class SectionQuery(EntityQuery):
    TABLE = "tbl_sections"
    ALIAS = "s"

    def section(self, section_id: int) -> SectionQuery:
        return self._where_column("id", section_id)

    def sections(self, section_ids: Iterable[int]) -> SectionQuery:
        return self._where_columns_in("id", section_ids)

    def handle(self, handle: str) -> SectionQuery:
        return self._where_column("handle", handle)
