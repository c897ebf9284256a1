"""Page queries over ``tbl_pages AS p``."""
from __future__ import annotations

from collections.abc import Iterable

from mortar.entity.base import EntityQuery


class PageQuery(EntityQuery):
    TABLE = "tbl_pages"
    ALIAS = "p"

    def page(self, page_id: int) -> PageQuery:
        return self._where_column("id", page_id)

    def pages(self, page_ids: Iterable[int]) -> PageQuery:
        return self._where_columns_in("id", page_ids)

    def handle(self, handle: str) -> PageQuery:
        return self._where_column("handle", handle)

    def path(self, path: str | None) -> PageQuery:
        """Pages under ``path``; ``None`` selects top level pages."""
        return self._where_column("path", path)

    def parent(self, parent_id: int | None) -> PageQuery:
        """Children of ``parent_id``; ``None`` selects top level pages."""
        return self._where_column("parent", parent_id)
