"""Build context value object.

Packages the ``(dialect, settings)`` pair that every statement, normalizer
and clause builder needs into a single read-only object.
"""
from __future__ import annotations

from dataclasses import dataclass

from mortar.compile.base import SQLDialect
from mortar.settings import DatabaseSettings


@dataclass(frozen=True)
class StatementContext:
    """Immutable context shared by all statements of one Database.

    Attributes:
        dialect: Dialect-specific quoting and placeholder rules.
        settings: Process-wide configuration (table prefix, hints).
    """

    dialect: SQLDialect
    settings: DatabaseSettings

    @property
    def table_prefix(self) -> str:
        return self.settings.table_prefix

    @property
    def logical_prefix(self) -> str:
        return self.settings.logical_prefix
