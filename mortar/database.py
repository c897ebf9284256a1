"""Database facade.

``Database`` is what application code holds: it owns the build context
(dialect + settings), hands out statement builders and passes compiled
statements to an execution collaborator.  Connection handling stays with
the caller; the executor is any callable ``(sql, params) -> cursor``::

    conn = sqlite3.connect(":memory:")
    db = Database(executor=connection_executor(conn))
    db.insert("tbl_sections").values({"name": "Articles"}).execute()
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mortar.compile.base import SQLDialect
from mortar.compile.context import StatementContext
from mortar.compile.mysql import MySQLDialect
from mortar.compile.registry import StatementFactory
from mortar.errors import MortarError
from mortar.results import StatementResult
from mortar.schema.kinds import ShowKind, StatementKind
from mortar.settings import DatabaseSettings, get_settings
from mortar.statement import (
    Alter,
    Create,
    Delete,
    Insert,
    Optimize,
    Query,
    Show,
    Statement,
    SubQuery,
    Truncate,
    Update,
)

logger = logging.getLogger(__name__)

#: ``(sql, params) -> cursor``; params is a list or a dict (see CompiledSQL).
Executor = Callable[[str, Any], Any]


def connection_executor(connection: Any) -> Executor:
    """Return an executor running statements on a DB-API ``connection``."""

    def execute(sql: str, params: Any) -> Any:
        cursor = connection.cursor()
        cursor.execute(sql, params)
        return cursor

    return execute


@dataclass(frozen=True)
class QueryLog:
    """One executed statement, kept when ``log_queries`` is enabled."""

    query: str
    execution_time: float


class Database:
    """Statement factory and execution hand-off.

    Args:
        settings: Configuration; defaults to the process-wide settings.
        executor: Runs compiled SQL; required only for ``execute``.
        dialect: Quoting rules; defaults to :class:`MySQLDialect`.
    """

    def __init__(
        self,
        settings: DatabaseSettings | None = None,
        executor: Executor | None = None,
        dialect: SQLDialect | None = None,
    ) -> None:
        self.context = StatementContext(
            dialect=dialect or MySQLDialect(),
            settings=settings or get_settings(),
        )
        self._executor = executor
        self._logs: list[QueryLog] = []
        self._last_result: StatementResult | None = None

    @property
    def settings(self) -> DatabaseSettings:
        return self.context.settings

    @property
    def prefix(self) -> str:
        return self.context.table_prefix

    def quote(self, value: Any) -> str:
        """Return ``value`` as an inline SQL literal."""
        return self.context.dialect.quote_literal(value)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def select(self, projection: list[str] | str | None = None) -> Query:
        return Query(self, projection)

    def subquery(self, projection: list[str] | str | None = None) -> SubQuery:
        return SubQuery(self, projection)

    def insert(self, table: str) -> Insert:
        return Insert(self, table)

    def update(self, table: str) -> Update:
        return Update(self, table)

    def delete(self, table: str) -> Delete:
        return Delete(self, table)

    def alter(self, table: str) -> Alter:
        return Alter(self, table)

    def create(self, table: str) -> Create:
        return Create(self, table)

    def show(self, kind: ShowKind | str = ShowKind.TABLES) -> Show:
        return Show(self, kind)

    def optimize(self, table: str) -> Optimize:
        return Optimize(self, table)

    def truncate(self, table: str) -> Truncate:
        return Truncate(self, table)

    def statement(self, kind: StatementKind | str, table: str | None = None) -> Statement:
        """Build a statement of ``kind`` bound to ``table``."""
        return StatementFactory.create(kind, self, table)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, statement: Statement) -> StatementResult:
        """Compile ``statement``, run it and wrap the cursor.

        Driver errors propagate unchanged.

        Raises:
            MortarError: If the database has no executor.
            StructureError: If the statement does not validate.
        """
        if self._executor is None:
            raise MortarError("Cannot execute statements without an executor.")
        compiled = statement.compile()
        logger.debug(
            "Executing %s with %d parameter(s): %s",
            compiled.kind,
            len(compiled.params),
            compiled.sql,
        )
        started = time.perf_counter()
        cursor = self._executor(compiled.sql, compiled.bind_params())
        elapsed = time.perf_counter() - started
        if self.settings.log_queries:
            self._logs.append(QueryLog(query=compiled.sql, execution_time=elapsed))
        result = statement.results(True, cursor)
        self._last_result = result
        return result

    @property
    def last_insert_id(self) -> int | None:
        """Row id produced by the last executed statement, if any."""
        if self._last_result is None:
            return None
        return self._last_result.last_insert_id

    @property
    def logs(self) -> list[QueryLog]:
        return list(self._logs)

    def clear_logs(self) -> None:
        self._logs.clear()
