"""mortar - SQL statement construction for a CMS data layer.

Build Statements. Don't Concatenate Them.

Public API
----------
``Database``
    Hands out statement builders bound to one dialect and configuration,
    and passes compiled statements to an executor.

Statement builders
------------------
``Query``, ``SubQuery``, ``Insert``, ``Update``, ``Delete``, ``Alter``,
``Create``, ``Show``, ``Optimize`` and ``Truncate``.

Entity queries
--------------
``EntryQuery``, ``FieldQuery``, ``PageQuery``, ``SectionQuery`` with the
``FieldAdapter`` / ``DateFieldAdapter`` attribute adapters.

Usage::

    import sqlite3
    from mortar import Database, DatabaseSettings, connection_executor

    db = Database(
        settings=DatabaseSettings(table_prefix="sym_", query_cache_hint=False),
        executor=connection_executor(sqlite3.connect("cms.db")),
    )
    rows = (
        db.select(["id", "name"])
        .from_("tbl_sections")
        .where({"hidden": "no"})
        .order_by({"sortorder": "ASC"})
        .execute()
        .rows()
    )
"""

from __future__ import annotations

import logging

from mortar.compile.base import CompiledSQL, SQLDialect
from mortar.compile.mysql import MySQLDialect
from mortar.compile.registry import ActionRegistry, StatementFactory
from mortar.database import Database, QueryLog, connection_executor
from mortar.entity import (
    DateFieldAdapter,
    EntryQuery,
    FieldAdapter,
    FieldQuery,
    PageQuery,
    SectionQuery,
)
from mortar.errors import (
    ConditionError,
    DefinitionError,
    MortarError,
    StatementError,
    StructureError,
    ValueTypeError,
)
from mortar.results import QueryResult, StatementResult
from mortar.schema import (
    AllOf,
    And,
    Assignment,
    Between,
    ColumnDefinition,
    ColumnRef,
    Compare,
    ComparisonOp,
    ConditionList,
    FunctionCall,
    In,
    JoinKind,
    KeyDefinition,
    KeyKind,
    Or,
    ShowKind,
    SortDirection,
    StatementKind,
    to_condition,
)
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

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Register built-in statements with StatementFactory
# ---------------------------------------------------------------------------

StatementFactory.register_class(StatementKind.SELECT, Query)
StatementFactory.register_class(StatementKind.INSERT, Insert)
StatementFactory.register_class(StatementKind.UPDATE, Update)
StatementFactory.register_class(StatementKind.DELETE, Delete)
StatementFactory.register_class(StatementKind.ALTER, Alter)
StatementFactory.register_class(StatementKind.CREATE, Create)
StatementFactory.register_class(StatementKind.SHOW, Show)
StatementFactory.register_class(StatementKind.OPTIMIZE, Optimize)
StatementFactory.register_class(StatementKind.TRUNCATE, Truncate)

__all__ = [
    # Facade
    "Database",
    "DatabaseSettings",
    "QueryLog",
    "connection_executor",
    "get_settings",
    # Statements
    "Statement",
    "Query",
    "SubQuery",
    "Insert",
    "Update",
    "Delete",
    "Alter",
    "Create",
    "Show",
    "Optimize",
    "Truncate",
    "StatementFactory",
    "ActionRegistry",
    # Entity queries
    "EntryQuery",
    "FieldQuery",
    "PageQuery",
    "SectionQuery",
    "FieldAdapter",
    "DateFieldAdapter",
    # Conditions and definitions
    "AllOf",
    "And",
    "Assignment",
    "Between",
    "ColumnRef",
    "Compare",
    "ConditionList",
    "FunctionCall",
    "In",
    "Or",
    "to_condition",
    "ColumnDefinition",
    "KeyDefinition",
    # Enums
    "ComparisonOp",
    "JoinKind",
    "KeyKind",
    "ShowKind",
    "SortDirection",
    "StatementKind",
    # Compilation
    "CompiledSQL",
    "SQLDialect",
    "MySQLDialect",
    # Results
    "StatementResult",
    "QueryResult",
    # Errors
    "MortarError",
    "StatementError",
    "StructureError",
    "ConditionError",
    "ValueTypeError",
    "DefinitionError",
]
