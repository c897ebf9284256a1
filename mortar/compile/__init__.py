"""mortar compile layer: dialect, normalizer, parameters and clause builders."""
from mortar.compile.base import CompiledSQL, SQLDialect
from mortar.compile.conditions import ConditionBuilder
from mortar.compile.context import StatementContext
from mortar.compile.definitions import ColumnDefinitionBuilder, KeyDefinitionBuilder
from mortar.compile.identifiers import Normalizer
from mortar.compile.mysql import MySQLDialect
from mortar.compile.parameters import ParameterMap
from mortar.compile.registry import ActionRegistry, StatementFactory

__all__ = [
    "ActionRegistry",
    "ColumnDefinitionBuilder",
    "CompiledSQL",
    "ConditionBuilder",
    "KeyDefinitionBuilder",
    "MySQLDialect",
    "Normalizer",
    "ParameterMap",
    "SQLDialect",
    "StatementContext",
    "StatementFactory",
]
