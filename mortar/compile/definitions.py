"""DDL fragment builders.

Classes
-------
ColumnDefinitionBuilder  - `` `name` type [options] `` for CREATE / ALTER
KeyDefinitionBuilder     - ``[ADD ]KEY `name` (`a`, `b`)`` and friends

DDL cannot carry bound parameters, so defaults and enum values are inlined
through the dialect's literal quoting.
"""
from __future__ import annotations

import logging
import re

from mortar.compile.identifiers import Normalizer
from mortar.schema.definitions import ColumnDefinition, KeyDefinition
from mortar.schema.kinds import KeyKind

logger = logging.getLogger(__name__)

STRING_TYPES = ("varchar", "char", "text", "tinytext", "mediumtext", "longtext")
ENUM_TYPES = ("enum", "set")
INTEGER_TYPES = ("int", "tinyint", "smallint", "mediumint", "bigint", "integer")
NUMERIC_TYPES = ("decimal", "float", "double", "numeric", "real")
TEMPORAL_TYPES = ("datetime", "date", "timestamp", "time", "year")

_BASE_TYPE = re.compile(r"^\s*([a-z]+)")


def type_family(sql_type: str) -> str | None:
    """Return the family of ``sql_type`` (``'int(11)'`` -> ``'integer'``)."""
    match = _BASE_TYPE.match(sql_type.lower())
    if not match:
        return None
    base = match.group(1)
    if base in STRING_TYPES:
        return "string"
    if base in ENUM_TYPES:
        return "enum"
    if base in INTEGER_TYPES:
        return "integer"
    if base in NUMERIC_TYPES:
        return "numeric"
    if base in TEMPORAL_TYPES:
        return "temporal"
    return None


class ColumnDefinitionBuilder:
    """Renders a :class:`ColumnDefinition` to a column clause."""

    def __init__(self, normalizer: Normalizer) -> None:
        self._norm = normalizer

    def build(self, definition: ColumnDefinition, default_collate: str | None = None) -> str:
        """Return `` `name` type [options] ``.

        Args:
            definition: The column to render.
            default_collate: Collation applied to textual columns that do not
                name their own.
        """
        parts = [self._norm.tick(definition.name), definition.type.lower()]
        family = type_family(definition.type)

        if family == "enum":
            parts[-1] = self._enum_type(definition)
        if family in ("string", "enum"):
            collate = definition.collate or default_collate
            if collate:
                parts.append(f"COLLATE {collate}")
        elif family in ("integer", "numeric"):
            if not definition.signed:
                parts.append("unsigned")
        elif family is None:
            logger.warning(
                "Column '%s' has unrecognised type '%s'; emitting it undecorated",
                definition.name,
                definition.type,
            )
            return " ".join(parts)

        parts.extend(self._nullability(definition))
        if family == "integer" and definition.auto:
            parts.append("AUTO_INCREMENT")
        return " ".join(parts)

    def _enum_type(self, definition: ColumnDefinition) -> str:
        base = _BASE_TYPE.match(definition.type.lower()).group(1)
        if not definition.values:
            return definition.type.lower()
        quote = self._norm.dialect.quote_literal
        return f"{base}({', '.join(quote(v) for v in definition.values)})"

    def _nullability(self, definition: ColumnDefinition) -> list[str]:
        if definition.null:
            return ["DEFAULT NULL"]
        parts = ["NOT NULL"]
        if definition.default is not None:
            parts.append(f"DEFAULT {self._norm.dialect.quote_literal(definition.default)}")
        return parts


class KeyDefinitionBuilder:
    """Renders a :class:`KeyDefinition` to an index clause."""

    _KEYWORDS = {
        KeyKind.KEY: "KEY",
        KeyKind.INDEX: "INDEX",
        KeyKind.UNIQUE: "UNIQUE KEY",
        KeyKind.FULLTEXT: "FULLTEXT KEY",
    }

    def __init__(self, normalizer: Normalizer) -> None:
        self._norm = normalizer

    def build(self, definition: KeyDefinition, operation: str | None = None) -> str:
        """Return ``[OPERATION ]KEY `name` (`a`, `b`)``.

        Primary keys carry no name: ``PRIMARY KEY (`id`)``.
        """
        columns = self._norm.tick_list(definition.columns)
        if definition.kind is KeyKind.PRIMARY:
            sql = f"PRIMARY KEY ({columns})"
        else:
            keyword = self._KEYWORDS[definition.kind]
            sql = f"{keyword} {self._norm.tick(definition.name)} ({columns})"
        if operation:
            return f"{operation.upper()} {sql}"
        return sql
