"""Constants shared by the condition models and the statement builders.

This module defines the allowable key sets used when lowering the mapping
form of a condition tree, and the tags carried by statements, joins, sorts
and key definitions.
"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Statement kinds
# ---------------------------------------------------------------------------


class StatementKind(str, Enum):
    """The statement family a builder produces."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ALTER = "ALTER"
    CREATE = "CREATE"
    SHOW = "SHOW"
    OPTIMIZE = "OPTIMIZE"
    TRUNCATE = "TRUNCATE"


# ---------------------------------------------------------------------------
# Condition operators
# ---------------------------------------------------------------------------


class ComparisonOp(str, Enum):
    """Binary comparison operators, in lookup priority order."""

    LT = "<"
    GT = ">"
    EQ = "="
    LTE = "<="
    GTE = ">="
    NE = "!="
    LIKE = "like"
    REGEXP = "regexp"

    @property
    def sql(self) -> str:
        return self.value.upper()


class LogicalOp(str, Enum):
    """Logical grouping keys."""

    AND = "and"
    OR = "or"


#: Keys recognised as a single-entry operand map.
IN_KEYS = frozenset({"in", "notin"})
BETWEEN_KEY = "between"
LIST_KEY = ","

#: Lookup order when scanning an operator map (first match wins).
COMPARISON_PRIORITY: tuple[str, ...] = tuple(op.value for op in ComparisonOp)


# ---------------------------------------------------------------------------
# Joins, sorts and keys
# ---------------------------------------------------------------------------


class JoinKind(str, Enum):
    """SQL join keywords."""

    JOIN = "JOIN"
    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    OUTER = "OUTER JOIN"


class SortDirection(str, Enum):
    """Sort directions accepted by ``order_by`` and entity ``sort``."""

    ASC = "ASC"
    DESC = "DESC"
    RAND = "RAND"

    @classmethod
    def parse(cls, value: str | SortDirection) -> SortDirection | None:
        """Return the direction for ``value`` (case-insensitive) or ``None``."""
        if isinstance(value, SortDirection):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().upper()
        if normalized == "RANDOM":
            return cls.RAND
        try:
            return cls(normalized)
        except ValueError:
            return None


class ShowKind(str, Enum):
    """What a SHOW statement lists."""

    TABLES = "TABLES"
    COLUMNS = "COLUMNS"
    INDEX = "INDEX"


class KeyKind(str, Enum):
    """Index definition tags."""

    KEY = "key"
    INDEX = "index"
    UNIQUE = "unique"
    PRIMARY = "primary"
    FULLTEXT = "fulltext"
