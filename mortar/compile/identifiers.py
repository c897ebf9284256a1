"""Identifier and value normalization.

``Normalizer`` owns the three decisions every builder needs before it can
emit a fragment: how a table name maps to its physical name, how an
identifier is quoted, and whether a value is bound, referenced or inlined.

Quoting examples (MySQL dialect)::

    tick("a.b")            -> `a`.`b`
    tick("e.*")            -> `e`.*
    tick("COUNT(*)")       -> COUNT(*)
    tick("SUM(total)")     -> SUM(`total`)
    tick("sortorder - 1")  -> `sortorder` - 1
    tick("s.id AS sid")    -> `s`.`id` AS `sid`
"""
from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from mortar.compile.base import SQLDialect
from mortar.compile.context import StatementContext
from mortar.errors import ValueTypeError

#: Python types bound as parameters without conversion.
SCALAR_TYPES: tuple[type, ...] = (
    str,
    int,
    float,
    bool,
    Decimal,
    bytes,
    date,
    datetime,
    time,
    type(None),
)

_FUNCTION = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\((.*)\)$", re.DOTALL)
_ALIAS = re.compile(r"^(.+?)\s+AS\s+([^\s]+)$", re.IGNORECASE | re.DOTALL)
_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")
_ARITHMETIC_OPERATORS = frozenset("+-*/%")
_PARAMETER_CHARS = re.compile(r"[^A-Za-z0-9_]+")


def is_scalar(value: Any) -> bool:
    """Return True when ``value`` can be bound as a single parameter."""
    return isinstance(value, SCALAR_TYPES)


def _split_top_level(value: str, separator: str) -> list[str]:
    """Split ``value`` on ``separator`` outside of parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in value:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _split_arithmetic(value: str) -> list[str]:
    """Split ``a - 1`` into ``['a', '-', '1']`` at parenthesis depth 0.

    Operators only count when surrounded by whitespace, so hyphenated or
    starred names (``e.*``) are left alone.
    """
    tokens: list[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif (
            depth == 0
            and ch in _ARITHMETIC_OPERATORS
            and 0 < i < len(value) - 1
            and value[i - 1].isspace()
            and value[i + 1].isspace()
        ):
            tokens.append(value[start:i].strip())
            tokens.append(ch)
            start = i + 1
        i += 1
    tokens.append(value[start:].strip())
    return tokens


class Normalizer:
    """Quotes identifiers and resolves table prefixes for one context.

    Args:
        ctx: The statement context (dialect + settings).
    """

    def __init__(self, ctx: StatementContext) -> None:
        self._ctx = ctx
        logical = re.escape(ctx.logical_prefix)
        self._prefix_pattern = re.compile(rf"(?<![A-Za-z0-9_]){logical}(?=[A-Za-z0-9_])")

    @property
    def dialect(self) -> SQLDialect:
        return self._ctx.dialect

    # ------------------------------------------------------------------
    # Table names
    # ------------------------------------------------------------------

    def replace_table_prefix(self, name: str) -> str:
        """Substitute the physical prefix for every logical prefix in ``name``."""
        if not isinstance(name, str):
            raise ValueTypeError(name, "table name")
        if self._ctx.table_prefix == self._ctx.logical_prefix:
            return name
        return self._prefix_pattern.sub(self._ctx.table_prefix, name)

    def table(self, name: str, alias: str | None = None) -> str:
        """Return ``name`` prefixed and quoted, with an optional alias."""
        table_sql = self.tick(self.replace_table_prefix(name))
        if alias:
            return f"{table_sql} AS {self.tick(alias)}"
        return table_sql

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def column(self, name: str) -> str:
        """Return a prefixed and quoted column reference."""
        return self.tick(self.replace_table_prefix(name))

    def tick(self, value: str) -> str:
        """Quote an identifier expression.

        Raises:
            ValueTypeError: If ``value`` is not a non-empty string.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueTypeError(value, "column name")
        value = value.strip()
        if value == "*" or _NUMBER.match(value):
            return value

        alias = _ALIAS.match(value)
        if alias:
            return f"{self.tick(alias.group(1))} AS {self.tick(alias.group(2))}"

        tokens = _split_arithmetic(value)
        if len(tokens) > 1:
            return " ".join(
                tok if tok in _ARITHMETIC_OPERATORS else self.tick(tok) for tok in tokens
            )

        function = _FUNCTION.match(value)
        if function:
            name, args = function.group(1), function.group(2)
            if not args.strip():
                return f"{name}()"
            args_sql = ", ".join(self.tick(a) for a in _split_top_level(args, ","))
            return f"{name}({args_sql})"

        quote = self._ctx.dialect.quote_identifier
        return ".".join(seg if seg == "*" else quote(seg) for seg in value.split("."))

    def tick_list(self, values: list[str]) -> str:
        """Quote each identifier and join them with ``, ``."""
        return ", ".join(self.tick(v) for v in values)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    @staticmethod
    def parameter_name(column: str) -> str:
        """Derive a placeholder name from a column: ``f1.date`` -> ``f1_date``."""
        name = _PARAMETER_CHARS.sub("_", str(column))
        return name or "param"
