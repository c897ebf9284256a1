"""MySQL dialect."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from mortar.compile.base import SQLDialect
from mortar.errors import ValueTypeError


class MySQLDialect(SQLDialect):
    """Quoting and placeholder rules for MySQL / MariaDB.

    Parameter style: ``:name`` for named parameters and ``?`` for positional
    ones, the two forms accepted by PDO-like drivers.

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.
    """

    _LITERAL_ESCAPES = {
        "\\": "\\\\",
        "\0": "\\0",
        "\n": "\\n",
        "\r": "\\r",
        "\x1a": "\\Z",
        "'": "\\'",
    }

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def param_placeholder(self, name: str) -> str:
        return f":{name}"

    def positional_placeholder(self) -> str:
        return "?"

    def quote_literal(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        if isinstance(value, datetime):
            value = value.strftime("%Y-%m-%d %H:%M:%S")
        elif isinstance(value, (date, time)):
            value = value.isoformat()
        if not isinstance(value, str):
            raise ValueTypeError(value, "literal")
        escaped = "".join(self._LITERAL_ESCAPES.get(ch, ch) for ch in value)
        return f"'{escaped}'"

    def random_function(self) -> str:
        return "RAND()"
