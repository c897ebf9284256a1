"""Dialect abstractions: CompiledSQL and the SQLDialect ABC.

The statement builders never hard-code quoting characters or placeholder
syntax; they ask the injected ``SQLDialect`` (Strategy pattern).  Only the
MySQL-like family is implemented (see :mod:`mortar.compile.mysql`).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful build: SQL text and its bound values.

    The two must be handed to the driver together; executing ``sql`` with
    any other value map yields a mismatched-parameter error.

    Attributes:
        sql: The generated SQL string with placeholders.
        params: Ordered ``{key: value}`` map; insertion order is placeholder order.
        kind: The statement family (``'SELECT'``, ``'INSERT'``, ...).
    """

    sql: str
    params: dict[str | int, Any]
    kind: str

    @property
    def positional(self) -> bool:
        """True when the SQL uses positional ``?`` placeholders."""
        return any(isinstance(k, int) for k in self.params)

    def bind_params(self) -> list[Any] | dict[str, Any]:
        """Return params in the shape a DB-API driver expects.

        Returns:
            A list in placeholder order for positional statements, otherwise a dict
            keyed by parameter name.
        """
        if self.positional:
            return list(self.params.values())
        return {str(k): v for k, v in self.params.items()}


class SQLDialect(ABC):
    """Abstract base for dialect-specific quoting and placeholder rules."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'mysql'``)."""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier segment (no dots).

        Returns:
            Quoted identifier.
        """

    @abstractmethod
    def param_placeholder(self, name: str) -> str:
        """Return the SQL placeholder string for a named parameter."""

    @abstractmethod
    def positional_placeholder(self) -> str:
        """Return the SQL placeholder string for a positional parameter."""

    @abstractmethod
    def quote_literal(self, value: Any) -> str:
        """Return ``value`` as an inline SQL literal.

        Only used where the grammar forbids parameters (DDL defaults and
        enum value lists).
        """

    @abstractmethod
    def random_function(self) -> str:
        """Return the random-ordering function call."""
