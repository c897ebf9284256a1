"""Ordered parameter accumulator.

``ParameterMap`` keeps the bound values of one statement and hands out the
matching placeholder token for each of them.  It remembers the keys bound
since the last fragment was appended, so the statement can return its values
in placeholder order whatever order its methods were called in.  A statement
is either in named mode (``:key``) or in placeholder mode (``?``); the two
never mix.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from mortar.compile.base import SQLDialect
from mortar.errors import StatementError, StructureError

logger = logging.getLogger(__name__)

#: Placeholder tokens outside of quoted identifiers and string literals.
_TOKEN = re.compile(
    r"`(?:[^`]|``)*`"
    r"|'(?:[^'\\]|\\.|'')*'"
    r"|:([A-Za-z0-9_]+)"
    r"|(\?)"
)


def count_placeholders(sql: str) -> int:
    """Return the number of placeholder tokens in ``sql``."""
    return sum(
        1 for m in _TOKEN.finditer(sql) if m.group(1) is not None or m.group(2) is not None
    )


class ParameterMap:
    """Accumulates bound values for a single statement.

    Named keys are made unique by suffixing ``2``, ``3``, ... when the same
    name recurs (a second comparison on ``x`` binds ``x2``).

    Args:
        dialect: Supplies the placeholder syntax.
    """

    def __init__(self, dialect: SQLDialect) -> None:
        self._dialect = dialect
        self._values: dict[str | int, Any] = {}
        self._positional = False
        self._pending: list[str | int] = []

    def __len__(self) -> int:
        return len(self._values)

    @property
    def positional(self) -> bool:
        """True once the statement switched to ``?`` placeholders."""
        return self._positional

    @property
    def values(self) -> dict[str | int, Any]:
        """A copy of the bound values in bind order."""
        return dict(self._values)

    def _has_named(self) -> bool:
        return any(isinstance(k, str) for k in self._values)

    def use_placeholders(self) -> bool:
        """Switch to positional placeholders unless named values exist.

        Returns:
            Whether the statement is now in placeholder mode.
        """
        if not self._positional and not self._has_named():
            self._positional = True
        return self._positional

    def bind(self, name: str, value: Any) -> str:
        """Store ``value`` under a unique key derived from ``name``.

        Returns:
            The placeholder token to emit.
        """
        if self._positional:
            return self.bind_positional(value)
        key = name
        suffix = 2
        while key in self._values:
            key = f"{name}{suffix}"
            suffix += 1
        self._values[key] = value
        self._pending.append(key)
        return self._dialect.param_placeholder(key)

    def bind_positional(self, value: Any) -> str:
        """Store ``value`` at the next integer index.

        Raises:
            StatementError: If named values were already bound.
        """
        if self._has_named():
            raise StatementError(
                "Cannot bind a positional value after named values.",
                details={"named": [k for k in self._values if isinstance(k, str)]},
            )
        self._positional = True
        index = len(self._values)
        self._values[index] = value
        self._pending.append(index)
        return self._dialect.positional_placeholder()

    def take_pending(self) -> list[str | int]:
        """Return the keys bound since the previous call and forget them."""
        pending, self._pending = self._pending, []
        return pending

    def ordered(self, keys: Iterable[str | int]) -> dict[str | int, Any]:
        """Return the bound values with ``keys`` first, in that order.

        Keys not listed follow in bind order.  Positional values are
        renumbered from zero so the indexes follow the new order.
        """
        order = [k for k in keys if k in self._values]
        listed = set(order)
        order.extend(k for k in self._values if k not in listed)
        if self._positional:
            return {i: self._values[k] for i, k in enumerate(order)}
        return {k: self._values[k] for k in order}

    def merge(self, values: Mapping[str | int, Any], sql: str) -> str:
        """Rebind a sub-query's values and rewrite its SQL to match.

        Each placeholder token of ``sql`` is rebound into this map (keeping
        this map's mode and key uniqueness) and replaced by the new token, so
        the merged values can never collide with the parent's own.

        Args:
            values: The sub-query's value map.
            sql: The sub-query's generated SQL.

        Returns:
            ``sql`` with its placeholder tokens rewritten.

        Raises:
            StructureError: If the tokens of ``sql`` and ``values`` disagree.
        """
        positional = iter([v for k, v in values.items() if isinstance(k, int)])
        used: list[str | int] = []

        def _rebind(match: re.Match[str]) -> str:
            name, question = match.group(1), match.group(2)
            if name is None and question is None:
                return match.group(0)
            if name is not None:
                if name not in values:
                    raise StructureError("SubQuery", [f"no value bound for ':{name}'"])
                used.append(name)
                return self.bind(name, values[name])
            try:
                value = next(positional)
            except StopIteration:
                raise StructureError(
                    "SubQuery", ["more placeholders than bound values"]
                ) from None
            used.append(len(used))
            return self.bind("param", value)

        rewritten = _TOKEN.sub(_rebind, sql)
        if len(used) != len(values):
            raise StructureError(
                "SubQuery",
                [f"{len(values)} bound values but {len(used)} placeholders"],
            )
        logger.debug("Merged %d sub-query value(s)", len(used))
        return rewritten
