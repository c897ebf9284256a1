"""Statement factory and action registries.

``StatementFactory``
    Maps a :class:`~mortar.schema.kinds.StatementKind` to the statement
    class that builds it, so ``Database.statement(kind, table)`` needs no
    if-chain.  Built-in statements are registered in ``mortar/__init__.py``.

``ActionRegistry``
    Maps a filter or sort target (``system:id``, ``system:creation-date``)
    to the handler implementing it.  Entity queries hold one registry per
    concern instead of resolving method names from strings.

Usage::

    from mortar.compile.registry import StatementFactory

    StatementFactory.register_class(StatementKind.SELECT, Query)

    query = StatementFactory.create(StatementKind.SELECT, db, "tbl_entries")
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.errors import StatementError
from mortar.schema.kinds import StatementKind

if TYPE_CHECKING:
    from mortar.database import Database
    from mortar.statement.base import Statement

# ---------------------------------------------------------------------------
# Statement factory
# ---------------------------------------------------------------------------


class StatementFactory:
    """Registry mapping statement kinds to :class:`Statement` classes.

    Example::

        StatementFactory.register_class(StatementKind.DELETE, Delete)
        delete = StatementFactory.create(StatementKind.DELETE, db, "tbl_entries")
    """

    _statements: ClassVar[dict[StatementKind, type[Statement]]] = {}

    @classmethod
    def register_class(cls, kind: StatementKind, statement_cls: type[Statement]) -> None:
        """Register ``statement_cls`` as the builder of ``kind``."""
        cls._statements[kind] = statement_cls

    @classmethod
    def create(
        cls, kind: StatementKind | str, db: Database, table: str | None = None
    ) -> Statement:
        """Instantiate the statement registered for ``kind``, bound to ``table``.

        Raises:
            StatementError: If no statement is registered for ``kind``.
        """
        try:
            kind = StatementKind(kind.upper() if isinstance(kind, str) else kind)
        except ValueError:
            kind = None
        statement_cls = cls._statements.get(kind) if kind is not None else None
        if statement_cls is None:
            registered = [k.value for k in cls.registered_kinds()]
            raise StatementError(
                f"Unsupported statement kind. Registered kinds: {registered}.",
                details={"registered": registered},
            )
        return statement_cls.bound_to(db, table)

    @classmethod
    def registered_kinds(cls) -> list[StatementKind]:
        """Return the registered kinds in declaration order."""
        return [k for k in StatementKind if k in cls._statements]


# ---------------------------------------------------------------------------
# Action registry
# ---------------------------------------------------------------------------

#: ``(query, *args) -> None``; handlers mutate the query they are given.
ActionHandler = Callable[..., Any]


class ActionRegistry:
    """Maps target names to handlers for one concern (filtering, sorting).

    Example::

        FILTERS = ActionRegistry("filter")

        @FILTERS.register("system:id")
        def _filter_system_id(query, values, operator):
            ...
    """

    def __init__(self, concern: str) -> None:
        self.concern = concern
        self._actions: dict[str, ActionHandler] = {}

    def __contains__(self, target: object) -> bool:
        return target in self._actions

    def register(self, *targets: str) -> Callable[[ActionHandler], ActionHandler]:
        """Decorator that registers a handler under one or more targets."""

        def decorator(handler: ActionHandler) -> ActionHandler:
            for target in targets:
                self._actions[target] = handler
            return handler

        return decorator

    def get(self, target: str) -> ActionHandler | None:
        """Return the handler for ``target``, or ``None`` if not registered."""
        return self._actions.get(target)

    def require(self, target: str) -> ActionHandler:
        """Return the handler for ``target``.

        Raises:
            StatementError: If nothing is registered under ``target``.
        """
        handler = self._actions.get(target)
        if handler is None:
            raise StatementError(
                f"Cannot {self.concern} on '{target}'.",
                details={"target": target, "registered": self.targets()},
            )
        return handler

    def targets(self) -> list[str]:
        """Return the sorted list of registered targets."""
        return sorted(self._actions)
