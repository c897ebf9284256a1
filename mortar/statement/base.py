"""Statement core.

A :class:`Statement` accumulates SQL fragments into named categories and
bound values into a :class:`~mortar.compile.parameters.ParameterMap`.
Specializations declare their grammar as class attributes:

``KIND``
    The :class:`~mortar.schema.kinds.StatementKind` produced.
``STRUCTURE``
    Ordered :class:`Category` tuple; ``generate_sql`` emits the present
    categories in this order.
``SINGLETONS``
    Categories that may hold at most one fragment.
``REQUIRED``
    Categories that must hold at least one fragment.

Fragments are appended without validation; ``validate()`` checks every
cross-part rule at once and reports all violations in a single
:class:`~mortar.errors.StructureError`.
"""
from __future__ import annotations

import logging
from abc import ABC
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.compile.base import CompiledSQL
from mortar.compile.conditions import ConditionBuilder
from mortar.compile.parameters import ParameterMap, count_placeholders
from mortar.compile.identifiers import Normalizer
from mortar.errors import StatementError, StructureError, ValueTypeError
from mortar.results import StatementResult
from mortar.schema.kinds import StatementKind

if TYPE_CHECKING:
    from mortar.database import Database

logger = logging.getLogger(__name__)


def non_negative_int(value: Any, clause: str) -> int:
    """Return ``value`` when it is a usable LIMIT / OFFSET count."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StatementError(
            f"{clause} expects a non-negative integer, got {value!r}.",
            details={"clause": clause, "value": repr(value)},
        )
    return value


def require_mapping(value: Any, context: str) -> Mapping[Any, Any]:
    """Return ``value`` when it is a ``{name: definition}`` mapping."""
    if not isinstance(value, Mapping):
        raise ValueTypeError(value, context)
    return value


@dataclass(frozen=True)
class Category:
    """One named slot of a statement's grammar.

    Attributes:
        name: Category key used by ``append``.
        prefix: Text emitted once before the fragments (``'WHERE '``).
        separator: Joins several fragments of the category.
    """

    name: str
    prefix: str = ""
    separator: str = " "


class Statement(ABC):
    """Base class of every statement builder.

    One instance per logical statement; not safe for concurrent mutation.

    Args:
        db: The database facade supplying context and execution.
    """

    KIND: ClassVar[StatementKind]
    STRUCTURE: ClassVar[tuple[Category, ...]] = ()
    SINGLETONS: ClassVar[frozenset[str]] = frozenset()
    REQUIRED: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, db: Database) -> None:
        self._db = db
        self._ctx = db.context
        self._norm = Normalizer(self._ctx)
        self._params = ParameterMap(self._ctx.dialect)
        self._conditions = ConditionBuilder(self._norm, self._params)
        self._parts: dict[str, list[str]] = {}
        # Keys bound for each fragment, parallel to _parts.
        self._bound: dict[str, list[list[str | int]]] = {}

    @classmethod
    def bound_to(cls, db: Database, table: str | None = None) -> Statement:
        """Build a statement of this kind bound to ``table``."""
        if table is None:
            raise StatementError(f"{cls.__name__} needs a table.")
        return cls(db, table)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.generate_sql()!r}>"

    @property
    def db(self) -> Database:
        return self._db

    @property
    def normalizer(self) -> Normalizer:
        return self._norm

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    def append(self, category: str, fragment: str) -> Statement:
        """Append ``fragment`` to ``category``; checked by ``validate()``.

        Values bound since the previous fragment belong to ``fragment``.
        """
        self._parts.setdefault(category, []).append(fragment)
        self._bound.setdefault(category, []).append(self._params.take_pending())
        return self

    def parts(self, category: str) -> list[str]:
        """Return a copy of the fragments held by ``category``."""
        return list(self._parts.get(category, []))

    def contains(self, category: str) -> bool:
        return bool(self._parts.get(category))

    def _replace_last(self, category: str, fragment: str) -> None:
        self._parts[category][-1] = fragment
        self._bound[category][-1].extend(self._params.take_pending())

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def bind(self, name: str, value: Any) -> str:
        """Bind ``value`` under a key derived from ``name``; return its token."""
        return self._params.bind(self._norm.parameter_name(name), value)

    def bind_positional(self, value: Any) -> str:
        """Bind ``value`` at the next integer index; return ``?``."""
        return self._params.bind_positional(value)

    def use_placeholders(self) -> bool:
        """Switch to ``?`` placeholders when no named value is bound yet."""
        return self._params.use_placeholders()

    @property
    def uses_placeholders(self) -> bool:
        return self._params.positional

    def merge_values(self, values: Mapping[str | int, Any], sql: str) -> str:
        """Rebind a sub-query's values; return its SQL with rewritten tokens."""
        return self._params.merge(values, sql)

    def get_values(self) -> dict[str | int, Any]:
        """Return the bound values in the order their placeholders appear."""
        keys: list[str | int] = []
        for category in self.STRUCTURE:
            for fragment_keys in self._bound.get(category.name, []):
                keys.extend(fragment_keys)
        return self._params.ordered(keys)

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def build_conditions(self, conditions: Any) -> str:
        """Compile a condition tree against this statement's values."""
        return self._conditions.build(conditions)

    def build_assignments(self, values: Any) -> str:
        return self._conditions.build_assignments(values)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def finalize(self) -> Statement:
        """Apply defaults before generation.  Idempotent."""
        return self

    def validate(self) -> Statement:
        """Check every cross-part rule.

        Raises:
            StructureError: Listing every violation found.
        """
        violations: list[str] = []
        declared = {c.name for c in self.STRUCTURE}
        for name in self.SINGLETONS:
            if len(self._parts.get(name, [])) > 1:
                violations.append(f"'{name}' can only hold one part")
        for name in sorted(self.REQUIRED):
            if not self._parts.get(name):
                violations.append(f"'{name}' is required")
        for name in self._parts:
            if name not in declared:
                violations.append(f"'{name}' is not a valid part")
        violations.extend(self._extra_violations())

        tokens = count_placeholders(self.generate_sql())
        if tokens != len(self._params):
            violations.append(
                f"{tokens} placeholder(s) but {len(self._params)} bound value(s)"
            )
        if violations:
            raise StructureError(type(self).__name__, sorted(violations))
        return self

    def _extra_violations(self) -> list[str]:
        """Specialization-specific checks, reported with the generic ones."""
        return []

    def generate_sql(self) -> str:
        """Return the SQL text of the present categories.  Pure."""
        rendered = []
        for category in self.STRUCTURE:
            fragments = self._parts.get(category.name)
            if fragments:
                rendered.append(
                    (category, category.prefix + category.separator.join(fragments))
                )
        return self._join_categories(rendered)

    def _join_categories(self, rendered: list[tuple[Category, str]]) -> str:
        return " ".join(sql for _, sql in rendered)

    def compile(self) -> CompiledSQL:
        """Finalize, validate and generate; return SQL with its values."""
        self.finalize()
        self.validate()
        return CompiledSQL(
            sql=self.generate_sql(),
            params=self.get_values(),
            kind=self.KIND.value,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self) -> StatementResult:
        """Hand the compiled statement to the database facade."""
        return self._db.execute(self)

    def results(self, success: bool, cursor: Any) -> StatementResult:
        """Wrap the driver's cursor in this statement's result view."""
        return StatementResult(success, cursor)
