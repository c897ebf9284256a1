"""Typed condition tree for WHERE / HAVING / ON / SET clauses.

Replaces the untyped nested mapping with a closed set of variants so the
translator can dispatch exhaustively instead of sniffing keys.  The mapping
form stays available as the convenient caller-facing notation and is
lowered by :func:`to_condition`::

    to_condition({"or": {"x": 1, "y": {"<": 2}}})
    # Or(children=[Compare(column="x", op="=", value=1),
    #              Compare(column="y", op="<", value=2)])

Reading the mapping form: a key is either a logical operator (``and``,
``or``), the list marker ``,``, an integer (an anonymous nested condition)
or a column name.  A column's value is either an operand or a one-key
operator map (``{"<": 1}``, ``{"in": [...]}``, ``{"between": [lo, hi]}``).

String operands starting with ``$`` reference another column; strings
shaped like a function call (``SUM(total)``) are passed through unquoted.
Every other leaf becomes exactly one bound parameter.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

from mortar.errors import ConditionError
from mortar.schema.kinds import (
    BETWEEN_KEY,
    COMPARISON_PRIORITY,
    IN_KEYS,
    LIST_KEY,
    ComparisonOp,
    LogicalOp,
)

_FROZEN = ConfigDict(frozen=True, extra="forbid")

#: Prefix marking "this string is a column, not a literal".
COLUMN_SENTINEL = "$"

#: An identifier followed by a parenthesized argument list.
FUNCTION_CALL_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\(.*\)$", re.DOTALL)


# ---------------------------------------------------------------------------
# Operands that are never bound
# ---------------------------------------------------------------------------


class ColumnRef(BaseModel):
    """A reference to another column (or a column expression): ``$id``."""

    model_config = _FROZEN

    name: str


class FunctionCall(BaseModel):
    """An SQL function call emitted unquoted: ``SUM(total)``."""

    model_config = _FROZEN

    expression: str


# ---------------------------------------------------------------------------
# Leaf conditions
# ---------------------------------------------------------------------------


class Compare(BaseModel):
    """``column OP value``; ``=``/``!=`` against ``None`` become ``IS``/``IS NOT``."""

    model_config = _FROZEN

    column: str
    op: ComparisonOp = ComparisonOp.EQ
    value: Any = None


class In(BaseModel):
    """``column [NOT] IN (...)`` against a non-empty list or a sub-query."""

    model_config = _FROZEN

    column: str
    values: Any
    negate: bool = False


class Between(BaseModel):
    """``(column BETWEEN low AND high)``."""

    model_config = _FROZEN

    column: str
    low: Any
    high: Any


class Assignment(BaseModel):
    """``column = value`` inside a SET list; ``None`` is bound, not rewritten."""

    model_config = _FROZEN

    column: str
    value: Any = None


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class And(BaseModel):
    """Parenthesized conjunction: ``(a AND b)``."""

    model_config = _FROZEN

    children: list[Condition] = Field(min_length=1)


class Or(BaseModel):
    """Parenthesized disjunction: ``(a OR b)``."""

    model_config = _FROZEN

    children: list[Condition] = Field(min_length=1)


class AllOf(BaseModel):
    """Implicit top-level conjunction: ``a AND b`` without parentheses."""

    model_config = _FROZEN

    children: list[Condition] = Field(min_length=1)


class ConditionList(BaseModel):
    """Independent terms joined by ``, `` (the ``","`` marker, SET lists)."""

    model_config = _FROZEN

    children: list[Condition] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Discriminated union
# ---------------------------------------------------------------------------

_VARIANTS: dict[type[BaseModel], str] = {
    Compare: "compare",
    In: "in",
    Between: "between",
    Assignment: "assignment",
    And: "and",
    Or: "or",
    AllOf: "all",
    ConditionList: "list",
}


def _condition_discriminator(v: Any) -> str | None:
    """Return the tag for the Pydantic discriminated union."""
    return _VARIANTS.get(type(v))


Condition = Annotated[
    Annotated[Compare, Tag("compare")]
    | Annotated[In, Tag("in")]
    | Annotated[Between, Tag("between")]
    | Annotated[Assignment, Tag("assignment")]
    | Annotated[And, Tag("and")]
    | Annotated[Or, Tag("or")]
    | Annotated[AllOf, Tag("all")]
    | Annotated[ConditionList, Tag("list")],
    Discriminator(_condition_discriminator),
]

# Resolve forward references in recursive types.
And.model_rebuild()
Or.model_rebuild()
AllOf.model_rebuild()
ConditionList.model_rebuild()

def is_condition(value: Any) -> bool:
    """Return True when ``value`` is one of the typed condition variants."""
    return type(value) in _VARIANTS


# ---------------------------------------------------------------------------
# Lowering of the mapping form
# ---------------------------------------------------------------------------


def is_subquery(value: Any) -> bool:
    """Return True when ``value`` is a sub-query builder."""
    from mortar.statement.query import SubQuery

    return isinstance(value, SubQuery)


def to_operand(value: Any) -> Any:
    """Convert sentinel strings to typed operands, or return ``value`` as-is."""
    if isinstance(value, str):
        if value.startswith(COLUMN_SENTINEL):
            return ColumnRef(name=value[len(COLUMN_SENTINEL):])
        if FUNCTION_CALL_PATTERN.match(value):
            return FunctionCall(expression=value)
    return value


def to_condition(conditions: Any) -> Condition:
    """Lower a condition mapping to a typed condition, or return it as-is.

    Args:
        conditions: A typed condition, or a mapping in the notation described
            in the module docstring.

    Returns:
        A single typed condition.  A mapping with several keys becomes an
        :class:`AllOf`.

    Raises:
        ConditionError: If the mapping uses an unknown operator, an empty IN
            list, a non-string column name, or is not a mapping at all.
    """
    if is_condition(conditions):
        return conditions
    if not isinstance(conditions, Mapping):
        raise ConditionError(
            f"Conditions must be a mapping, got '{type(conditions).__name__}'.",
            details={"conditions": repr(conditions)},
        )
    if not conditions:
        raise ConditionError("Conditions must not be empty.")
    terms = [_lower_pair(k, v) for k, v in conditions.items()]
    if len(terms) == 1:
        return terms[0]
    return AllOf(children=terms)


def to_assignments(values: Mapping[str, Any]) -> ConditionList:
    """Lower a ``{column: value}`` mapping to a SET list."""
    if not isinstance(values, Mapping) or not values:
        raise ConditionError("SET values must be a non-empty mapping.")
    items = []
    for column, value in values.items():
        if not isinstance(column, str):
            raise ConditionError(f"Cannot use {column!r} as a column name.")
        items.append(Assignment(column=column, value=to_operand(value)))
    return ConditionList(children=items)


def _lower_children(key: str, value: Any) -> list[Condition]:
    if isinstance(value, Mapping):
        children = [_lower_pair(k, v) for k, v in value.items()]
    elif isinstance(value, (list, tuple)):
        children = [to_condition(item) for item in value]
    else:
        raise ConditionError(
            f"Operator '{key}' expects a mapping or a list of conditions.",
            details={"operator": key},
        )
    if not children:
        raise ConditionError(f"Operator '{key}' needs at least one condition.")
    return children


def _lower_pair(key: Any, value: Any) -> Condition:
    if key == LogicalOp.AND.value:
        return And(children=_lower_children(key, value))
    if key == LogicalOp.OR.value:
        return Or(children=_lower_children(key, value))
    if key == LIST_KEY:
        return ConditionList(children=_lower_children(key, value))

    if isinstance(key, int) and not isinstance(key, bool):
        return to_condition(value)
    if not isinstance(key, str):
        raise ConditionError(
            f"Cannot use {key!r} as a column name.", details={"column": repr(key)}
        )

    if isinstance(value, Mapping):
        return _lower_operator_map(key, value)
    if isinstance(value, (list, tuple, set)):
        raise ConditionError(
            f"Operation on '{key}' is not valid: a list needs an 'in' or "
            "'between' operator.",
            details={"column": key},
        )
    return Compare(column=key, op=ComparisonOp.EQ, value=to_operand(value))


def _lower_operator_map(column: str, operators: Mapping[Any, Any]) -> Condition:
    if not operators:
        raise ConditionError(
            f"Operation on '{column}' is not valid: empty operator map.",
            details={"column": column},
        )
    keys = list(operators)

    if len(keys) == 1 and keys[0] in IN_KEYS:
        values = operators[keys[0]]
        negate = keys[0] == "notin"
        if is_subquery(values):
            return In(column=column, values=values, negate=negate)
        if not isinstance(values, (list, tuple)):
            raise ConditionError(
                "The IN() function accepts a list of scalars or a sub-query.",
                details={"column": column},
            )
        if not values:
            raise ConditionError(
                f"Values passed to '{'NOT IN' if negate else 'IN'}' must not be empty.",
                details={"column": column},
            )
        return In(column=column, values=list(values), negate=negate)

    if len(keys) == 1 and keys[0] == BETWEEN_KEY:
        bounds = operators[BETWEEN_KEY]
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
            raise ConditionError(
                "BETWEEN expects exactly two values.", details={"column": column}
            )
        return Between(column=column, low=bounds[0], high=bounds[1])

    unknown = [k for k in keys if k not in COMPARISON_PRIORITY]
    if unknown:
        raise ConditionError(
            f"Operation {unknown[0]!r} on '{column}' is not valid.",
            details={"column": column, "operator": repr(unknown[0])},
        )
    if len(keys) > 1:
        present = [op for op in COMPARISON_PRIORITY if op in operators]
        raise ConditionError(
            f"Only one operator may be applied to '{column}' per entry, got {present}.",
            details={"column": column, "operators": present},
        )
    op = ComparisonOp(keys[0])
    operand = operators[keys[0]]
    if isinstance(operand, (list, tuple, set, Mapping)):
        raise ConditionError(
            f"Operator '{op.value}' on '{column}' expects a single operand.",
            details={"column": column, "operator": op.value},
        )
    return Compare(column=column, op=op, value=to_operand(operand))
