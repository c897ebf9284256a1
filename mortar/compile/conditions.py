"""Condition tree SQL compiler.

``ConditionBuilder`` renders the typed variants of
:mod:`mortar.schema.conditions` into SQL fragments for WHERE, HAVING, ON
and SET clauses, binding every literal leaf into the owning statement's
:class:`~mortar.compile.parameters.ParameterMap`.

Examples (named mode)::

    {"x": 1}                          -> `x` = :x
    {"x": {"<": 1}}                   -> `x` < :x
    {"or": {"x": 1, "y": 2}}          -> (`x` = :x OR `y` = :y)
    {"x": {"in": [1, 2]}}             -> `x` IN (?, ?)
    {"x": "$id"}                      -> `x` = `id`
    {"x": {"<=": "SUM(total)"}}       -> `x` <= SUM(`total`)
    {"x": None}                       -> `x` IS :x
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mortar.compile.identifiers import Normalizer, is_scalar
from mortar.compile.parameters import ParameterMap
from mortar.errors import ConditionError, ValueTypeError
from mortar.schema.conditions import (
    AllOf,
    And,
    Assignment,
    Between,
    ColumnRef,
    Compare,
    Condition,
    ConditionList,
    FunctionCall,
    In,
    Or,
    is_subquery,
    to_assignments,
    to_condition,
)
from mortar.schema.kinds import ComparisonOp


class ConditionBuilder:
    """Compiles condition trees to SQL fragments.

    Args:
        normalizer: Quotes identifiers and resolves table prefixes.
        params: The owning statement's parameter accumulator.
    """

    def __init__(self, normalizer: Normalizer, params: ParameterMap) -> None:
        self._norm = normalizer
        self._params = params

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, conditions: Condition | Mapping[Any, Any]) -> str:
        """Compile a condition (typed or mapping form) to a SQL fragment."""
        return self._render(to_condition(conditions))

    def build_assignments(self, values: Mapping[str, Any] | ConditionList) -> str:
        """Compile a ``{column: value}`` mapping to ``a = :a, b = :b``."""
        if isinstance(values, ConditionList):
            return self._render(values)
        return self._render(to_assignments(values))

    # ------------------------------------------------------------------
    # Variant dispatch
    # ------------------------------------------------------------------

    def _render(self, node: Condition) -> str:
        if isinstance(node, Compare):
            return self._render_compare(node)
        if isinstance(node, In):
            return self._render_in(node)
        if isinstance(node, Between):
            return self._render_between(node)
        if isinstance(node, Assignment):
            column = self._norm.column(node.column)
            return f"{column} = {self._operand(node.column, node.value)}"
        if isinstance(node, And):
            return self._render_group(node.children, "AND")
        if isinstance(node, Or):
            return self._render_group(node.children, "OR")
        if isinstance(node, AllOf):
            return " AND ".join(self._render(c) for c in node.children)
        if isinstance(node, ConditionList):
            return ", ".join(self._render(c) for c in node.children)
        raise ConditionError(f"Unknown condition type: {type(node).__name__}")

    def _render_group(self, children: list[Condition], keyword: str) -> str:
        parts = []
        for child in children:
            sql = self._render(child)
            if isinstance(child, (AllOf, ConditionList)) and len(child.children) > 1:
                sql = f"({sql})"
            parts.append(sql)
        return "(" + f" {keyword} ".join(parts) + ")"

    def _render_compare(self, node: Compare) -> str:
        column = self._norm.column(node.column)
        op = node.op.sql
        if node.value is None:
            if node.op is ComparisonOp.EQ:
                op = "IS"
            elif node.op is ComparisonOp.NE:
                op = "IS NOT"
        return f"{column} {op} {self._operand(node.column, node.value)}"

    def _render_in(self, node: In) -> str:
        column = self._norm.column(node.column)
        op = "NOT IN" if node.negate else "IN"
        if is_subquery(node.values):
            return f"{column} {op} ({self._inline_subquery(node.values)})"
        if not isinstance(node.values, (list, tuple)):
            raise ConditionError(
                "The IN() function accepts a list of scalars or a sub-query.",
                details={"column": node.column},
            )
        if not node.values:
            raise ConditionError(
                f"Values passed to '{op}' must not be empty.",
                details={"column": node.column},
            )
        for value in node.values:
            if not is_scalar(value):
                raise ValueTypeError(value, f"{op} list value")
        self._params.use_placeholders()
        name = self._norm.parameter_name(node.column)
        tokens = ", ".join(self._params.bind(name, v) for v in node.values)
        return f"{column} {op} ({tokens})"

    def _render_between(self, node: Between) -> str:
        column = self._norm.column(node.column)
        for value in (node.low, node.high):
            if not is_scalar(value):
                raise ValueTypeError(value, "BETWEEN bound")
        self._params.use_placeholders()
        name = self._norm.parameter_name(node.column)
        low = self._params.bind(name, node.low)
        high = self._params.bind(name, node.high)
        return f"({column} BETWEEN {low} AND {high})"

    # ------------------------------------------------------------------
    # Operands
    # ------------------------------------------------------------------

    def _operand(self, column: str, value: Any) -> str:
        if isinstance(value, ColumnRef):
            return self._norm.column(value.name)
        if isinstance(value, FunctionCall):
            return self._norm.tick(value.expression)
        if is_subquery(value):
            return f"({self._inline_subquery(value)})"
        if is_scalar(value):
            return self._params.bind(self._norm.parameter_name(column), value)
        raise ValueTypeError(value, "condition value")

    def _inline_subquery(self, subquery: Any) -> str:
        """Merge the sub-query's values, then return its SQL for inlining."""
        subquery.finalize()
        subquery.validate()
        return self._params.merge(subquery.get_values(), subquery.generate_sql())
