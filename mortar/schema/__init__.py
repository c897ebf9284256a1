"""mortar input models: condition tree, column/key definitions, enums."""
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
    to_condition,
)
from mortar.schema.definitions import ColumnDefinition, KeyDefinition
from mortar.schema.kinds import (
    ComparisonOp,
    JoinKind,
    KeyKind,
    LogicalOp,
    ShowKind,
    SortDirection,
    StatementKind,
)

__all__ = [
    "AllOf",
    "And",
    "Assignment",
    "Between",
    "ColumnDefinition",
    "ColumnRef",
    "Compare",
    "ComparisonOp",
    "Condition",
    "ConditionList",
    "FunctionCall",
    "In",
    "JoinKind",
    "KeyDefinition",
    "KeyKind",
    "LogicalOp",
    "Or",
    "ShowKind",
    "SortDirection",
    "StatementKind",
    "to_condition",
]
