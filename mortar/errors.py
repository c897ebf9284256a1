"""Custom exception hierarchy for mortar.

All public errors inherit from MortarError so callers can catch the base
class for any mortar-specific failure.  Build errors are programmer errors:
they are raised at the call that detects them and are never retried.
"""
from __future__ import annotations

from typing import Any


class MortarError(Exception):
    """Base exception for all mortar errors."""


class StatementError(MortarError):
    """Raised when a statement cannot be built from the given input.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. ``CONDITION``).
        details: Extra context about the offending call.
    """

    def __init__(
        self,
        message: str,
        code: str = "STATEMENT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for logging."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class StructureError(StatementError):
    """Raised by ``validate()`` when the statement parts are inconsistent.

    Every violated rule is reported, not just the first one.

    Args:
        statement: Name of the statement class being validated.
        violations: One message per violated rule.
    """

    def __init__(self, statement: str, violations: list[str]) -> None:
        summary = "; ".join(violations)
        super().__init__(
            f"{statement} is not valid: {summary}",
            code="STRUCTURE",
            details={"statement": statement, "violations": violations},
        )
        self.violations = violations


class ConditionError(StatementError):
    """Raised when a condition tree cannot be translated.

    Unknown operators, empty IN lists, non-string column names and
    non-mapping condition values all end up here.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, code="CONDITION", details=details)


class ValueTypeError(StatementError):
    """Raised when a value can neither be bound, referenced nor inlined."""

    def __init__(self, value: Any, context: str = "value") -> None:
        type_name = type(value).__name__
        super().__init__(
            f"Object of type '{type_name}' can not be used as a {context}.",
            code="VALUE_TYPE",
            details={"type": type_name, "context": context},
        )


class DefinitionError(StatementError):
    """Raised when a column or key description is incomplete."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message, code="DEFINITION", details={"name": name})
