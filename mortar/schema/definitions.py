"""Pydantic models for column and key definitions used by ALTER / CREATE.

Definitions are built transiently from a declarative description, lowered
to an SQL fragment and discarded.  A description is either a bare type
string or a mapping of options::

    ColumnDefinition.describe("id", {"type": "int(11)", "auto": True})
    ColumnDefinition.describe("title", "varchar(255)")
    KeyDefinition.describe("handle", {"type": "unique", "cols": ["handle"]})
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mortar.errors import DefinitionError, ValueTypeError
from mortar.schema.kinds import KeyKind


class ColumnDefinition(BaseModel):
    """A single column of a table.

    Attributes:
        name: Column name.
        type: SQL type, e.g. ``'varchar(255)'`` or ``'int(11)'``.
        null: Whether the column accepts NULL (defaults to NOT NULL).
        default: Default value; only rendered for NOT NULL columns.
        signed: Numeric columns are UNSIGNED unless this is set.
        auto: AUTO_INCREMENT, integer columns only.
        values: Allowed values for ``enum`` / ``set`` columns.
        collate: Collation, textual columns only.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: str = Field(min_length=1)
    null: bool = False
    default: Any = None
    signed: bool = False
    auto: bool = False
    values: list[str] | None = None
    collate: str | None = None

    @classmethod
    def describe(cls, name: str, options: str | Mapping[str, Any]) -> ColumnDefinition:
        """Build a definition from a type string or an options mapping.

        Raises:
            ValueTypeError: If ``options`` is neither a string nor a mapping.
            DefinitionError: If the mapping has no ``type`` or bad options.
        """
        if not isinstance(name, str):
            raise ValueTypeError(name, "column name")
        if isinstance(options, str):
            options = {"type": options}
        elif not isinstance(options, Mapping):
            raise ValueTypeError(options, "column definition")
        if not options.get("type"):
            raise DefinitionError(f"Field type must be defined for '{name}'.", name=name)
        try:
            return cls.model_validate({**options, "name": name})
        except ValidationError as exc:
            raise DefinitionError(
                f"Invalid definition for column '{name}': {exc}", name=name
            ) from exc


class KeyDefinition(BaseModel):
    """An index over one or more columns.

    Attributes:
        name: Key name (ignored for primary keys).
        kind: ``key``, ``index``, ``unique``, ``primary`` or ``fulltext``.
        columns: Indexed columns; defaults to the key name.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    kind: KeyKind = KeyKind.KEY
    columns: list[str] = Field(min_length=1)

    @field_validator("kind", mode="before")
    @classmethod
    def _lower_kind(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @classmethod
    def describe(cls, name: str, options: str | Mapping[str, Any]) -> KeyDefinition:
        """Build a key from a kind string or a ``{"type", "cols"}`` mapping.

        Raises:
            ValueTypeError: If ``options`` is neither a string nor a mapping.
            DefinitionError: If the kind is unknown.
        """
        if not isinstance(name, str):
            raise ValueTypeError(name, "key name")
        if isinstance(options, str):
            options = {"type": options}
        elif not isinstance(options, Mapping):
            raise ValueTypeError(options, "key definition")
        columns = options.get("cols", name)
        if isinstance(columns, str):
            columns = [columns]
        try:
            return cls.model_validate(
                {"name": name, "kind": options.get("type", "key"), "columns": columns}
            )
        except ValidationError as exc:
            raise DefinitionError(
                f"Invalid definition for key '{name}': {exc}", name=name
            ) from exc
