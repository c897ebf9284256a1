"""mortar statement builders."""
from mortar.statement.alter import Alter
from mortar.statement.base import Category, Statement
from mortar.statement.create import Create
from mortar.statement.delete import Delete
from mortar.statement.insert import Insert
from mortar.statement.maintenance import Optimize, Truncate
from mortar.statement.query import Query, SubQuery
from mortar.statement.show import Show
from mortar.statement.update import Update

__all__ = [
    "Alter",
    "Category",
    "Create",
    "Delete",
    "Insert",
    "Optimize",
    "Query",
    "Show",
    "Statement",
    "SubQuery",
    "Truncate",
    "Update",
]
