"""Shared pytest fixtures for mortar unit and integration tests."""
from __future__ import annotations

from collections.abc import Callable

import pytest

from mortar.compile.identifiers import Normalizer
from mortar.database import Database
from mortar.settings import DatabaseSettings


def _settings(**overrides) -> DatabaseSettings:
    values = {"table_prefix": "sym_", "logical_prefix": "tbl_"}
    values.update(overrides)
    # Isolated from any .env file in the working directory.
    return DatabaseSettings(_env_file=None, **values)


@pytest.fixture()
def make_settings() -> Callable[..., DatabaseSettings]:
    """Factory for settings with the ``sym_`` prefix plus overrides."""
    return _settings


@pytest.fixture()
def settings() -> DatabaseSettings:
    return _settings()


@pytest.fixture()
def db(settings: DatabaseSettings) -> Database:
    """Database with the ``sym_`` physical prefix and no executor."""
    return Database(settings=settings)


@pytest.fixture()
def normalizer(db: Database) -> Normalizer:
    return Normalizer(db.context)
