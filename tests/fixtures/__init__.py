"""Test fixtures: sample CMS schema DDL and rows."""

from __future__ import annotations

from pathlib import Path

_FIXTURES_DIR = Path(__file__).parent


def load_ddl(target: str = "sqlite") -> str:
    """Return the sample DDL SQL string for the given backend.

    Tables carry the ``sym_`` physical prefix.

    Args:
        target: Backend name; only ``'sqlite'`` ships with the tests.

    Returns:
        DDL string ready to execute against the target backend.
    """
    filename = f"ddl_{target}.sql"
    return (_FIXTURES_DIR / filename).read_text()
