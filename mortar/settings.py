"""Process-wide engine configuration.

The table prefix is the only environment-derived input the engine
consumes.  Settings are read once (``get_settings``) and never mutated by
the builders::

    MORTAR_TABLE_PREFIX=sym_ python app.py
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Configuration shared by every statement built through a Database."""

    model_config = SettingsConfigDict(
        env_prefix="MORTAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    table_prefix: str = Field(
        default="tbl_",
        description="Physical table prefix substituted for the logical prefix.",
    )
    logical_prefix: str = Field(
        default="tbl_",
        min_length=1,
        description="Sentinel recognised at the start of table names.",
    )
    query_cache_hint: bool = Field(
        default=True,
        description="Emit SQL_NO_CACHE after SELECT on top-level queries.",
    )
    collation: str | None = Field(
        default=None,
        description="Default collation for textual columns in CREATE TABLE.",
    )
    log_queries: bool = Field(
        default=False,
        description="Keep an in-memory log of executed statements.",
    )


@lru_cache(maxsize=1)
def get_settings() -> DatabaseSettings:
    """Return the process-wide settings instance."""
    return DatabaseSettings()
