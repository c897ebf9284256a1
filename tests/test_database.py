"""Unit tests for the Database facade, settings and result views."""
from __future__ import annotations

import logging
from typing import Any

import pytest

from mortar.database import Database
from mortar.errors import MortarError, StructureError
from mortar.results import QueryResult, StatementResult
from mortar.settings import DatabaseSettings


class FakeCursor:
    """Minimal DB-API cursor returning canned rows."""

    def __init__(self, rows=(), description=(), rowcount=-1, lastrowid=None) -> None:
        self._rows = list(rows)
        self.description = description
        self.rowcount = rowcount
        self.lastrowid = lastrowid

    def fetchone(self) -> Any:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> list:
        rows, self._rows = self._rows, []
        return rows


class RecordingExecutor:
    def __init__(self, cursor: FakeCursor | None = None) -> None:
        self.cursor = cursor or FakeCursor()
        self.calls: list[tuple[str, Any]] = []

    def __call__(self, sql: str, params: Any) -> FakeCursor:
        self.calls.append((sql, params))
        return self.cursor


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def test_settings_defaults():
    settings = DatabaseSettings(_env_file=None)
    assert settings.table_prefix == "tbl_"
    assert settings.logical_prefix == "tbl_"
    assert settings.query_cache_hint
    assert settings.collation is None
    assert not settings.log_queries


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MORTAR_TABLE_PREFIX", "sym_")
    monkeypatch.setenv("MORTAR_QUERY_CACHE_HINT", "false")
    settings = DatabaseSettings(_env_file=None)
    assert settings.table_prefix == "sym_"
    assert not settings.query_cache_hint


def test_database_exposes_context(db):
    assert db.prefix == "sym_"
    assert db.settings.table_prefix == "sym_"
    assert db.context.dialect.dialect_name == "mysql"
    assert db.quote("it's") == "'it\\'s'"


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def test_execute_without_executor_raises(db):
    with pytest.raises(MortarError):
        db.delete("tbl_entries").where({"id": 1}).execute()


def test_execute_passes_named_params(settings):
    executor = RecordingExecutor(FakeCursor(rowcount=1))
    db = Database(settings=settings, executor=executor)
    result = db.delete("tbl_entries").where({"id": 1}).execute()
    assert executor.calls == [("DELETE FROM `sym_entries` WHERE `id` = :id", {"id": 1})]
    assert isinstance(result, StatementResult)
    assert result.success()
    assert result.row_count == 1


def test_execute_passes_positional_params(settings):
    executor = RecordingExecutor()
    db = Database(settings=settings, executor=executor)
    db.delete("tbl_entries").where({"id": {"in": [1, 2]}}).execute()
    assert executor.calls == [("DELETE FROM `sym_entries` WHERE `id` IN (?, ?)", [1, 2])]


def test_execute_validates_before_running(settings):
    executor = RecordingExecutor()
    db = Database(settings=settings, executor=executor)
    with pytest.raises(StructureError):
        db.update("tbl_entries").execute()
    assert executor.calls == []


def test_execute_records_last_insert_id(settings):
    executor = RecordingExecutor(FakeCursor(lastrowid=42))
    db = Database(settings=settings, executor=executor)
    assert db.last_insert_id is None
    db.insert("tbl_entries").values({"section_id": 1}).execute()
    assert db.last_insert_id == 42


def test_execute_logs_queries_when_enabled(make_settings):
    db = Database(settings=make_settings(log_queries=True), executor=RecordingExecutor())
    db.optimize("tbl_entries").execute()
    assert [log.query for log in db.logs] == ["OPTIMIZE TABLE `sym_entries`"]
    db.clear_logs()
    assert db.logs == []


def test_execute_does_not_log_by_default(settings):
    db = Database(settings=settings, executor=RecordingExecutor())
    db.optimize("tbl_entries").execute()
    assert db.logs == []


def test_execute_emits_debug_log(settings, caplog):
    db = Database(settings=settings, executor=RecordingExecutor())
    with caplog.at_level(logging.DEBUG, logger="mortar.database"):
        db.truncate("tbl_cache").execute()
    assert "TRUNCATE TABLE `sym_cache`" in caplog.text


def test_driver_errors_propagate(settings):
    def failing(sql, params):
        raise RuntimeError("connection lost")

    db = Database(settings=settings, executor=failing)
    with pytest.raises(RuntimeError):
        db.truncate("tbl_cache").execute()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


def _query_result(rows) -> QueryResult:
    cursor = FakeCursor(rows=rows, description=(("id", None), ("name", None)))
    return QueryResult(True, cursor)


def test_select_returns_query_result(settings):
    cursor = FakeCursor(rows=[(1, "Articles")], description=(("id",), ("name",)))
    db = Database(settings=settings, executor=RecordingExecutor(cursor))
    result = db.select(["id", "name"]).from_("tbl_sections").execute()
    assert isinstance(result, QueryResult)
    assert result.rows() == [{"id": 1, "name": "Articles"}]


def test_query_result_next_and_variable():
    result = _query_result([(1, "a"), (2, "b")])
    assert result.next() == {"id": 1, "name": "a"}
    assert result.variable("name") == "b"
    assert result.next() is None
    assert result.variable(0) is None


def test_query_result_column_by_name_and_index():
    assert _query_result([(1, "a"), (2, "b")]).column("name") == ["a", "b"]
    assert _query_result([(1, "a"), (2, "b")]).column(0) == [1, 2]


def test_query_result_rows_indexed_by():
    result = _query_result([(1, "a"), (2, "b")])
    assert result.rows_indexed_by("name") == {
        "a": {"id": 1, "name": "a"},
        "b": {"id": 2, "name": "b"},
    }


def test_query_result_accepts_dict_rows():
    result = QueryResult(True, FakeCursor(rows=[{"id": 7}]))
    assert result.rows() == [{"id": 7}]


def test_statement_result_truthiness():
    assert not StatementResult(False, None)
    assert StatementResult(False, None).row_count == -1
    assert StatementResult(True, None).last_insert_id is None
