"""Unit tests for Engine and ConnectionManager."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from loom_orm import (
    AdapterError,
    ConnectionConfig,
    ConnectionManager,
    Engine,
    ExecutionResult,
    MultipleRowsError,
    ParameterBindingError,
)
from loom_orm.adapters.sqlite import SqliteSyncAdapter


@pytest.fixture
def plain_engine() -> Iterator[Engine]:
    eng = Engine.from_config(ConnectionConfig(driver="sqlite", database=":memory:"))
    eng.execute("CREATE TABLE items (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)")
    yield eng
    eng.close()


class TestConnectionManager:
    def test_unsupported_driver(self) -> None:
        with pytest.raises(AdapterError, match="Unsupported database driver"):
            ConnectionManager(ConnectionConfig(driver="db2", database="x"))

    def test_driver_name_is_case_insensitive(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="SQLite", database=":memory:"))
        assert isinstance(manager.adapter, SqliteSyncAdapter)

    def test_connection_is_reused(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=":memory:"))
        with manager.get_connection() as first, manager.get_connection() as second:
            assert first is second
        manager.close()

    def test_attaches_schemas(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        with manager.get_connection() as conn:
            names = {row[1] for row in conn.execute("PRAGMA database_list")}
        assert {"main", "Application", "Security"} <= names
        manager.close()


class TestEngine:
    def test_execute_returns_lastrowid(self, plain_engine: Engine) -> None:
        result = plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["a"])
        assert result == ExecutionResult(rowcount=1, lastrowid=1)

    def test_fetch_all(self, plain_engine: Engine) -> None:
        plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["a"])
        plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["b"])
        rows = plain_engine.fetch_all("SELECT id AS i_id, name AS i_name FROM items ORDER BY id")
        assert rows == [{"i_id": 1, "i_name": "a"}, {"i_id": 2, "i_name": "b"}]

    def test_fetch_one(self, plain_engine: Engine) -> None:
        plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["a"])
        assert plain_engine.fetch_one("SELECT name FROM items WHERE id = ?", [1]) == {"name": "a"}
        assert plain_engine.fetch_one("SELECT name FROM items WHERE id = ?", [9]) is None

    def test_fetch_one_multiple_rows(self, plain_engine: Engine) -> None:
        plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["a"])
        plain_engine.execute("INSERT INTO items (name) VALUES (?)", ["b"])
        with pytest.raises(MultipleRowsError) as exc_info:
            plain_engine.fetch_one("SELECT name FROM items")
        assert exc_info.value.row_count == 2

    def test_driver_errors_are_wrapped(self, plain_engine: Engine) -> None:
        with pytest.raises(ParameterBindingError) as exc_info:
            plain_engine.execute("INSERT INTO items (name) VALUES (?)", [])
        assert exc_info.value.sql == "INSERT INTO items (name) VALUES (?)"

    def test_missing_table_is_wrapped(self, plain_engine: Engine) -> None:
        with pytest.raises(ParameterBindingError):
            plain_engine.fetch_all("SELECT * FROM nope")
