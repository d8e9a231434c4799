"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from loom_orm import ConnectionConfig, Engine, Entity, ExecutionResult
from tests.models import SCHEMA_DDL


class RecordingEngine:
    """Engine stand-in that records statements and serves canned rows."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.calls: list[tuple[str, list[Any]]] = []
        self.next_id = 1

    def fetch_all(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        self.calls.append((sql, list(params or [])))
        return list(self.rows)

    def execute(self, sql: str, params: list[Any] | None = None) -> ExecutionResult:
        self.calls.append((sql, list(params or [])))
        lastrowid = self.next_id
        self.next_id += 1
        return ExecutionResult(rowcount=1, lastrowid=lastrowid)


@pytest.fixture(autouse=True)
def _unbind_engine() -> Iterator[None]:
    """No test leaks a process-wide engine into the next one."""
    yield
    Entity.unbind()


@pytest.fixture
def recording_engine() -> RecordingEngine:
    return RecordingEngine()


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory config with one attached database per schema."""
    return ConnectionConfig(
        driver="sqlite",
        database=":memory:",
        extra={"schemas": {"Application": ":memory:", "Security": ":memory:"}},
    )


@pytest.fixture
def engine(sqlite_config: ConnectionConfig) -> Iterator[Engine]:
    """Engine over a fresh SQLite database with the test tables created."""
    eng = Engine.from_config(sqlite_config)
    for ddl in SCHEMA_DDL:
        eng.execute(ddl)
    yield eng
    eng.close()
