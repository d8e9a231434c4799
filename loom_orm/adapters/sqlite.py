"""SQLite adapter - stdlib sqlite3.

Entities address tables as ``schema.table``. SQLite resolves that form
against attached databases, so every schema named in
``config.extra["schemas"]`` is attached under its own name.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from loom_orm.core.connection import ConnectionConfig


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        """Open the main database and attach the configured schemas."""
        conn = sqlite3.connect(config.database)
        conn.row_factory = sqlite3.Row
        for schema, path in config.extra.get("schemas", {}).items():
            conn.execute(f"ATTACH DATABASE ? AS {schema}", (path,))
        return conn

    def close(self, connection: sqlite3.Connection) -> None:
        connection.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params)
