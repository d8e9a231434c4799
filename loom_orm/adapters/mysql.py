"""MySQL adapter - mysql-connector-python."""

from __future__ import annotations

from typing import Any

from loom_orm.core.connection import ConnectionConfig


class MysqlSyncAdapter:
    """Synchronous MySQL adapter using mysql-connector-python.

    Schemas map to MySQL databases, so ``schema.table`` needs no setup.
    """

    @property
    def paramstyle(self) -> str:
        return "format"

    def connect(self, config: ConnectionConfig) -> Any:
        import mysql.connector

        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            **config.extra,
        )

    def close(self, connection: Any) -> None:
        connection.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> Any:
        """Execute SQL and return a cursor with dictionary results."""
        cursor = connection.cursor(dictionary=True)
        cursor.execute(sql, params)
        return cursor
