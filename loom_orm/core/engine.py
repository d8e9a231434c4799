"""Query execution engine.

The Engine runs SQL rendered by the QueryBuilder: it converts ``?``
placeholders to the driver's paramstyle, binds positional parameters,
executes through the adapter and returns rows as dicts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from loom_orm.core.connection import ConnectionConfig, ConnectionManager
from loom_orm.core.exceptions import MultipleRowsError, ParameterBindingError
from loom_orm.core.params import coerce_params, normalize_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of an INSERT or UPDATE."""

    rowcount: int
    lastrowid: Any = None


def _rows_to_dicts(cursor: Any) -> list[dict[str, Any]]:
    """Convert cursor results to list of dicts.

    Handles both tuple-like rows and dict-like rows from different adapters.
    """
    if cursor.description is None:
        return []
    columns = [desc[0] for desc in cursor.description]
    rows = cursor.fetchall()
    if not rows:
        return []

    # MySQL dictionary cursors already return dicts
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]

    return [dict(zip(columns, row, strict=True)) for row in rows]


class Engine:
    """Synchronous execution engine over one connection."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Engine instance
        """
        return cls(ConnectionManager(config))

    def _run(self, conn: Any, sql: str, params: list[Any] | tuple[Any, ...] | None) -> Any:
        statement = normalize_params(sql, self._paramstyle)
        bound = coerce_params(params)
        logger.debug("Executing %s with %r", statement, bound)
        try:
            return self._connection_manager.adapter.execute(conn, statement, bound)
        except Exception as e:
            raise ParameterBindingError(sql, str(e)) from e

    def fetch_all(
        self, sql: str, params: list[Any] | tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all matching rows as dicts keyed by column label."""
        with self._connection_manager.get_connection() as conn:
            cursor = self._run(conn, sql, params)
            return _rows_to_dicts(cursor)

    def fetch_one(
        self, sql: str, params: list[Any] | tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        rows = self.fetch_all(sql, params)
        if not rows:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(sql, len(rows))
        return rows[0]

    def execute(
        self, sql: str, params: list[Any] | tuple[Any, ...] | None = None
    ) -> ExecutionResult:
        """Execute a write statement and commit."""
        with self._connection_manager.get_connection() as conn:
            cursor = self._run(conn, sql, params)
            conn.commit()
            return ExecutionResult(rowcount=int(cursor.rowcount), lastrowid=cursor.lastrowid)

    def close(self) -> None:
        self._connection_manager.close()
