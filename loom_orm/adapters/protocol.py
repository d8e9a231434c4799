"""Database adapter protocol.

Every adapter module implements this protocol so the Engine can drive any
of them the same way.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from loom_orm.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'qmark' (?) or 'format' (%s)."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a connection."""
        ...

    def close(self, connection: Any) -> None:
        """Close a connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...
