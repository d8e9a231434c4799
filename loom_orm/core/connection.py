"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager loads the adapter named by the config's driver and holds
a single connection for the lifetime of the engine.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from loom_orm.core.enums import DatabaseBackend
from loom_orm.core.exceptions import AdapterError, ConnectionError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections.

    ``extra`` carries driver-specific options, e.g. for SQLite
    ``{"schemas": {"Application": ":memory:"}}`` to attach one database per
    schema name.
    """

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    extra: dict[str, Any] = {}


# Adapter module mapping: backend → (module_path, adapter_class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("loom_orm.adapters.sqlite", "SqliteSyncAdapter"),
    DatabaseBackend.MYSQL: ("loom_orm.adapters.mysql", "MysqlSyncAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Owns one driver connection, opened lazily."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver)
        self._connection: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    def connect(self) -> Any:
        """Open the connection if it is not open yet.

        Raises:
            ConnectionError: If the driver cannot connect.
        """
        if self._connection is None:
            try:
                self._connection = self._adapter.connect(self.config)
            except AdapterError:
                raise
            except Exception as e:
                raise ConnectionError(f"Could not connect to '{self.config.database}': {e}") from e
            logger.debug("Opened %s connection to %s", self.config.driver, self.config.database)
        return self._connection

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Yield the managed connection, opening it on first use."""
        yield self.connect()

    def close(self) -> None:
        """Close the connection."""
        if self._connection is not None:
            self._adapter.close(self._connection)
            self._connection = None
