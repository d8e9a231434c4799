"""loom-orm exception hierarchy.

All exceptions are loom-orm specific. Raw driver exceptions are never
exposed to callers; they are wrapped and chained.
"""

from __future__ import annotations


class LoomError(Exception):
    """Base exception for all loom-orm errors."""


# --- Metadata ---


class MetadataError(LoomError):
    """Base for entity metadata errors."""


class MissingIdentifierError(MetadataError):
    """Raised when an operation needs an identifier the entity does not declare."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Entity '{entity_name}' declares no identifier property")


class IncompleteMetadataError(MetadataError):
    """Raised when an entity lacks the schema or table it needs to be queried."""

    def __init__(self, entity_name: str, missing: str) -> None:
        self.entity_name = entity_name
        self.missing = missing
        super().__init__(f"Entity '{entity_name}' has no {missing} name")


class UnknownEntityError(MetadataError):
    """Raised when a name does not resolve to a registered entity class."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(f"Entity class does not exist: '{entity_name}'")


class NotAnEntityError(MetadataError):
    """Raised when a class is passed where an entity class is required."""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"Class '{class_name}' is not an Entity subclass")


# --- Query ---


class QueryError(LoomError):
    """Base for query building errors."""


class QueryRenderError(QueryError):
    """Raised when a query that failed to render is about to be executed."""

    def __init__(self, entity_name: str, cause: BaseException | None) -> None:
        self.entity_name = entity_name
        self.cause = cause
        detail = str(cause) if cause is not None else "empty query"
        super().__init__(f"Could not render query for '{entity_name}': {detail}")


# --- Mapping ---


class MappingError(LoomError):
    """Base for mapping errors."""


class ConversionError(MappingError):
    """Raised when a row value cannot be converted for a property."""

    def __init__(self, property_name: str, value: object, detail: str) -> None:
        self.property_name = property_name
        self.value = value
        super().__init__(f"Cannot convert {value!r} for '{property_name}': {detail}")


# --- Execution ---


class ExecutionError(LoomError):
    """Base for query execution errors."""


class ParameterBindingError(ExecutionError):
    """Raised when the driver rejects a statement or its parameters."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Execution failed for '{sql}': {detail}")


class MultipleRowsError(ExecutionError):
    """Raised when fetch_one encounters more than one row."""

    def __init__(self, sql: str, row_count: int) -> None:
        self.sql = sql
        self.row_count = row_count
        super().__init__(f"fetch_one for '{sql}' returned {row_count} rows (expected 0 or 1)")


class EngineNotBoundError(ExecutionError):
    """Raised when a query must run but no engine was given or bound."""

    def __init__(self) -> None:
        super().__init__("No engine available: pass one explicitly or call Entity.bind()")


# --- Adapter ---


class AdapterError(LoomError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""
