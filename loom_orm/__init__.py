"""loom-orm - metadata-driven query builder and row-to-object mapper."""

from __future__ import annotations

from loom_orm.collection import ModelCollection
from loom_orm.core.connection import ConnectionConfig, ConnectionManager
from loom_orm.core.engine import Engine, ExecutionResult
from loom_orm.core.enums import DatabaseBackend, JoinType, PredicateOperator, PropertyKind
from loom_orm.core.exceptions import (
    AdapterError,
    ConnectionError,  # noqa: A004
    ConversionError,
    EngineNotBoundError,
    ExecutionError,
    IncompleteMetadataError,
    LoomError,
    MappingError,
    MetadataError,
    MissingIdentifierError,
    MultipleRowsError,
    NotAnEntityError,
    ParameterBindingError,
    QueryError,
    QueryRenderError,
    UnknownEntityError,
)
from loom_orm.core.registry import EntityRegistry, entity_registry
from loom_orm.entity import Entity
from loom_orm.mapping.mapper import RowMapper
from loom_orm.metadata.fields import column, join_table
from loom_orm.metadata.registry import EntityMetadata, metadata_for
from loom_orm.query.builder import QueryBuilder
from loom_orm.query.state import RenderedQuery

__all__ = [
    # Entities
    "Entity",
    "column",
    "join_table",
    "ModelCollection",
    # Metadata
    "EntityMetadata",
    "metadata_for",
    "EntityRegistry",
    "entity_registry",
    # Query
    "QueryBuilder",
    "RenderedQuery",
    # Mapping
    "RowMapper",
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    "ExecutionResult",
    # Enums
    "DatabaseBackend",
    "JoinType",
    "PredicateOperator",
    "PropertyKind",
    # Exceptions
    "LoomError",
    "MetadataError",
    "MissingIdentifierError",
    "IncompleteMetadataError",
    "UnknownEntityError",
    "NotAnEntityError",
    "QueryError",
    "QueryRenderError",
    "MappingError",
    "ConversionError",
    "ExecutionError",
    "ParameterBindingError",
    "MultipleRowsError",
    "EngineNotBoundError",
    "AdapterError",
    "ConnectionError",
]
