"""Metadata layer - entity declarations, column maps and relationship kinds."""

from __future__ import annotations

from loom_orm.metadata.fields import Column, JoinTable, JoinTableDescriptor, column, join_table
from loom_orm.metadata.registry import (
    EntityMetadata,
    column_property_map,
    metadata_for,
    property_column_map,
    resolve_member,
)

__all__ = [
    "Column",
    "JoinTable",
    "JoinTableDescriptor",
    "column",
    "join_table",
    "EntityMetadata",
    "metadata_for",
    "property_column_map",
    "column_property_map",
    "resolve_member",
]
