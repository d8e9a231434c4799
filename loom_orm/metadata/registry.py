"""Entity metadata resolution.

Metadata is derived from the class declarations alone: no instance and no
I/O is needed, and the result never changes for the lifetime of a class,
so it is cached per class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from loom_orm.core.exceptions import IncompleteMetadataError, MissingIdentifierError
from loom_orm.metadata.fields import Column, JoinTable, JoinTableDescriptor


@dataclass(frozen=True)
class EntityMetadata:
    """Schema, table, identifier and property/column layout of one entity class."""

    entity: type
    schema: str | None
    table: str | None
    identifier: str | None
    identifier_column: str | None
    columns: dict[str, str] = field(default_factory=dict)  # property -> column
    join_tables: dict[str, JoinTableDescriptor] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.entity.__name__

    @property
    def qualified_table(self) -> str:
        """``schema.table``, or IncompleteMetadataError when either is missing."""
        if not self.schema:
            raise IncompleteMetadataError(self.name, "schema")
        if not self.table:
            raise IncompleteMetadataError(self.name, "table")
        return f"{self.schema}.{self.table}"

    def require_identifier(self) -> tuple[str, str]:
        """Return ``(identifier_property, identifier_column)``.

        Raises:
            MissingIdentifierError: If no property is marked as identifier.
        """
        if self.identifier is None or self.identifier_column is None:
            raise MissingIdentifierError(self.name)
        return self.identifier, self.identifier_column

    def resolve(self, name: str) -> tuple[str, str] | None:
        """Resolve a property or column name to ``(property, column)``.

        Property names win over column names.
        """
        if name in self.columns:
            return name, self.columns[name]
        for prop, col in self.columns.items():
            if col == name:
                return prop, col
        return None


@lru_cache(maxsize=None)
def metadata_for(entity: type) -> EntityMetadata:
    """Build (once) the metadata for *entity*.

    Columns are listed in declaration order, with columns inherited from
    base classes first.
    """
    columns: dict[str, str] = {}
    join_tables: dict[str, JoinTableDescriptor] = {}
    identifier: str | None = None
    identifier_column: str | None = None

    for klass in reversed(entity.__mro__):
        for attr_name, attr_value in vars(klass).items():
            if isinstance(attr_value, Column):
                columns[attr_name] = attr_value.name
                if attr_value.identifier and identifier is None:
                    identifier = attr_name
                    identifier_column = attr_value.name
            elif isinstance(attr_value, JoinTable):
                join_tables[attr_name] = attr_value.descriptor

    return EntityMetadata(
        entity=entity,
        schema=getattr(entity, "__schema__", None),
        table=getattr(entity, "__table__", None),
        identifier=identifier,
        identifier_column=identifier_column,
        columns=columns,
        join_tables=join_tables,
    )


def property_column_map(entity: type) -> dict[str, str]:
    """Ordered ``property -> column`` map of *entity*."""
    return dict(metadata_for(entity).columns)


def column_property_map(entity: type) -> dict[str, str]:
    """Ordered ``column -> property`` map of *entity*."""
    return {col: prop for prop, col in metadata_for(entity).columns.items()}


def resolve_member(entity: type, name: str) -> tuple[str, str] | None:
    """Resolve a property or column name of *entity* to ``(property, column)``."""
    return metadata_for(entity).resolve(name)
