"""Declarative column and join-table definitions for entity classes.

Example:
    >>> class User(Entity, schema="Security", table="tblUser"):
    ...     id: int = column("intUserId", identifier=True)
    ...     username: str = column("strUsername")
    ...     roles: ModelCollection[Role] = join_table(
    ...         "tblUserRole",
    ...         schema="Security",
    ...         alias="ur",
    ...         local_column="intUserId",
    ...         foreign_column="intRoleId",
    ...     )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loom_orm.collection import ModelCollection


@dataclass(frozen=True)
class JoinTableDescriptor:
    """Many-to-many junction table linking an entity to a target entity."""

    junction_schema: str
    junction_table: str
    junction_alias: str
    local_column: str
    foreign_column: str


class Column:
    """Descriptor mapping an entity property to a physical column.

    Class-level access returns the descriptor itself, which is how the
    metadata registry discovers columns without an instance.
    """

    def __init__(self, name: str, *, identifier: bool = False, default: Any = None) -> None:
        self.name = name
        self.identifier = identifier
        self.default = default
        self.property_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.property_name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(self.property_name, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        instance.__dict__[self.property_name] = value

    def __repr__(self) -> str:
        marker = ", identifier=True" if self.identifier else ""
        return f"Column({self.name!r}{marker})"


class JoinTable:
    """Descriptor for a collection property reached through a junction table.

    The collection is created lazily on first access.
    """

    def __init__(self, descriptor: JoinTableDescriptor) -> None:
        self.descriptor = descriptor
        self.property_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.property_name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        collection = instance.__dict__.get(self.property_name)
        if collection is None:
            collection = ModelCollection()
            instance.__dict__[self.property_name] = collection
        return collection

    def __set__(self, instance: Any, value: Any) -> None:
        if not isinstance(value, ModelCollection):
            value = ModelCollection(value)
        instance.__dict__[self.property_name] = value

    def __repr__(self) -> str:
        return f"JoinTable({self.descriptor.junction_schema}.{self.descriptor.junction_table})"


def column(name: str, *, identifier: bool = False, default: Any = None) -> Any:
    """Declare a mapped column.

    Args:
        name: Physical column name.
        identifier: Marks the entity's primary key property.
        default: Value returned while the property is unset.
    """
    return Column(name, identifier=identifier, default=default)


def join_table(
    table: str,
    *,
    schema: str,
    alias: str,
    local_column: str,
    foreign_column: str,
) -> Any:
    """Declare a many-to-many collection through a junction table.

    Args:
        table: Junction table name.
        schema: Junction table schema.
        alias: Alias the junction table gets in rendered joins.
        local_column: Column shared by the owning entity and the junction table.
        foreign_column: Column shared by the junction table and the target entity.
    """
    return JoinTable(
        JoinTableDescriptor(
            junction_schema=schema,
            junction_table=table,
            junction_alias=alias,
            local_column=local_column,
            foreign_column=foreign_column,
        )
    )
