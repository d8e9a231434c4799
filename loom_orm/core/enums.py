"""Enumerations shared by the metadata, query and mapping layers."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    MYSQL = "mysql"


class JoinType(Enum):
    """SQL join flavours the builder renders."""

    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"


class PredicateOperator(Enum):
    """Predicate operators; the value is the SQL operator text."""

    EQUALS = "="
    NOT_EQUALS = "!="
    IN = "IN"
    NOT_IN = "NOT IN"

    @property
    def is_list(self) -> bool:
        return self in (PredicateOperator.IN, PredicateOperator.NOT_IN)


class PropertyKind(Enum):
    """Semantic kind of a mapped property."""

    SCALAR = "scalar"
    ENTITY = "entity"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    MANY_TO_MANY = "many_to_many"
