"""Query state records.

Plain dataclasses describing what a QueryBuilder has accumulated, and the
frozen records derived from it at render time. The RowMapper reads the
same records to rebuild entities.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loom_orm.core.enums import JoinType, PredicateOperator
from loom_orm.metadata.fields import JoinTableDescriptor
from loom_orm.query.conditions import Condition


@dataclass(frozen=True)
class JoinDescriptor:
    """A join as requested by the caller."""

    target: Any  # entity class or entity class name
    alias: str
    conditions: tuple[str, ...]
    kind: JoinType


@dataclass(frozen=True)
class JoinTableTraversal:
    """A join resolved through the root entity's junction table."""

    property_name: str
    alias: str
    descriptor: JoinTableDescriptor


@dataclass(frozen=True)
class ResolvedJoin:
    """A join that survived validation and will be rendered."""

    entity: type
    alias: str
    kind: JoinType
    conditions: tuple[Condition, ...] = ()
    traversal: JoinTableTraversal | None = None


@dataclass(frozen=True)
class Predicate:
    """One WHERE predicate, kept in call order."""

    target: str
    operator: PredicateOperator
    values: tuple[Any, ...]


@dataclass(frozen=True)
class OrderBy:
    target: str
    direction: str


@dataclass
class QueryState:
    """Mutable state owned by one QueryBuilder."""

    selects: list[str] = field(default_factory=list)
    joins: list[JoinDescriptor] = field(default_factory=list)
    predicates: list[Predicate] = field(default_factory=list)
    order_bys: list[OrderBy] = field(default_factory=list)
    limit: int | None = None
    insert: Any = None
    update: Any = None


@dataclass(frozen=True)
class RenderedQuery:
    """Result of rendering: SQL text, positional parameters, and the error if any.

    A failed render carries an empty ``sql`` and whatever parameters had
    been collected before the failure.
    """

    sql: str
    parameters: list[Any]
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.sql)
