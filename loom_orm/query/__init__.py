"""Query layer - fluent SQL builder over entity metadata."""

from __future__ import annotations

from loom_orm.query.builder import QueryBuilder
from loom_orm.query.conditions import Condition, MemberRef, parse_condition, parse_member
from loom_orm.query.state import (
    JoinDescriptor,
    JoinTableTraversal,
    OrderBy,
    Predicate,
    QueryState,
    RenderedQuery,
    ResolvedJoin,
)

__all__ = [
    "QueryBuilder",
    "RenderedQuery",
    "QueryState",
    "JoinDescriptor",
    "ResolvedJoin",
    "JoinTableTraversal",
    "Predicate",
    "OrderBy",
    "Condition",
    "MemberRef",
    "parse_condition",
    "parse_member",
]
