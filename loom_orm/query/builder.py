"""Fluent, metadata-driven SQL builder.

The builder accumulates a select list, joins, predicates, ordering, a
limit, or an insert/update payload, and renders exactly one SELECT, INSERT
or UPDATE statement with ``?`` placeholders plus the positional parameter
list in emission order.

Rendering never raises: a failure yields an empty SQL string (see
RenderedQuery). Only construction with an unknown or non-entity class
raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from loom_orm.core.enums import JoinType, PredicateOperator
from loom_orm.core.exceptions import NotAnEntityError, QueryRenderError
from loom_orm.core.registry import entity_registry
from loom_orm.entity import Entity
from loom_orm.mapping.mapper import RowMapper
from loom_orm.metadata.registry import EntityMetadata, metadata_for
from loom_orm.metadata.relationships import collection_target, is_entity_class
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

if TYPE_CHECKING:
    from loom_orm.core.engine import Engine, ExecutionResult
    from loom_orm.mapping.protocol import Mapper

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def resolve_entity(model: Any) -> type[Entity]:
    """Resolve an entity class or class name.

    Raises:
        UnknownEntityError: If a name is not registered.
        NotAnEntityError: If the class is not a concrete Entity subclass.
    """
    if isinstance(model, str):
        model = entity_registry.get(model)
    if not is_entity_class(model):
        raise NotAnEntityError(getattr(model, "__name__", repr(model)))
    return model  # type: ignore[no-any-return]


def _lookup_join_entity(target: Any) -> type[Entity] | None:
    if isinstance(target, str):
        if not entity_registry.has(target):
            return None
        target = entity_registry.get(target)
    return target if is_entity_class(target) else None


def _column_select(alias: str, prop: str, col: str) -> str:
    return f"{alias}.{col} AS {alias}_{prop}"


def _all_column_selects(alias: str, entity: type) -> list[str]:
    return [_column_select(alias, prop, col) for prop, col in metadata_for(entity).columns.items()]


def bound_value(value: Any) -> Any:
    """Convert a value to the parameter sent to the driver.

    Entities bind as their identifier value, dates as formatted text and
    bools as 1/0.
    """
    if isinstance(value, Entity):
        return value.get_identifier_value()
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def persisted_value(value: Any, engine: Engine | None = None) -> Any:
    """Like bound_value, but an associated entity without an identifier is
    saved first and its new identifier is used.
    """
    if isinstance(value, Entity) and value.get_identifier_value() is None:
        value.save(engine)
    return bound_value(value)


class QueryBuilder:
    """Builds one query over a root entity bound to an alias.

    Args:
        model: Root entity class, or its registered name.
        alias: Alias of the root table in the rendered SQL.
        engine: Engine used by get()/get_one()/execute() and by cascading
            saves. Falls back to the engine bound with Entity.bind().

    Raises:
        UnknownEntityError: If *model* is a name that is not registered.
        NotAnEntityError: If *model* is not an Entity subclass.
    """

    def __init__(self, model: type[Entity] | str, alias: str, engine: Engine | None = None) -> None:
        self._model = resolve_entity(model)
        self._alias = alias
        self._engine = engine
        self._state = QueryState()
        self._parameters: list[Any] = []
        self._rendered: RenderedQuery | None = None

    @property
    def model(self) -> type[Entity]:
        return self._model

    @property
    def alias(self) -> str:
        return self._alias

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def metadata(self) -> EntityMetadata:
        return metadata_for(self._model)

    # --- fluent state changes ---

    def reset(self) -> QueryBuilder:
        """Drop everything accumulated so far."""
        self._state = QueryState()
        self._parameters = []
        self._rendered = None
        return self

    def select(self, columns: Iterable[str] | None = None) -> QueryBuilder:
        """Set the select list; ``None``, ``[]`` and ``["*"]`` select everything."""
        self._state.selects = list(columns) if columns else []
        return self

    def inner_join(
        self,
        model: type[Entity] | str,
        alias: str,
        conditions: Iterable[str] | None = None,
    ) -> QueryBuilder:
        """Add an INNER JOIN; without conditions the root's junction table is used."""
        return self._add_join(model, alias, conditions, JoinType.INNER)

    def left_join(
        self,
        model: type[Entity] | str,
        alias: str,
        conditions: Iterable[str] | None = None,
    ) -> QueryBuilder:
        """Add a LEFT JOIN; without conditions the root's junction table is used."""
        return self._add_join(model, alias, conditions, JoinType.LEFT)

    def where(self, target: str, value: Any) -> QueryBuilder:
        return self._add_predicate(target, PredicateOperator.EQUALS, (value,))

    def where_not(self, target: str, value: Any) -> QueryBuilder:
        return self._add_predicate(target, PredicateOperator.NOT_EQUALS, (value,))

    def where_in(self, target: str, values: Iterable[Any]) -> QueryBuilder:
        return self._add_predicate(target, PredicateOperator.IN, tuple(values))

    def where_not_in(self, target: str, values: Iterable[Any]) -> QueryBuilder:
        return self._add_predicate(target, PredicateOperator.NOT_IN, tuple(values))

    def order_by(self, column: str, direction: str = "ASC") -> QueryBuilder:
        self._state.order_bys.append(OrderBy(target=column, direction=direction))
        return self

    def limit(self, limit: int) -> QueryBuilder:
        """Cap the row count; any value that was set is rendered, ``0`` included."""
        self._state.limit = limit
        return self

    def insert(self, entity: Entity) -> QueryBuilder:
        """Render an INSERT of *entity* instead of a SELECT."""
        self._state.insert = entity
        return self

    def update(self, entity: Entity) -> QueryBuilder:
        """Render an UPDATE of *entity* instead of a SELECT."""
        self._state.update = entity
        return self

    def _add_join(
        self,
        model: type[Entity] | str,
        alias: str,
        conditions: Iterable[str] | None,
        kind: JoinType,
    ) -> QueryBuilder:
        self._state.joins.append(
            JoinDescriptor(target=model, alias=alias, conditions=tuple(conditions or ()), kind=kind)
        )
        return self

    def _add_predicate(
        self, target: str, operator: PredicateOperator, values: tuple[Any, ...]
    ) -> QueryBuilder:
        self._state.predicates.append(Predicate(target=target, operator=operator, values=values))
        return self

    # --- resolved join plan ---

    @property
    def joins(self) -> list[ResolvedJoin]:
        """Joins that will be rendered: inner joins first, then left joins.

        Joins to unknown or non-entity classes, joins whose alias is already
        taken, and condition-less joins without a matching junction table
        are skipped.
        """
        ordered = [j for j in self._state.joins if j.kind is JoinType.INNER]
        ordered += [j for j in self._state.joins if j.kind is JoinType.LEFT]

        taken = {self._alias}
        resolved: list[ResolvedJoin] = []
        for join in ordered:
            entity = _lookup_join_entity(join.target)
            if entity is None or join.alias in taken:
                logger.debug("Skipping join %r AS %s", join.target, join.alias)
                continue

            if join.conditions:
                conditions = tuple(parse_condition(c) for c in join.conditions)
                resolved.append(ResolvedJoin(entity, join.alias, join.kind, conditions=conditions))
            else:
                traversal = self._find_traversal(entity, join.alias)
                if traversal is None or traversal.descriptor.junction_alias in taken:
                    logger.debug("No junction table from %s to %s", self._model.__name__, entity)
                    continue
                taken.add(traversal.descriptor.junction_alias)
                resolved.append(ResolvedJoin(entity, join.alias, join.kind, traversal=traversal))
            taken.add(join.alias)
        return resolved

    @property
    def join_table_traversals(self) -> list[JoinTableTraversal]:
        return [join.traversal for join in self.joins if join.traversal is not None]

    def _find_traversal(self, entity: type, alias: str) -> JoinTableTraversal | None:
        for prop, descriptor in self.metadata.join_tables.items():
            target = collection_target(self._model, prop)
            if target is None or issubclass(entity, target):
                return JoinTableTraversal(property_name=prop, alias=alias, descriptor=descriptor)
        return None

    # --- rendering ---

    def render(self) -> RenderedQuery:
        """Render the query.

        Every call rebuilds the parameter list. Any failure is captured
        in the returned value instead of being raised.
        """
        self._parameters = []
        try:
            if self._state.insert is not None:
                sql = self._render_insert(self._state.insert)
            elif self._state.update is not None:
                sql = self._render_update(self._state.update)
            else:
                sql = self._render_select()
        except Exception as exc:
            logger.debug("Rendering query over %s failed: %s", self._model.__name__, exc)
            self._rendered = RenderedQuery(sql="", parameters=list(self._parameters), error=exc)
        else:
            self._rendered = RenderedQuery(sql=sql, parameters=list(self._parameters))
        return self._rendered

    def get_query_string(self) -> str:
        return self.render().sql

    def get_parameters(self) -> list[Any]:
        """Parameters of the most recent render (rendering first if needed)."""
        rendered = self._rendered if self._rendered is not None else self.render()
        return list(rendered.parameters)

    def _render_select(self) -> str:
        joins = self.joins
        aliases: dict[str, type] = {self._alias: self._model}
        aliases.update((join.alias, join.entity) for join in joins)

        sql = self._select_partial(joins, aliases)
        sql += f" FROM {self.metadata.qualified_table} {self._alias}"
        sql += self._joins_partial(joins, aliases)
        sql += self._where_partial(aliases)
        sql += self._order_by_partial(aliases)
        if self._state.limit is not None:
            sql += f" LIMIT {int(self._state.limit)}"
        return sql

    def _select_partial(self, joins: list[ResolvedJoin], aliases: dict[str, type]) -> str:
        selects = self._state.selects
        if not selects or selects == ["*"]:
            parts = _all_column_selects(self._alias, self._model)
            for join in joins:
                parts.extend(_all_column_selects(join.alias, join.entity))
        else:
            parts = []
            for token in selects:
                parts.extend(self._select_token(token, aliases))
        return f"SELECT {', '.join(parts)}"

    def _select_token(self, token: str, aliases: dict[str, type]) -> list[str]:
        resolved = self.metadata.resolve(token)
        if resolved is not None:
            return [_column_select(self._alias, *resolved)]

        ref = parse_member(token)
        if ref is not None and ref.alias in aliases:
            resolved = metadata_for(aliases[ref.alias]).resolve(ref.member)
            if resolved is not None:
                return [_column_select(ref.alias, *resolved)]

        if token == "*":
            return _all_column_selects(self._alias, self._model)
        if token in aliases:
            return _all_column_selects(token, aliases[token])
        return [token]

    def _resolve_ref(self, ref: MemberRef, aliases: dict[str, type]) -> str | None:
        entity = aliases.get(ref.alias)
        if entity is None:
            return None
        resolved = metadata_for(entity).resolve(ref.member)
        if resolved is None:
            return None
        return f"{ref.alias}.{resolved[1]}"

    def _resolve_target(self, target: str, aliases: dict[str, type]) -> str | None:
        ref = parse_member(target) or MemberRef(alias=self._alias, member=target)
        return self._resolve_ref(ref, aliases)

    def _render_condition(self, condition: Condition, aliases: dict[str, type]) -> str:
        parts: list[str] = []
        for token in condition.tokens:
            if isinstance(token, MemberRef):
                parts.append(self._resolve_ref(token, aliases) or str(token))
            else:
                parts.append(token)
        return " ".join(parts)

    def _joins_partial(self, joins: list[ResolvedJoin], aliases: dict[str, type]) -> str:
        sql = ""
        for join in joins:
            table = metadata_for(join.entity).qualified_table
            keyword = join.kind.value
            if join.traversal is not None:
                d = join.traversal.descriptor
                sql += (
                    f" {keyword} {d.junction_schema}.{d.junction_table} {d.junction_alias}"
                    f" ON {self._alias}.{d.local_column} = {d.junction_alias}.{d.local_column}"
                )
                sql += (
                    f" {keyword} {table} {join.alias}"
                    f" ON {d.junction_alias}.{d.foreign_column} = {join.alias}.{d.foreign_column}"
                )
            else:
                conditions = " AND ".join(self._render_condition(c, aliases) for c in join.conditions)
                sql += f" {keyword} {table} {join.alias} ON {conditions}"
        return sql

    def _where_partial(self, aliases: dict[str, type]) -> str:
        clauses: list[str] = []
        for predicate in self._state.predicates:
            column = self._resolve_target(predicate.target, aliases)
            if column is None:
                logger.debug("Dropping predicate on unresolved %r", predicate.target)
                continue

            operator = predicate.operator
            if not operator.is_list:
                clauses.append(f"{column} {operator.value} ?")
                self._parameters.append(bound_value(predicate.values[0]))
            elif not predicate.values:
                clauses.append("1 = 0" if operator is PredicateOperator.IN else "1 = 1")
            else:
                placeholders = ", ".join("?" for _ in predicate.values)
                clauses.append(f"{column} {operator.value} ({placeholders})")
                self._parameters.extend(bound_value(value) for value in predicate.values)

        return f" WHERE {' AND '.join(clauses)}" if clauses else ""

    def _order_by_partial(self, aliases: dict[str, type]) -> str:
        clauses: list[str] = []
        for order in self._state.order_bys:
            column = self._resolve_target(order.target, aliases)
            if column is not None:
                clauses.append(f"{column} {order.direction}")
        return f" ORDER BY {', '.join(clauses)}" if clauses else ""

    def _render_insert(self, entity: Entity) -> str:
        table = self.metadata.qualified_table
        metadata = metadata_for(type(entity))

        columns: list[str] = []
        for prop, col in metadata.columns.items():
            if prop == metadata.identifier:
                continue
            self._parameters.append(persisted_value(getattr(entity, prop), self._engine))
            columns.append(col)

        placeholders = ",".join("?" for _ in columns)
        return f"INSERT INTO {table} ({','.join(columns)}) VALUES ({placeholders})"

    def _render_update(self, entity: Entity) -> str:
        table = self.metadata.qualified_table
        metadata = metadata_for(type(entity))
        identifier, identifier_column = metadata.require_identifier()

        updates: list[str] = []
        for prop, col in metadata.columns.items():
            if prop == identifier:
                continue
            self._parameters.append(persisted_value(getattr(entity, prop), self._engine))
            updates.append(f"{col} = ?")

        self._parameters.append(getattr(entity, identifier))
        return f"UPDATE {table} SET {', '.join(updates)} WHERE {identifier_column} = ?"

    # --- execution ---

    def get(self) -> list[Entity]:
        """Run the SELECT and map every row to a root entity."""
        engine = Entity.resolve_engine(self._engine)
        rendered = self._render_or_raise()
        rows = engine.fetch_all(rendered.sql, rendered.parameters)
        mapper: Mapper[Entity] = RowMapper(self)
        return mapper.map_many(rows)

    def get_one(self) -> Entity | None:
        """Run the SELECT and return the first mapped entity, if any."""
        entities = self.get()
        return entities[0] if entities else None

    def execute(self) -> ExecutionResult:
        """Run an INSERT or UPDATE through the engine."""
        engine = Entity.resolve_engine(self._engine)
        rendered = self._render_or_raise()
        return engine.execute(rendered.sql, rendered.parameters)

    def _render_or_raise(self) -> RenderedQuery:
        rendered = self.render()
        if not rendered.ok:
            raise QueryRenderError(self._model.__name__, rendered.error)
        return rendered
