"""Row mapper: flat ``alias_property`` rows back into entity graphs.

The mapper reads the same builder state that rendered the SQL: the root
alias, the active joins and the join-table traversals. Each row yields one
root entity; associations are attached along the join conditions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from loom_orm.core.enums import PropertyKind
from loom_orm.core.exceptions import ConversionError
from loom_orm.mapping.convert import convert_value
from loom_orm.metadata.registry import metadata_for
from loom_orm.metadata.relationships import accepts, property_kind, property_type

if TYPE_CHECKING:
    from loom_orm.entity import Entity
    from loom_orm.query.builder import QueryBuilder
    from loom_orm.query.conditions import Condition
    from loom_orm.query.state import ResolvedJoin

logger = logging.getLogger(__name__)


def group_row(row: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Split ``alias_name`` keys on the first underscore into per-alias groups."""
    groups: dict[str, dict[str, Any]] = {}
    for key, value in row.items():
        alias, sep, name = key.partition("_")
        if sep and alias and name:
            groups.setdefault(alias, {})[name] = value
    return groups


class RowMapper:
    """Rebuilds root entities (and their associations) from result rows.

    Args:
        builder: The QueryBuilder whose rendered SELECT produced the rows.
    """

    def __init__(self, builder: QueryBuilder) -> None:
        self._model = builder.model
        self._alias = builder.alias
        self._joins: list[ResolvedJoin] = builder.joins
        self._kinds: dict[type, dict[str, PropertyKind]] = {}

    def map_one(self, row: dict[str, Any]) -> Entity:
        """Map a single row to a root entity with its associations attached."""
        groups = group_row(row)

        root = self._model()
        for name, value in groups.get(self._alias, {}).items():
            if name in metadata_for(self._model).columns:
                self._assign(root, name, value)

        instances: dict[str, Entity] = {self._alias: root}
        for join in self._joins:
            group = groups.get(join.alias)
            if not group or all(value is None for value in group.values()):
                continue
            instances[join.alias] = self._hydrate(join.entity, group)

        self._attach(root, instances)
        return root

    def map_many(self, rows: list[dict[str, Any]]) -> list[Entity]:
        """Map every row; one root entity per row, no deduplication."""
        return [self.map_one(row) for row in rows]

    def map_aggregates(self, rows: list[dict[str, Any]]) -> list[Entity]:
        """Map rows and collapse roots sharing an identifier value.

        Join-table collections of collapsed roots accumulate in row order,
        without repeating a member. Roots without an identifier value are
        never collapsed.
        """
        identifier = metadata_for(self._model).identifier
        traversals = [join.traversal for join in self._joins if join.traversal is not None]

        roots: dict[Any, Entity] = {}
        for row in rows:
            entity = self.map_one(row)
            key = getattr(entity, identifier) if identifier is not None else None
            if key is None:
                key = ("__unkeyed__", id(entity))
            if key not in roots:
                roots[key] = entity
                continue

            existing = roots[key]
            for traversal in traversals:
                collection = getattr(existing, traversal.property_name)
                for member in getattr(entity, traversal.property_name):
                    if not collection.contains(member):
                        collection.add(member)

        return list(roots.values())

    def _kinds_for(self, entity: type) -> dict[str, PropertyKind]:
        if entity not in self._kinds:
            metadata = metadata_for(entity)
            names = list(metadata.columns) + list(metadata.join_tables)
            self._kinds[entity] = {name: property_kind(entity, name) for name in names}
        return self._kinds[entity]

    def _assign(self, instance: Entity, name: str, value: Any) -> None:
        entity = type(instance)
        kind = self._kinds_for(entity).get(name, PropertyKind.SCALAR)
        if kind in (PropertyKind.ENTITY, PropertyKind.MANY_TO_MANY):
            return
        try:
            target = property_type(entity, name) if kind is PropertyKind.DATETIME else None
            instance.set_property(name, convert_value(name, kind, value, target))
        except (ConversionError, AttributeError, TypeError, ValueError) as exc:
            logger.debug("Leaving %s.%s unset: %s", entity.__name__, name, exc)

    def _hydrate(self, entity: type[Entity], group: dict[str, Any]) -> Entity:
        instance = entity()
        for prop, col in metadata_for(entity).columns.items():
            if col in group:
                self._assign(instance, prop, group[col])
            elif prop in group:
                self._assign(instance, prop, group[prop])
        return instance

    def _attach(self, root: Entity, instances: dict[str, Entity]) -> None:
        for join in self._joins:
            joined = instances.get(join.alias)
            if joined is None:
                continue
            if join.traversal is not None:
                getattr(root, join.traversal.property_name).add(joined)
                continue
            for condition in join.conditions:
                if self._attach_by_condition(condition, join, joined, instances):
                    break

    def _attach_by_condition(
        self,
        condition: Condition,
        join: ResolvedJoin,
        joined: Entity,
        instances: dict[str, Entity],
    ) -> bool:
        references = condition.references
        join_side = [ref for ref in references if ref.alias == join.alias]
        owner_side = [ref for ref in references if ref.alias != join.alias and ref.alias in instances]

        for owner_ref in owner_side:
            owner = instances[owner_ref.alias]
            member = self._entity_member(type(owner), owner_ref.member, joined)
            if member is not None:
                owner.set_property(member, joined)
                return True
            for join_ref in join_side:
                back = self._entity_member(join.entity, join_ref.member, owner)
                if back is not None:
                    joined.set_property(back, owner)
                    return True
        return False

    def _entity_member(self, entity: type, name: str, value: Entity) -> str | None:
        """Property of *entity* named by *name* (property or column) that can hold *value*."""
        resolved = metadata_for(entity).resolve(name)
        if resolved is None:
            return None
        prop = resolved[0]
        if self._kinds_for(entity).get(prop) is not PropertyKind.ENTITY:
            return None
        return prop if accepts(entity, prop, value) else None
