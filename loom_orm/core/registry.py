"""Entity Registry - process-wide lookup of entity classes by name.

Naming convention:
    class Package in module app.models -> "Package" and "app.models.Package"

Entity subclasses register themselves when they are defined, so builders
can be constructed from a class name as well as from the class itself.
A later registration under the same name replaces the earlier one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loom_orm.core.exceptions import UnknownEntityError

if TYPE_CHECKING:
    from loom_orm.entity import Entity


class EntityRegistry:
    """Maps simple and module-qualified class names to entity classes."""

    def __init__(self) -> None:
        self._entities: dict[str, type[Entity]] = {}

    def register(self, entity: type[Entity]) -> None:
        """Register *entity* under its simple and its qualified name."""
        self._entities[entity.__name__] = entity
        self._entities[f"{entity.__module__}.{entity.__qualname__}"] = entity

    def get(self, entity_name: str) -> type[Entity]:
        """Look up an entity class by simple or qualified name.

        Args:
            entity_name: Class name (e.g., "Package") or qualified name
                (e.g., "app.models.Package").

        Returns:
            The registered entity class.

        Raises:
            UnknownEntityError: If no entity matches the given name.
        """
        try:
            return self._entities[entity_name]
        except KeyError:
            raise UnknownEntityError(entity_name) from None

    def has(self, entity_name: str) -> bool:
        """Check if an entity name is registered."""
        return entity_name in self._entities

    def namespace(self) -> dict[str, type[Entity]]:
        """Simple-name namespace used to resolve forward references."""
        return {name: cls for name, cls in self._entities.items() if "." not in name}

    @property
    def entity_names(self) -> list[str]:
        """List all registered names, sorted alphabetically."""
        return sorted(self._entities.keys())

    def __len__(self) -> int:
        """Number of registered names."""
        return len(self._entities)


entity_registry = EntityRegistry()
