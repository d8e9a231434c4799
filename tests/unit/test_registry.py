"""Unit tests for EntityRegistry."""

from __future__ import annotations

import pytest

from loom_orm import Entity, EntityRegistry, UnknownEntityError, column, entity_registry
from tests.models import Package


class TestEntityRegistry:
    def test_entities_register_on_definition(self) -> None:
        assert entity_registry.get("Package") is Package
        assert entity_registry.get("tests.models.Package") is Package

    def test_unknown_name(self) -> None:
        with pytest.raises(UnknownEntityError) as exc_info:
            entity_registry.get("NoSuchEntity")
        assert exc_info.value.entity_name == "NoSuchEntity"

    def test_has(self) -> None:
        assert entity_registry.has("Package")
        assert not entity_registry.has("NoSuchEntity")

    def test_namespace_holds_simple_names(self) -> None:
        namespace = entity_registry.namespace()
        assert namespace["Package"] is Package
        assert all("." not in name for name in namespace)

    def test_register_replaces_same_name(self) -> None:
        registry = EntityRegistry()

        class Widget(Entity, schema="Shop", table="tblWidget"):
            id: int = column("intWidgetId", identifier=True)

        first = Widget

        class Widget(Entity, schema="Shop", table="tblWidgetV2"):  # type: ignore[no-redef]  # noqa: F811
            id: int = column("intWidgetId", identifier=True)

        registry.register(first)
        registry.register(Widget)
        assert registry.get("Widget") is Widget
        assert len(registry) == 2
        assert registry.entity_names == sorted(registry.entity_names)
