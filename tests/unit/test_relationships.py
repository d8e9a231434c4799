"""Unit tests for property classification."""

from __future__ import annotations

from datetime import date

import pytest

from loom_orm import Entity, PropertyKind, column
from loom_orm.metadata.relationships import (
    accepts,
    collection_target,
    is_entity_class,
    property_kind,
    property_type,
)
from tests.models import Package, PackageType, Permission, Role, User


class Shipment(Entity, schema="Logistics", table="tblShipment"):
    id: int = column("intShipmentId", identifier=True)
    shipped_on: date = column("dteShipped")
    carrier: Carrier | None = column("intCarrierId")


class Carrier(Entity, schema="Logistics", table="ublCarrier"):
    id: int = column("intCarrierId", identifier=True)


class TestPropertyKind:
    @pytest.mark.parametrize(
        ("entity", "prop", "expected"),
        [
            (Package, "id", PropertyKind.SCALAR),
            (Package, "name", PropertyKind.SCALAR),
            (Package, "package_type", PropertyKind.ENTITY),
            (Package, "owner", PropertyKind.ENTITY),
            (User, "role", PropertyKind.ENTITY),
            (Role, "permissions", PropertyKind.MANY_TO_MANY),
            (Permission, "is_active", PropertyKind.BOOLEAN),
            (Permission, "created_at", PropertyKind.DATETIME),
            (Shipment, "shipped_on", PropertyKind.DATETIME),
        ],
    )
    def test_kinds(self, entity: type, prop: str, expected: PropertyKind) -> None:
        assert property_kind(entity, prop) is expected

    def test_optional_entity_reference_is_unwrapped(self) -> None:
        assert property_type(Shipment, "carrier") is Carrier
        assert property_kind(Shipment, "carrier") is PropertyKind.ENTITY

    def test_undeclared_property(self) -> None:
        assert property_type(Package, "missing") is None
        assert property_kind(Package, "missing") is PropertyKind.SCALAR


class TestEntityClasses:
    def test_entity_base_is_not_an_entity_class(self) -> None:
        assert is_entity_class(Package)
        assert not is_entity_class(Entity)
        assert not is_entity_class(object)
        assert not is_entity_class("Package")

    def test_collection_target(self) -> None:
        assert collection_target(Role, "permissions") is Permission
        assert collection_target(Package, "name") is None

    def test_accepts(self) -> None:
        assert accepts(Package, "package_type", PackageType())
        assert not accepts(Package, "package_type", User())
        assert not accepts(Package, "name", PackageType())
