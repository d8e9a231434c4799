"""
Example 01: Query Builder

This example declares a few entities and prints the SQL the QueryBuilder
renders for them. No database is needed to render queries.
"""

from __future__ import annotations

from loom_orm import Entity, ModelCollection, QueryBuilder, column, join_table


class PackageType(Entity, schema="Application", table="ublPackageType"):
    id: int = column("intPackageTypeId", identifier=True)
    name: str = column("strPackageTypeName")


class Package(Entity, schema="Application", table="tblPackage"):
    id: int = column("intPackageId", identifier=True)
    name: str = column("strPackageName")
    package_type: PackageType = column("intPackageTypeId")


class Permission(Entity, schema="Security", table="ublPermission"):
    id: int = column("intPermissionId", identifier=True)
    name: str = column("strPermissionName")


class Role(Entity, schema="Security", table="ublRole"):
    id: int = column("intRoleId", identifier=True)
    name: str = column("strRoleName")
    permissions: ModelCollection[Permission] = join_table(
        "tblRolePermission",
        schema="Security",
        alias="rp",
        local_column="intRoleId",
        foreign_column="intPermissionId",
    )


def show(title: str, builder: QueryBuilder) -> None:
    rendered = builder.render()
    print(f"{title}:\n  {rendered.sql}\n  parameters: {rendered.parameters}\n")


def main():
    print("=== Query Builder ===\n")

    show("Every column", Package.select())

    show(
        "Inner join with a predicate",
        Package.select()
        .inner_join(PackageType, "pt", ["p.package_type = pt.id"])
        .where_in("pt.name", ["Library", "Tool"])
        .order_by("p.name")
        .limit(10),
    )

    show("Join table traversal", Role.select().left_join(Permission, "pm"))

    show("Insert", QueryBuilder(PackageType, "pt").insert(PackageType(name="Library")))

    show("Update", QueryBuilder(PackageType, "pt").update(PackageType(id=3, name="Tool")))


if __name__ == "__main__":
    main()
