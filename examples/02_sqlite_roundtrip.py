"""
Example 02: SQLite Round Trip

This example saves an entity graph into SQLite (one attached database per
schema), then loads it back through a joined select.
"""

from __future__ import annotations

from loom_orm import ConnectionConfig, Engine, Entity, column


class Role(Entity, schema="Security", table="ublRole"):
    id: int = column("intRoleId", identifier=True)
    name: str = column("strRoleName")


class User(Entity, schema="Security", table="tblUser"):
    id: int = column("intUserId", identifier=True)
    username: str = column("strUsername")
    role: Role = column("intRoleId")


def main():
    config = ConnectionConfig(
        driver="sqlite",
        database=":memory:",
        extra={"schemas": {"Security": ":memory:"}},
    )
    engine = Engine.from_config(config)
    engine.execute(
        "CREATE TABLE Security.ublRole (intRoleId INTEGER PRIMARY KEY, strRoleName TEXT)"
    )
    engine.execute(
        "CREATE TABLE Security.tblUser "
        "(intUserId INTEGER PRIMARY KEY, strUsername TEXT, intRoleId INTEGER)"
    )
    Entity.bind(engine)

    print("=== SQLite Round Trip ===\n")

    # The unsaved role is inserted first and its new id is stored on the user row
    alice = User(username="alice", role=Role(name="Administrator")).save()
    print(f"Saved {alice!r} with {alice.role!r}\n")

    users = User.select().inner_join(Role, "r", ["u.role = r.id"]).where("r.name", "Administrator").get()
    for user in users:
        print(f"  - {user.username} ({user.role.name})")

    engine.close()


if __name__ == "__main__":
    main()
