"""Entity base class.

Example:
    >>> class Package(Entity, schema="Application", table="tblPackage"):
    ...     id: int = column("intPackageId", identifier=True)
    ...     name: str = column("strPackageName")
    ...     package_type: PackageType = column("intPackageTypeId")
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar

from loom_orm.core.engine import Engine
from loom_orm.core.exceptions import EngineNotBoundError
from loom_orm.core.registry import entity_registry
from loom_orm.metadata.registry import metadata_for

if TYPE_CHECKING:
    from loom_orm.query.builder import QueryBuilder


class Entity:
    """Base class for classes mapped to a database table.

    Subclasses pass ``schema`` and ``table`` as class keywords and declare
    properties with ``column()`` and ``join_table()``. Every subclass is
    registered by name on definition.
    """

    __schema__: ClassVar[str | None] = None
    __table__: ClassVar[str | None] = None
    _engine: ClassVar[Engine | None] = None

    def __init_subclass__(
        cls,
        *,
        schema: str | None = None,
        table: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if schema is not None:
            cls.__schema__ = schema
        if table is not None:
            cls.__table__ = table
        entity_registry.register(cls)

    def __init__(self, **values: Any) -> None:
        for name, value in values.items():
            self.set_property(name, value)

    def __repr__(self) -> str:
        identifier = metadata_for(type(self)).identifier
        if identifier is None:
            return f"<{type(self).__name__}>"
        return f"<{type(self).__name__} {identifier}={getattr(self, identifier)!r}>"

    # --- class-level metadata ---

    @classmethod
    def get_schema_name(cls) -> str | None:
        return metadata_for(cls).schema

    @classmethod
    def get_table_name(cls) -> str | None:
        return metadata_for(cls).table

    @classmethod
    def get_identifier(cls) -> str:
        """Name of the identifier property.

        Raises:
            MissingIdentifierError: If no property is marked as identifier.
        """
        return metadata_for(cls).require_identifier()[0]

    @classmethod
    def get_identifier_column(cls) -> str:
        """Physical column of the identifier property.

        Raises:
            MissingIdentifierError: If no property is marked as identifier.
        """
        return metadata_for(cls).require_identifier()[1]

    @classmethod
    def default_alias(cls) -> str:
        """Lowercased capitals of the class name: ``PackageType`` -> ``pt``."""
        capitals = re.findall(r"[A-Z]", cls.__name__)
        return "".join(capitals).lower() or cls.__name__[:1].lower()

    # --- engine binding ---

    @staticmethod
    def bind(engine: Engine) -> None:
        """Bind the process-wide engine used when none is passed explicitly."""
        Entity._engine = engine

    @staticmethod
    def unbind() -> None:
        Entity._engine = None

    @staticmethod
    def resolve_engine(engine: Engine | None = None) -> Engine:
        """Return *engine*, else the bound engine.

        Raises:
            EngineNotBoundError: If neither is available.
        """
        if engine is not None:
            return engine
        if Entity._engine is None:
            raise EngineNotBoundError()
        return Entity._engine

    # --- querying and persistence ---

    @classmethod
    def select(cls, columns: list[str] | None = None, alias: str | None = None) -> QueryBuilder:
        """Start a SELECT over this entity."""
        from loom_orm.query.builder import QueryBuilder

        return QueryBuilder(cls, alias or cls.default_alias()).select(columns)

    def get_identifier_value(self) -> Any:
        return getattr(self, self.get_identifier())

    def set_property(self, name: str, value: Any) -> None:
        """Assign a declared property.

        Raises:
            AttributeError: If *name* is not a declared property.
        """
        metadata = metadata_for(type(self))
        if name not in metadata.columns and name not in metadata.join_tables:
            raise AttributeError(f"{type(self).__name__} has no mapped property '{name}'")
        setattr(self, name, value)

    def save(self, engine: Engine | None = None) -> Entity:
        """Insert this entity when its identifier is unset, update it otherwise.

        After an insert the generated key is stored as the identifier.

        Raises:
            MissingIdentifierError: If the entity declares no identifier.
            EngineNotBoundError: If no engine is given or bound.
            QueryRenderError: If the statement could not be rendered.
        """
        from loom_orm.query.builder import QueryBuilder

        identifier = self.get_identifier()
        engine = self.resolve_engine(engine)
        builder = QueryBuilder(type(self), self.default_alias(), engine=engine)

        if getattr(self, identifier) is None:
            result = builder.insert(self).execute()
            self.set_property(identifier, result.lastrowid)
        else:
            builder.update(self).execute()
        return self
