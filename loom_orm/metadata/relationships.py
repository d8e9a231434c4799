"""Property classification: scalar, entity reference, date/time, boolean or collection."""

from __future__ import annotations

import inspect
import sys
import types
import typing
from datetime import date, datetime
from typing import Any, Union

from loom_orm.collection import ModelCollection
from loom_orm.core.enums import PropertyKind
from loom_orm.core.registry import entity_registry
from loom_orm.entity import Entity
from loom_orm.metadata.registry import metadata_for


def is_entity_class(candidate: Any) -> bool:
    """True for concrete Entity subclasses, never for Entity itself."""
    return inspect.isclass(candidate) and issubclass(candidate, Entity) and candidate is not Entity


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _resolve_string(annotation: str) -> Any:
    """Best-effort resolution of an annotation that get_type_hints could not evaluate."""
    text = annotation.replace(" ", "").removesuffix("|None")
    if text.startswith("Optional[") and text.endswith("]"):
        text = text[len("Optional[") : -1]
    if text.startswith("ModelCollection[") and text.endswith("]"):
        inner = text[len("ModelCollection[") : -1]
        if entity_registry.has(inner):
            return ModelCollection[entity_registry.get(inner)]  # type: ignore[misc]
        return ModelCollection
    if entity_registry.has(text):
        return entity_registry.get(text)
    return {"bool": bool, "datetime": datetime, "date": date}.get(text, Any)


def _type_hints(entity: type) -> dict[str, Any]:
    localns: dict[str, Any] = {"ModelCollection": ModelCollection}
    localns.update(entity_registry.namespace())
    # names in the declaring module win over same-named entities elsewhere
    module = sys.modules.get(entity.__module__)
    if module is not None:
        localns.update(vars(module))
    try:
        return typing.get_type_hints(entity, localns=localns)
    except (NameError, TypeError, AttributeError):
        hints: dict[str, Any] = {}
        for klass in reversed(entity.__mro__):
            for name, annotation in vars(klass).get("__annotations__", {}).items():
                hints[name] = (
                    _resolve_string(annotation) if isinstance(annotation, str) else annotation
                )
        return hints


def property_type(entity: type, property_name: str) -> Any:
    """Declared type of a property with Optional unwrapped, or ``None`` if undeclared."""
    hint = _type_hints(entity).get(property_name)
    return None if hint is None else _unwrap_optional(hint)


def property_kind(entity: type, property_name: str) -> PropertyKind:
    """Classify a property of *entity* by its declaration."""
    if property_name in metadata_for(entity).join_tables:
        return PropertyKind.MANY_TO_MANY

    hint = property_type(entity, property_name)
    if hint is bool:
        return PropertyKind.BOOLEAN
    if inspect.isclass(hint) and issubclass(hint, (datetime, date)):
        return PropertyKind.DATETIME
    if is_entity_class(hint):
        return PropertyKind.ENTITY
    return PropertyKind.SCALAR


def collection_target(entity: type, property_name: str) -> type[Entity] | None:
    """Entity class held by a collection property (``ModelCollection[Target]``)."""
    hint = property_type(entity, property_name)
    args = typing.get_args(hint)
    if args and is_entity_class(args[0]):
        return args[0]  # type: ignore[no-any-return]
    return None


def accepts(entity: type, property_name: str, value: object) -> bool:
    """True when an ENTITY property of *entity* can hold *value*."""
    hint = property_type(entity, property_name)
    return is_entity_class(hint) and isinstance(value, hint)
