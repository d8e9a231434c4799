"""Row value conversion per property kind."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from loom_orm.core.enums import PropertyKind
from loom_orm.core.exceptions import ConversionError

_TRUE = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "f", "no", "n", "off", ""})


def to_datetime(property_name: str, value: Any, target: Any = datetime) -> datetime | date:
    """Convert a driver value to ``datetime``, or to ``date`` when *target* is date."""
    wants_date = target is date
    if isinstance(value, datetime):
        return value.date() if wants_date else value
    if isinstance(value, date):
        return value if wants_date else datetime.combine(value, datetime.min.time())
    try:
        text = value.decode() if isinstance(value, bytes) else str(value)
        if wants_date:
            return date.fromisoformat(text[:10])
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ConversionError(property_name, value, str(e)) from e


def to_bool(property_name: str, value: Any) -> bool:
    """Convert a driver flag (``1``/``0``, ``"1"``, ``b"\\x01"``, ...) to bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, bytes):
        return any(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConversionError(property_name, value, "not a boolean flag")


def convert_value(property_name: str, kind: PropertyKind, value: Any, target: Any = None) -> Any:
    """Convert *value* for a property of the given kind.

    Raises:
        ConversionError: If the value cannot be converted, or the kind is
            never hydrated from a scalar (entity references, collections).
    """
    if kind in (PropertyKind.ENTITY, PropertyKind.MANY_TO_MANY):
        raise ConversionError(property_name, value, f"{kind.value} properties are not hydrated")
    if value is None:
        return None
    if kind is PropertyKind.DATETIME:
        return to_datetime(property_name, value, target if target is date else datetime)
    if kind is PropertyKind.BOOLEAN:
        return to_bool(property_name, value)
    return value
