"""Mapper protocol.

RowMapper implements this interface; QueryBuilder.get() calls map_many on
the rows the engine returns.
"""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class Mapper(Protocol[T_co]):
    """Turns result rows keyed ``alias_property`` into objects."""

    def map_one(self, row: dict[str, Any]) -> T_co:
        """Map a single row dict to a target object."""
        ...

    def map_many(self, rows: list[dict[str, Any]]) -> list[T_co]:
        """Map multiple row dicts to a list of target objects."""
        ...
