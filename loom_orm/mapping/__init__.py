"""Mapping layer - rebuilding entity graphs from alias-prefixed rows."""

from __future__ import annotations

from loom_orm.mapping.convert import convert_value, to_bool, to_datetime
from loom_orm.mapping.mapper import RowMapper, group_row
from loom_orm.mapping.protocol import Mapper

__all__ = [
    "Mapper",
    "RowMapper",
    "group_row",
    "convert_value",
    "to_bool",
    "to_datetime",
]
