"""SQL placeholder normalization.

The builder renders ``?`` placeholders. Drivers using the ``format``
paramstyle (MySQL) need ``%s`` instead; string literals are left intact.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

_PLACEHOLDER_PATTERN = re.compile(r"\?")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert ``?`` placeholders to the target param style.

    Args:
        sql: SQL string with ``?`` placeholders.
        paramstyle: Target style - 'qmark' (no conversion) or 'format' (%s).

    Returns:
        SQL with placeholders converted to the target style.
    """
    if paramstyle == "qmark":
        return sql
    return _convert_to_format(sql)


@lru_cache(maxsize=256)
def _convert_to_format(sql: str) -> str:
    """Convert ? placeholders to %s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PLACEHOLDER_PATTERN.sub("%s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PLACEHOLDER_PATTERN.sub("%s", sql[last_end:]))

    return "".join(parts)


def coerce_params(params: list[Any] | tuple[Any, ...] | None) -> tuple[Any, ...]:
    """Normalize positional *params* to a tuple (``None`` → empty)."""
    if params is None:
        return ()
    return tuple(params)
