"""Ordered collection of entities, used for join-table associations."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from loom_orm.core.exceptions import MissingIdentifierError

T = TypeVar("T")


def _same_item(left: Any, right: Any) -> bool:
    if left is right:
        return True
    identify = getattr(left, "get_identifier_value", None)
    if identify is None or type(left) is not type(right):
        return False
    try:
        left_id = identify()
    except MissingIdentifierError:
        # keyless entities only match themselves
        return False
    return left_id is not None and left_id == right.get_identifier_value()


class ModelCollection(Generic[T]):
    """Insertion-ordered, iterable collection.

    Entities are matched by class and identifier value when removing or
    checking membership; other items are matched by identity.
    """

    def __init__(self, items: Iterable[T] | None = None) -> None:
        self._items: list[T] = list(items) if items is not None else []

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __repr__(self) -> str:
        return f"ModelCollection({self._items!r})"

    def add(self, item: T | list[T]) -> None:
        """Append one item, or every item of a list."""
        if isinstance(item, list):
            self._items.extend(item)
            return
        self._items.append(item)

    def remove(self, item: T) -> None:
        """Remove the first matching item; missing items are ignored."""
        for index, existing in enumerate(self._items):
            if _same_item(existing, item):
                del self._items[index]
                return

    def contains(self, item: T) -> bool:
        return any(_same_item(existing, item) for existing in self._items)

    def first(self) -> T | None:
        return self._items[0] if self._items else None

    def last(self) -> T | None:
        return self._items[-1] if self._items else None

    def find(self, predicate: Callable[[T], bool]) -> T | None:
        """Return the first item for which *predicate* is true."""
        return next((item for item in self._items if predicate(item)), None)

    def is_empty(self) -> bool:
        return not self._items

    def to_list(self) -> list[T]:
        return list(self._items)
