"""Unit tests for ModelCollection."""

from __future__ import annotations

from loom_orm import ModelCollection
from tests.models import Label, PackageType, Role


class TestModelCollection:
    def test_add_keeps_order(self) -> None:
        collection: ModelCollection[int] = ModelCollection()
        collection.add(1)
        collection.add([2, 3])
        assert collection.to_list() == [1, 2, 3]
        assert len(collection) == 3
        assert collection[1] == 2
        assert list(collection) == [1, 2, 3]

    def test_first_last_and_empty(self) -> None:
        collection: ModelCollection[str] = ModelCollection()
        assert collection.is_empty()
        assert collection.first() is None
        assert collection.last() is None
        collection.add(["a", "b"])
        assert not collection.is_empty()
        assert collection.first() == "a"
        assert collection.last() == "b"

    def test_find(self) -> None:
        collection = ModelCollection([Role(id=1, name="Admin"), Role(id=2, name="Editor")])
        found = collection.find(lambda role: role.name == "Editor")
        assert found is not None and found.id == 2
        assert collection.find(lambda role: role.name == "Guest") is None

    def test_entities_match_on_class_and_identifier(self) -> None:
        collection = ModelCollection([Role(id=1), Role(id=2)])
        assert collection.contains(Role(id=1))
        assert not collection.contains(PackageType(id=1))
        collection.remove(Role(id=1))
        assert [role.id for role in collection] == [2]

    def test_unsaved_entities_match_by_identity(self) -> None:
        role = Role(name="Draft")
        collection = ModelCollection([role])
        assert collection.contains(role)
        assert not collection.contains(Role(name="Draft"))

    def test_remove_missing_is_ignored(self) -> None:
        collection = ModelCollection([1, 2])
        collection.remove(3)
        assert collection.to_list() == [1, 2]

    def test_keyless_entities_match_by_identity(self) -> None:
        label = Label(text="x")
        collection = ModelCollection([label])
        assert collection.contains(label)
        assert not collection.contains(Label(text="x"))
        collection.remove(Label(text="x"))
        assert len(collection) == 1
        collection.remove(label)
        assert collection.is_empty()
