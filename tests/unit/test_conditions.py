"""Unit tests for the join condition tokenizer."""

from __future__ import annotations

from loom_orm.query.conditions import MemberRef, parse_condition, parse_member


class TestParseMember:
    def test_alias_and_member(self) -> None:
        assert parse_member("p.package_type") == MemberRef(alias="p", member="package_type")

    def test_splits_on_first_dot(self) -> None:
        assert parse_member("p.a.b") == MemberRef(alias="p", member="a.b")

    def test_unusable_tokens(self) -> None:
        assert parse_member("=") is None
        assert parse_member(".id") is None
        assert parse_member("p.") is None

    def test_str(self) -> None:
        assert str(MemberRef(alias="pt", member="id")) == "pt.id"


class TestParseCondition:
    def test_tokens(self) -> None:
        condition = parse_condition("p.package_type = pt.id")
        assert condition.tokens == (
            MemberRef("p", "package_type"),
            "=",
            MemberRef("pt", "id"),
        )
        assert condition.references == [MemberRef("p", "package_type"), MemberRef("pt", "id")]

    def test_extra_whitespace_collapses(self) -> None:
        condition = parse_condition("  u.role   =  r.id ")
        assert condition.tokens == (MemberRef("u", "role"), "=", MemberRef("r", "id"))
        assert condition.source == "  u.role   =  r.id "

    def test_literals_pass_through(self) -> None:
        condition = parse_condition("pt.name = 'A'")
        assert condition.tokens[1:] == ("=", "'A'")
