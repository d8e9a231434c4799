"""Tokenizer for ``alias.member`` references and join conditions.

A condition such as ``"p.package_type = pt.id"`` is split on whitespace;
tokens containing a dot become MemberRef instances, everything else
(operators, ``AND``, literals) stays a plain string.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MemberRef:
    """An ``alias.member`` token, where member is a property or a column name."""

    alias: str
    member: str

    def __str__(self) -> str:
        return f"{self.alias}.{self.member}"


Token = MemberRef | str


@dataclass(frozen=True)
class Condition:
    """A tokenized join condition."""

    source: str
    tokens: tuple[Token, ...]

    @property
    def references(self) -> list[MemberRef]:
        return [token for token in self.tokens if isinstance(token, MemberRef)]


def parse_member(text: str) -> MemberRef | None:
    """Split ``alias.member``; returns None for tokens without a usable dot."""
    alias, dot, member = text.partition(".")
    if not dot or not alias or not member:
        return None
    return MemberRef(alias=alias, member=member)


def parse_condition(text: str) -> Condition:
    tokens: list[Token] = []
    for part in text.split():
        ref = parse_member(part)
        tokens.append(ref if ref is not None else part)
    return Condition(source=text, tokens=tuple(tokens))
