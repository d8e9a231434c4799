"""Unit tests for placeholder normalization."""

from __future__ import annotations

from loom_orm.core.params import coerce_params, normalize_params


class TestNormalizeParams:
    def test_qmark_passthrough(self) -> None:
        sql = "SELECT p.intPackageId AS p_id FROM Application.tblPackage p WHERE p.intPackageId = ?"
        assert normalize_params(sql, "qmark") == sql

    def test_format_conversion(self) -> None:
        sql = "UPDATE Application.tblPackage SET strPackageName = ? WHERE intPackageId = ?"
        expected = "UPDATE Application.tblPackage SET strPackageName = %s WHERE intPackageId = %s"
        assert normalize_params(sql, "format") == expected

    def test_in_list(self) -> None:
        sql = "SELECT 1 FROM t p WHERE p.id IN (?, ?, ?)"
        assert normalize_params(sql, "format") == "SELECT 1 FROM t p WHERE p.id IN (%s, %s, %s)"

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT 1 FROM t WHERE col = 'why?' AND id = ?"
        expected = "SELECT 1 FROM t WHERE col = 'why?' AND id = %s"
        assert normalize_params(sql, "format") == expected

    def test_escaped_quote_inside_literal(self) -> None:
        sql = "SELECT 1 FROM t WHERE col = 'it\\'s ?' AND id = ?"
        expected = "SELECT 1 FROM t WHERE col = 'it\\'s ?' AND id = %s"
        assert normalize_params(sql, "format") == expected

    def test_no_params(self) -> None:
        assert normalize_params("SELECT 1", "format") == "SELECT 1"

    def test_cache_returns_same_result(self) -> None:
        sql = "SELECT * FROM t WHERE id = ?"
        assert normalize_params(sql, "format") == normalize_params(sql, "format")


class TestCoerceParams:
    def test_none(self) -> None:
        assert coerce_params(None) == ()

    def test_list(self) -> None:
        assert coerce_params([1, "a"]) == (1, "a")

    def test_tuple(self) -> None:
        assert coerce_params((1,)) == (1,)
