"""Unit tests for Condition and the date/time extraction helpers."""

from __future__ import annotations

import pytest

from querybrick.errors import QueryError, UnsupportedDialectError
from querybrick.schema.dialect import Dialect
from querybrick.sql.condition import (
    Condition,
    Ref,
    ex_day,
    ex_time,
    ex_year,
    ref,
)
from tests.fixtures import FakeConnection


def _sq() -> Condition:
    return Condition(Dialect.SQLITE)


def _pg() -> Condition:
    return Condition(Dialect.POSTGRESQL)


def _my() -> Condition:
    return Condition(Dialect.MYSQL)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


def test_negated_less_than():
    c = _sq().col("age").not_().less_than(18)
    assert c.build() == "NOT age < ?"
    assert c.values == [18]


def test_not_applies_to_next_comparison_only():
    c = _sq().col("age").not_()
    assert c.negated
    c.less_than(18)
    assert not c.negated
    c.and_().col("name").equal("x")
    assert c.build() == "NOT age < ? AND name = ?"
    assert c.values == [18, "x"]


def test_equal_none_renders_is_null():
    c = _sq().col("a").equal(None)
    assert c.build() == "a IS NULL"
    assert c.values == []


def test_comparison_operators():
    c = (
        _sq()
        .col("a").greater_than(1)
        .and_().col("b").greater_than_or_equal(2)
        .and_().col("c").less_than_or_equal(3.5)
        .and_().col("d").like("J%")
    )
    assert c.build() == "a > ? AND b >= ? AND c <= ? AND d LIKE ?"
    assert c.values == [1, 2, 3.5, "J%"]


def test_is_null_true_false():
    c = _sq().col("deleted_at").is_null().and_().col("active").is_true().or_().col("banned").is_false()
    assert c.build() == "deleted_at IS NULL AND active = ? OR banned = ?"
    assert c.values == [True, False]


def test_column_stays_active_until_next_col():
    c = _sq().col("age").greater_than(18).and_().less_than(65)
    assert c.build() == "age > ? AND age < ?"
    assert c.active_column == "age"


def test_column_alias():
    assert _sq().column("users.id").equal(1).build() == "users.id = ?"


def test_between_with_literals():
    c = _sq().col("age").between(18, 30)
    assert c.build() == "age BETWEEN ? AND ?"
    assert c.values == [18, 30]


def test_between_with_ref_inlines_reference():
    c = _sq().col("price").between(ref("min_price"), 100)
    assert c.build() == "price BETWEEN min_price AND ?"
    assert c.values == [100]


def test_in_with_ref_and_literals():
    c = _sq().col("status").in_("a", ref("fallback"), "b")
    assert c.build() == "status IN (?, fallback, ?)"
    assert c.values == ["a", "b"]


def test_in_accepts_a_list():
    c = _sq().col("id").in_([1, 2, 3])
    assert c.build() == "id IN (?, ?, ?)"
    assert c.values == [1, 2, 3]


def test_in_empty_raises():
    with pytest.raises(QueryError, match="cannot be empty for IN clause"):
        _sq().col("id").in_([])


def test_equal_ref_compares_two_columns():
    c = _sq().col("users.id").equal(ref("posts.user_id"))
    assert c.build() == "users.id = posts.user_id"
    assert c.values == []


def test_not_in():
    assert _sq().col("id").not_().in_(1, 2).build() == "NOT id IN (?, ?)"


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


def test_parenthesised_group():
    c = (
        _sq()
        .col("name").like("J%")
        .and_()
        .open()
        .col("city").equal("Paris")
        .or_()
        .col("state").equal("CA")
        .close()
    )
    assert c.build() == "name LIKE ? AND (city = ? OR state = ?)"
    assert c.values == ["J%", "Paris", "CA"]
    assert c.is_balanced


def test_paren_toggles():
    c = _sq().paren().col("a").equal(1).paren()
    assert c.build() == "(a = ?)"
    assert c.is_balanced


def test_parentheses_hug_their_contents():
    assert _sq().open().col("age").less_than("18").close().build() == "(age < ?)"
    assert _sq().paren().col("age").less_than("18").paren().build() == "(age < ?)"


def test_nested_parentheses():
    c = (
        _sq()
        .open().open()
        .col("a").equal(1).or_().col("b").equal(2)
        .close()
        .and_().col("c").is_null()
        .close()
        .or_().not_().col("d").is_true()
    )
    assert c.build() == "((a = ? OR b = ?) AND c IS NULL) OR NOT d = ?"
    assert c.values == [1, 2, True]


def test_unbalanced_is_reported():
    c = _sq().open().col("a").equal(1)
    assert not c.is_balanced


def test_close_without_open_raises():
    with pytest.raises(QueryError, match="No open parenthesis"):
        _sq().col("a").equal(1).close()


def test_connective_on_empty_raises():
    with pytest.raises(QueryError, match="cannot start with AND"):
        _sq().and_()


def test_connective_after_open_raises():
    with pytest.raises(QueryError, match="cannot start with OR"):
        _sq().open().or_()


def test_double_connective_raises():
    with pytest.raises(QueryError, match="cannot contain AND OR"):
        _sq().col("a").equal(1).and_().or_()


def test_raw_fragment_with_values():
    c = _sq().raw("LENGTH(name) > ?", 3).and_().col("a").equal(1)
    assert c.build() == "LENGTH(name) > ? AND a = ?"
    assert c.values == [3, 1]


def test_raw_empty_raises():
    with pytest.raises(QueryError, match="Invalid condition"):
        _sq().raw("")


def test_tokens_are_exposed_in_order():
    c = _sq().col("a").equal(1).and_().col("b").equal(2)
    assert [t.sql for t in c.tokens] == ["a = ?", "AND", "b = ?"]
    assert c.tokens[0].values == (1,)


def test_placeholder_count_matches_values():
    c = (
        _sq()
        .col("a").in_(1, 2, 3)
        .and_().col("b").between(1, ref("c"))
        .or_().col("d").is_true()
        .and_().col("e").is_null()
    )
    assert c.build().count("?") == len(c.values)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("name", ["Users", "1abc", "a-b", "a.b.c", "", None, "a b"])
def test_invalid_column_names(name):
    with pytest.raises(QueryError, match="Invalid column"):
        _sq().col(name)


def test_comparison_without_column_raises():
    with pytest.raises(QueryError, match="Invalid column: None"):
        _sq().equal(1)


def test_like_rejects_empty_pattern():
    with pytest.raises(QueryError, match="Invalid value"):
        _sq().col("name").like("")


def test_less_than_rejects_bool():
    with pytest.raises(QueryError, match="Invalid value: True"):
        _sq().col("a").less_than(True)


def test_between_rejects_none():
    with pytest.raises(QueryError, match="Invalid start value"):
        _sq().col("a").between(None, 1)
    with pytest.raises(QueryError, match="Invalid end value"):
        _sq().col("a").between(1, None)


def test_invalid_ref():
    with pytest.raises(QueryError, match="Invalid reference"):
        ref("Bad Name")


def test_ref_is_value_type():
    assert ref("users.id") == Ref("users.id")
    assert str(ref("users.id")) == "users.id"


def test_error_carries_clause():
    with pytest.raises(QueryError) as info:
        Condition(Dialect.SQLITE, clause="WHERE").and_()
    assert info.value.clause == "WHERE"


# ---------------------------------------------------------------------------
# Date/time parts
# ---------------------------------------------------------------------------


def test_in_year_per_dialect():
    assert _my().col("created_at").in_year(2024).build() == "YEAR(created_at) = ?"
    assert _pg().col("created_at").in_year(2024).build() == "EXTRACT(YEAR FROM created_at) = ?"
    assert _sq().col("created_at").in_year(2024).build() == "STRFTIME('%Y', created_at) = ?"


def test_in_time_per_dialect():
    assert _my().col("t").in_time("10:00:00").build() == "TIME(t) = ?"
    assert _pg().col("t").in_time("10:00:00").build() == "TO_CHAR(t, 'HH24:MI:SS') = ?"
    assert _sq().col("t").in_time("10:00:00").build() == "STRFTIME('%H:%M:%S', t) = ?"


def test_in_date_binds_string():
    c = _pg().col("created_at").in_date("2024-01-31")
    assert c.build() == "DATE(created_at) = ?"
    assert c.values == ["2024-01-31"]


def test_date_part_with_ref():
    c = _my().col("created_at").in_month(ref("birth_month"))
    assert c.build() == "MONTH(created_at) = birth_month"
    assert c.values == []


def test_negated_date_part():
    assert _sq().col("d").not_().in_day(5).build() == "NOT STRFTIME('%d', d) = ?"


@pytest.mark.parametrize(
    "method,value",
    [
        ("in_year", 0),
        ("in_month", 0),
        ("in_month", 13),
        ("in_day", 32),
        ("in_hour", 24),
        ("in_minute", 60),
        ("in_second", -1),
        ("in_hour", True),
        ("in_date", ""),
        ("in_time", 5),
    ],
)
def test_date_part_domains(method, value):
    with pytest.raises(QueryError, match="Invalid"):
        getattr(_sq().col("c"), method)(value)


def test_invalid_year_message_names_value():
    with pytest.raises(QueryError, match="Invalid year: 0"):
        _sq().col("c").in_year(0)


def test_date_part_bounds_accepted():
    c = _sq().col("c").in_month(12).and_().in_hour(0).and_().in_minute(59).and_().in_day(31)
    assert c.values == [12, 0, 59, 31]


def test_extraction_helpers():
    assert ex_year("created_at", Dialect.MYSQL) == "YEAR(created_at)"
    assert ex_day("created_at", Dialect.POSTGRESQL) == "EXTRACT(DAY FROM created_at)"
    assert ex_time("created_at", Dialect.SQLITE) == "STRFTIME('%H:%M:%S', created_at)"


def test_extraction_helper_rejects_bad_column():
    with pytest.raises(QueryError):
        ex_year("Bad", Dialect.MYSQL)


# ---------------------------------------------------------------------------
# Dialect resolution
# ---------------------------------------------------------------------------


def test_condition_accepts_connection():
    c = Condition(FakeConnection(Dialect.MYSQL))
    assert c.dialect is Dialect.MYSQL


def test_condition_accepts_string_tag():
    assert Condition(FakeConnection("PostgreSQL")).dialect is Dialect.POSTGRESQL


def test_unknown_dialect_raises():
    with pytest.raises(UnsupportedDialectError, match="oracle"):
        Condition(FakeConnection("oracle"))
