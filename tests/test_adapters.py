"""Unit tests for the attribute adapters used by entry queries."""
from __future__ import annotations

import pytest

from mortar.entity import DateFieldAdapter, EntryQuery, FieldAdapter
from mortar.errors import StatementError

BASE = "SELECT SQL_NO_CACHE FROM `sym_entries` AS `e`"
JOIN_F1 = "LEFT JOIN `sym_entries_data_1` AS `f1` ON `e`.`id` = `f1`.`entry_id`"


@pytest.fixture()
def query(db) -> EntryQuery:
    return EntryQuery(db)


# ---------------------------------------------------------------------------
# FieldAdapter
# ---------------------------------------------------------------------------


def test_field_filter(query):
    query.filter(FieldAdapter(1), ["test"])
    assert query.generate_sql() == f"{BASE} {JOIN_F1} WHERE (`f1`.`value` = :f1_value)"
    assert query.get_values() == {"f1_value": "test"}


def test_field_filter_several_values(query):
    query.filter(FieldAdapter(1), ["news", "sports"], "and")
    assert query.generate_sql() == (
        f"{BASE} {JOIN_F1} WHERE (`f1`.`value` = :f1_value AND `f1`.`value` = :f1_value2)"
    )


def test_field_filter_negated(query):
    query.filter(FieldAdapter(1), ["not: news", "sports"])
    assert query.generate_sql() == (
        f"{BASE} {JOIN_F1} WHERE (`f1`.`value` != :f1_value AND `f1`.`value` != :f1_value2)"
    )
    assert query.get_values() == {"f1_value": "news", "f1_value2": "sports"}


def test_field_filter_regexp_and_null(query):
    query.filter(FieldAdapter(1, "handle"), ["regexp: ^new", "sql: null", "SQL: NOT NULL"])
    assert query.generate_sql() == (
        f"{BASE} LEFT JOIN `sym_entries_data_1` AS `f1` ON `e`.`id` = `f1`.`entry_id` "
        "WHERE (`f1`.`handle` REGEXP :f1_handle OR `f1`.`handle` IS :f1_handle2 "
        "OR `f1`.`handle` IS NOT :f1_handle3)"
    )
    assert query.get_values() == {"f1_handle": "^new", "f1_handle2": None, "f1_handle3": None}


def test_field_filter_with_only_empty_values_is_ignored(query):
    query.filter(FieldAdapter(1), ["", None, "  "])
    assert query.generate_sql() == BASE


def test_field_sort(query):
    query.sort(FieldAdapter(1), "asc")
    assert query.generate_sql() == f"{BASE} {JOIN_F1} ORDER BY `f1`.`value` ASC"


def test_field_sort_random_needs_no_join(query):
    query.sort(FieldAdapter(1), "rand")
    assert query.generate_sql() == f"{BASE} ORDER BY RAND()"


def test_field_sort_rejects_unknown_direction(query):
    with pytest.raises(StatementError):
        query.sort(FieldAdapter(1), "upwards")


def test_filter_and_sort_share_one_join(query):
    adapter = FieldAdapter(1)
    query.filter(adapter, ["x"]).sort(adapter, "desc")
    assert query.parts("join") == [JOIN_F1]


def test_adapter_repr():
    assert repr(FieldAdapter(3)) == "FieldAdapter(field_id=3, column='value')"


# ---------------------------------------------------------------------------
# DateFieldAdapter
# ---------------------------------------------------------------------------


def test_date_filter_day(query):
    query.filter(DateFieldAdapter(1), ["2018-03-28"])
    assert query.generate_sql() == (
        f"{BASE} {JOIN_F1} WHERE (`f1`.`date` >= :f1_date AND `f1`.`date` <= :f1_date2)"
    )
    assert query.get_values() == {
        "f1_date": "2018-03-28 00:00:00",
        "f1_date2": "2018-03-28 23:59:59",
    }


def test_date_filter_month_with_slash(query):
    query.filter(DateFieldAdapter(1), ["2018/02"])
    assert query.get_values() == {
        "f1_date": "2018-02-01 00:00:00",
        "f1_date2": "2018-02-28 23:59:59",
    }


def test_date_filter_earlier_than(query):
    query.filter(DateFieldAdapter(1), ["earlier than 2018-03-28"])
    assert query.generate_sql() == f"{BASE} {JOIN_F1} WHERE `f1`.`date` < :f1_date"
    assert query.get_values() == {"f1_date": "2018-03-28 00:00:00"}


def test_date_filter_equal_to_or_later_than(query):
    query.filter(DateFieldAdapter(1), ["equal to or later than 2018-03-28"])
    assert query.generate_sql() == f"{BASE} {JOIN_F1} WHERE `f1`.`date` >= :f1_date"
    assert query.get_values() == {"f1_date": "2018-03-28 00:00:00"}


def test_date_filter_negated_uses_raw_values(query):
    query.filter(DateFieldAdapter(1), ["not: 2018-03-28", "tata"])
    assert query.generate_sql() == (
        f"{BASE} {JOIN_F1} WHERE (`f1`.`date` != :f1_date AND `f1`.`date` != :f1_date2)"
    )
    assert query.get_values() == {"f1_date": "2018-03-28", "f1_date2": "tata"}


def test_date_filter_ranges(query):
    query.filter(DateFieldAdapter(1), ["2017-03-28 to 2018-03", "from 2017 to 2018"])
    assert query.generate_sql() == (
        f"{BASE} {JOIN_F1} WHERE ((`f1`.`date` >= :f1_date AND `f1`.`date` <= :f1_date2) "
        "OR (`f1`.`date` >= :f1_date3 AND `f1`.`date` <= :f1_date4))"
    )
    assert query.get_values() == {
        "f1_date": "2017-03-28 00:00:00",
        "f1_date2": "2018-03-31 23:59:59",
        "f1_date3": "2017-01-01 00:00:00",
        "f1_date4": "2018-12-31 23:59:59",
    }


def test_date_filter_empty_values_are_ignored(query):
    query.filter(DateFieldAdapter(1), [""])
    assert query.generate_sql() == BASE
