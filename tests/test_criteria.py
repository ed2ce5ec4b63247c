"""Unit tests for query criteria and the person query builders."""

from datetime import datetime, timezone

import pytest

from roster.application.criteria import (
    any_of,
    blank,
    contains,
    eq,
    gte,
    icontains,
    lte,
    ne,
    present,
    where,
)
from roster.application.dto import SearchFilters
from roster.application.person_queries import (
    email_taken,
    incomplete_profiles,
    parse_date_bound,
    search_criteria,
)

ROW = {
    "id": 3,
    "name": "Jane",
    "surname": "Smith",
    "email": "jane.smith@email.com",
    "phone": "5550102",
    "address": "",
    "created_at": datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc),
}


def test_conditions_match_row():
    assert eq("id", 3).matches(ROW)
    assert ne("id", 4).matches(ROW)
    assert icontains("name", "JAN").matches(ROW)
    assert not contains("name", "jan").matches(ROW)
    assert contains("phone", "0102").matches(ROW)
    assert blank("address").matches(ROW)
    assert present("phone").matches(ROW)
    assert not present("address").matches(ROW)


def test_null_never_contains_or_compares():
    row = {"name": None}
    assert not icontains("name", "a").matches(row)
    assert not gte("name", "a").matches(row)
    assert blank("name").matches(row)


def test_criteria_is_and_of_clauses_and_any_of_is_or():
    criteria = where(any_of(icontains("name", "smith"), icontains("surname", "smith")), eq("id", 3))
    assert criteria.matches(ROW)
    assert not where(any_of(eq("id", 1), eq("id", 2))).matches(ROW)
    assert criteria.fields() == {"name", "surname", "id"}


def test_empty_criteria_is_falsy_and_matches_everything():
    assert not where()
    assert where().matches(ROW)


def test_key_is_stable_and_serializes_datetimes():
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert where(gte("created_at", moment)).key() == [["created_at", "gte", "2024-01-01T00:00:00+00:00"]]
    assert where(eq("a", 1)).key() == where(eq("a", 1)).key()


def test_email_taken_excludes_own_id():
    assert email_taken("jane.smith@email.com").matches(ROW)
    assert not email_taken("jane.smith@email.com", exclude_id=3).matches(ROW)


def test_incomplete_profiles_matches_missing_phone_or_address():
    criteria = incomplete_profiles()
    assert criteria.matches(ROW)
    assert criteria.matches({**ROW, "address": "x", "phone": None})
    assert not criteria.matches({**ROW, "address": "x"})


def test_parse_date_bound_date_only_covers_whole_day():
    start = parse_date_bound("2024-05-10")
    end = parse_date_bound("2024-05-10", end_of_day=True)
    assert start == datetime(2024, 5, 10, tzinfo=timezone.utc)
    assert end == datetime(2024, 5, 10, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_parse_date_bound_datetimes_become_utc():
    assert parse_date_bound("2024-05-10T14:00:00Z") == datetime(2024, 5, 10, 14, tzinfo=timezone.utc)
    assert parse_date_bound("2024-05-10T14:00:00+02:00") == datetime(2024, 5, 10, 12, tzinfo=timezone.utc)
    assert parse_date_bound("2024-05-10T14:00:00").tzinfo is timezone.utc


def test_parse_date_bound_rejects_garbage():
    with pytest.raises(ValueError):
        parse_date_bound("yesterday")


def test_parse_date_bound_rejects_offsets_past_the_date_range():
    with pytest.raises(ValueError):
        parse_date_bound("0001-01-01T00:00:00+01:00")
    with pytest.raises(ValueError):
        parse_date_bound("9999-12-31T23:59:59-01:00")


def test_search_criteria_name_matches_surname_too():
    assert search_criteria(SearchFilters(name="smi")).matches(ROW)
    assert not search_criteria(SearchFilters(name="bob")).matches(ROW)


def test_search_criteria_combines_filters_with_and():
    filters = SearchFilters(email="EMAIL.COM", phone="555", created_before="2024-05-10")
    assert search_criteria(filters).matches(ROW)
    assert not search_criteria(SearchFilters(email="email.com", created_after="2024-05-11")).matches(ROW)


def test_search_criteria_without_filters_is_empty():
    assert not search_criteria(SearchFilters())
    assert lte("id", 3).matches(ROW)
