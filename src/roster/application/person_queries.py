"""Person-specific query builders: search filters, incomplete profiles, email lookups."""

from datetime import date, datetime, time, timezone

from roster.application.criteria import (
    Criteria,
    Order,
    any_of,
    blank,
    contains,
    eq,
    gte,
    icontains,
    lte,
    ne,
    where,
)
from roster.application.dto import SearchFilters

DEFAULT_ORDER: Order = (("name", "asc"), ("surname", "asc"))


def email_taken(email: str, exclude_id: int | None = None) -> Criteria:
    """Rows using this (normalized) email, optionally ignoring one id."""
    if exclude_id is not None:
        return where(eq("email", email), ne("id", exclude_id))
    return where(eq("email", email))


def incomplete_profiles() -> Criteria:
    return where(any_of(blank("phone"), blank("address")))


def parse_date_bound(value: str, *, end_of_day: bool = False) -> datetime:
    """Parse an ISO date or datetime into an aware UTC datetime.

    A date-only value maps to the start of that day, or to its last
    microsecond when `end_of_day` is set. Raises ValueError when unparseable or when
    the UTC conversion leaves the supported date range.
    """
    raw = value.strip()
    if len(raw) == 10:
        day = date.fromisoformat(raw)
        moment = datetime.combine(day, time.max if end_of_day else time.min)
    else:
        moment = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    try:
        return moment.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"Date out of range: {value!r}") from e


def search_criteria(filters: SearchFilters) -> Criteria:
    """AND of every provided filter. Date bounds must already be valid ISO strings."""
    clauses = []
    if filters.name:
        clauses.append(any_of(icontains("name", filters.name), icontains("surname", filters.name)))
    if filters.email:
        clauses.append(icontains("email", filters.email))
    if filters.phone:
        clauses.append(contains("phone", filters.phone))
    if filters.address:
        clauses.append(icontains("address", filters.address))
    if filters.created_after:
        clauses.append(gte("created_at", parse_date_bound(filters.created_after)))
    if filters.created_before:
        clauses.append(lte("created_at", parse_date_bound(filters.created_before, end_of_day=True)))
    return where(*clauses)
