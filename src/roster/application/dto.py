"""Input DTOs and result types for the person use cases."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

PERSON_FIELDS = ("name", "surname", "email", "phone", "address")


@dataclass(frozen=True)
class PersonInput:
    """Raw person fields as received from a client (already trimmed by the HTTP layer, if at all)."""

    name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PersonInput":
        """Build from a dict, ignoring unknown keys. Non-string values are kept as their str()."""
        values = {}
        for name in PERSON_FIELDS:
            value = data.get(name)
            values[name] = value if value is None or isinstance(value, str) else str(value)
        return cls(**values)


@dataclass(frozen=True)
class SearchFilters:
    """Search filters. Dates are ISO strings; parsed by the service."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    created_after: str | None = None
    created_before: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Provided filters only, keyed by their query-parameter names."""
        out = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "createdAfter": self.created_after,
            "createdBefore": self.created_before,
        }
        return {k: v for k, v in out.items() if v}


@dataclass(frozen=True)
class SearchOptions:
    page: int | None = None
    limit: int | None = None
    order: tuple[tuple[str, str], ...] | None = None

    @property
    def paginated(self) -> bool:
        return self.page is not None or self.limit is not None


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results. `page` is 1-based."""

    items: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int = field(init=False)
    has_next: bool = field(init=False)
    has_prev: bool = field(init=False)

    def __post_init__(self):
        total_pages = math.ceil(self.total / self.page_size) if self.page_size else 0
        object.__setattr__(self, "total_pages", total_pages)
        object.__setattr__(self, "has_next", self.page * self.page_size < self.total)
        object.__setattr__(self, "has_prev", self.page > 1)

    def pagination(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


@dataclass(frozen=True)
class PersonStatistics:
    total_persons: int
    with_phone: int
    with_address: int
    avg_name_length: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalPersons": self.total_persons,
            "withPhone": self.with_phone,
            "withAddress": self.with_address,
            "avgNameLength": self.avg_name_length,
        }
