"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from roster.application.criteria import Criteria, Order
from roster.application.dto import Page

R = TypeVar("R")


class EntityStore(Protocol):
    """Durable table of rows (dicts). Assigns ids and timestamps; enforces unique fields.

    Writes that break a unique constraint raise UniqueViolation.
    """

    def insert(self, values: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with id, created_at and updated_at set."""
        ...

    def get(self, row_id: int) -> dict[str, Any] | None:
        ...

    def select(
        self,
        criteria: Criteria | None = None,
        order: Order = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        ...

    def count(self, criteria: Criteria | None = None) -> int:
        ...

    def update(self, row_id: int, values: dict[str, Any]) -> dict[str, Any] | None:
        """Replace the given fields and bump updated_at. None when no row matched."""
        ...

    def delete(self, row_id: int) -> bool:
        ...

    def begin(self) -> "StoreTransaction":
        """Start a transaction. Writes through `transaction.store` commit or roll back together."""
        ...


class StoreTransaction(Protocol):
    store: EntityStore

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class PersonRepository(Protocol):
    """Cached data access for persons (see roster.infrastructure.repository.Repository)."""

    def find_all(self, order: Order | None = None, limit: int | None = None, offset: int = 0) -> list:
        ...

    def find_by_id(self, row_id: int) -> Any | None:
        ...

    def find_by(self, criteria: Criteria, order: Order | None = None) -> list:
        ...

    def create(self, data: dict[str, Any]) -> Any:
        ...

    def update(self, row_id: int, data: dict[str, Any]) -> Any | None:
        ...

    def delete(self, row_id: int) -> bool:
        ...

    def count(self, criteria: Criteria | None = None) -> int:
        ...

    def exists(self, criteria: Criteria) -> bool:
        ...

    def paginate(
        self,
        page: int,
        page_size: int,
        criteria: Criteria | None = None,
        order: Order | None = None,
    ) -> Page:
        ...


class UnitOfWork(Protocol):
    """Runs `work` against a transaction-bound repository; commits or rolls back."""

    def run(self, work: Callable[[PersonRepository], R]) -> R:
        ...
