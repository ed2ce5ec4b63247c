"""Generic cached repository over an EntityStore.

Entity-specific behaviour (namespace, ordering, row factory, unique-violation
messages) comes from an EntitySpec, not from subclassing.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from roster.application.criteria import Criteria, Order
from roster.application.dto import Page
from roster.application.errors import DuplicateEntryError, UniqueViolation
from roster.application.ports import EntityStore
from roster.infrastructure.cache import CacheService, make_key

T = TypeVar("T")


def default_unique_error(violation: UniqueViolation) -> Exception:
    return DuplicateEntryError(f"{violation.field} already exists", violation.field)


@dataclass(frozen=True)
class EntitySpec(Generic[T]):
    """Metadata for one entity table."""

    name: str
    fields: tuple[str, ...]
    factory: Callable[[dict[str, Any]], T]
    unique_fields: tuple[str, ...] = ()
    default_order: Order = (("created_at", "desc"),)
    on_unique_violation: Callable[[UniqueViolation], Exception] = default_unique_error

    @property
    def columns(self) -> tuple[str, ...]:
        """Writable fields plus the store-managed ones."""
        return ("id", *self.fields, "created_at", "updated_at")


def _criteria_key(criteria: Criteria | None) -> list:
    return criteria.key() if criteria else []


class Repository(Generic[T]):
    """CRUD, count and pagination with read-through caching.

    Reads are cached under the entity's namespace; any write invalidates the
    whole namespace. `find_by_id` caches misses as well.
    """

    def __init__(
        self,
        store: EntityStore,
        entity: EntitySpec[T],
        cache: CacheService | None = None,
        *,
        cache_enabled: bool = True,
    ) -> None:
        self._store = store
        self._entity = entity
        self._cache = cache
        self._cache_enabled = cache_enabled and cache is not None

    @property
    def entity(self) -> EntitySpec[T]:
        return self._entity

    def bind(self, store: EntityStore) -> "Repository[T]":
        """Same entity and cache, different store (e.g. a transaction-bound one)."""
        return Repository(store, self._entity, self._cache, cache_enabled=self._cache_enabled)

    # --- cache plumbing ---

    def _cached(self, operation: str, params: dict[str, Any], load: Callable[[], Any]) -> Any:
        if not self._cache_enabled:
            return load()
        key = make_key(operation, params)
        hit, value = self._cache.get(self._entity.name, key)
        if hit:
            return value
        value = load()
        self._cache.set(self._entity.name, key, value)
        return value

    def invalidate_cache(self) -> None:
        if self._cache_enabled:
            self._cache.invalidate(self._entity.name)

    def _to_entity(self, row: dict[str, Any] | None) -> T | None:
        return None if row is None else self._entity.factory(row)

    def _write(self, action: Callable[[], Any]) -> Any:
        try:
            result = action()
        except UniqueViolation as e:
            raise self._entity.on_unique_violation(e) from e
        self.invalidate_cache()
        return result

    # --- reads ---

    def find_all(self, order: Order | None = None, limit: int | None = None, offset: int = 0) -> list[T]:
        order = order or self._entity.default_order
        return self._cached(
            "findAll",
            {"order": order, "limit": limit, "offset": offset},
            lambda: [self._to_entity(r) for r in self._store.select(None, order, limit, offset)],
        )

    def find_by_id(self, row_id: int) -> T | None:
        return self._cached(
            "findById",
            {"id": row_id},
            lambda: self._to_entity(self._store.get(row_id)),
        )

    def find_by(self, criteria: Criteria, order: Order | None = None) -> list[T]:
        order = order or self._entity.default_order
        return self._cached(
            "findBy",
            {"where": _criteria_key(criteria), "order": order},
            lambda: [self._to_entity(r) for r in self._store.select(criteria, order)],
        )

    def count(self, criteria: Criteria | None = None) -> int:
        return self._cached(
            "count",
            {"where": _criteria_key(criteria)},
            lambda: self._store.count(criteria),
        )

    def exists(self, criteria: Criteria) -> bool:
        return self.count(criteria) > 0

    def paginate(
        self,
        page: int,
        page_size: int,
        criteria: Criteria | None = None,
        order: Order | None = None,
    ) -> Page[T]:
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")
        order = order or self._entity.default_order

        def load() -> Page[T]:
            total = self._store.count(criteria)
            rows = self._store.select(criteria, order, page_size, (page - 1) * page_size)
            return Page(
                items=[self._to_entity(r) for r in rows],
                page=page,
                page_size=page_size,
                total=total,
            )

        return self._cached(
            "paginate",
            {"page": page, "pageSize": page_size, "where": _criteria_key(criteria), "order": order},
            load,
        )

    # --- writes ---

    def create(self, data: dict[str, Any]) -> T:
        return self._to_entity(self._write(lambda: self._store.insert(self._writable(data))))

    def update(self, row_id: int, data: dict[str, Any]) -> T | None:
        return self._to_entity(self._write(lambda: self._store.update(row_id, self._writable(data))))

    def delete(self, row_id: int) -> bool:
        return self._write(lambda: self._store.delete(row_id))

    def _writable(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if k in self._entity.fields}
