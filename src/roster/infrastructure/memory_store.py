"""In-memory implementation of EntityStore (no DB).

Rows live in a shared table guarded by a lock. Ids come from an
auto-increment counter that never rewinds, even on rollback. A transaction
is a store view that journals undo steps; rollback replays them in reverse.
"""

import threading
from datetime import datetime, timezone
from typing import Any

from roster.application.criteria import Criteria, Order
from roster.application.errors import UniqueViolation


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _sort_key(value: Any) -> tuple:
    return (value is None, value if value is not None else "")


class _Table:
    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.lock = threading.RLock()


class InMemoryStore:
    """Stores rows in memory. Enforces the given unique fields."""

    def __init__(
        self,
        unique_fields: tuple[str, ...] = (),
        *,
        table: _Table | None = None,
        journal: list[tuple] | None = None,
    ) -> None:
        self._unique_fields = unique_fields
        self._table = table or _Table()
        self._journal = journal

    def _record(self, step: tuple) -> None:
        if self._journal is not None:
            self._journal.append(step)

    def _check_unique(self, row: dict[str, Any], exclude_id: int | None = None) -> None:
        for field in self._unique_fields:
            value = row.get(field)
            if value is None:
                continue
            for other in self._table.rows.values():
                if other["id"] != exclude_id and other.get(field) == value:
                    raise UniqueViolation(field, value)

    def insert(self, values: dict[str, Any]) -> dict[str, Any]:
        with self._table.lock:
            now = _now()
            row = {**values, "created_at": now, "updated_at": now}
            self._check_unique(row)
            row["id"] = self._table.next_id
            self._table.next_id += 1
            self._table.rows[row["id"]] = row
            self._record(("insert", row["id"]))
            return dict(row)

    def get(self, row_id: int) -> dict[str, Any] | None:
        with self._table.lock:
            row = self._table.rows.get(row_id)
            return dict(row) if row is not None else None

    def select(
        self,
        criteria: Criteria | None = None,
        order: Order = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        with self._table.lock:
            rows = [dict(r) for _, r in sorted(self._table.rows.items())]
        if criteria:
            rows = [r for r in rows if criteria.matches(r)]
        for field, direction in reversed(order):
            rows.sort(key=lambda r: _sort_key(r.get(field)), reverse=direction.lower() == "desc")
        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]
        return rows

    def count(self, criteria: Criteria | None = None) -> int:
        with self._table.lock:
            rows = list(self._table.rows.values())
        if not criteria:
            return len(rows)
        return sum(1 for r in rows if criteria.matches(r))

    def update(self, row_id: int, values: dict[str, Any]) -> dict[str, Any] | None:
        with self._table.lock:
            old = self._table.rows.get(row_id)
            if old is None:
                return None
            row = {**old, **values, "id": row_id, "created_at": old["created_at"], "updated_at": _now()}
            self._check_unique(row, exclude_id=row_id)
            self._table.rows[row_id] = row
            self._record(("restore", row_id, old))
            return dict(row)

    def delete(self, row_id: int) -> bool:
        with self._table.lock:
            old = self._table.rows.pop(row_id, None)
            if old is None:
                return False
            self._record(("restore", row_id, old))
            return True

    def begin(self) -> "InMemoryTransaction":
        return InMemoryTransaction(
            InMemoryStore(self._unique_fields, table=self._table, journal=[])
        )

    def _undo(self) -> None:
        with self._table.lock:
            for step in reversed(self._journal or []):
                if step[0] == "insert":
                    self._table.rows.pop(step[1], None)
                else:
                    self._table.rows[step[1]] = step[2]
            self._journal.clear()


class InMemoryTransaction:
    """Transaction handle for InMemoryStore. Writes go through `store`."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def commit(self) -> None:
        self.store._journal.clear()

    def rollback(self) -> None:
        self.store._undo()
