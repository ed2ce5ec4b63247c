"""Neo4j implementation of EntityStore.

Graph: one node per row, labelled with the entity name, e.g.
(n:Person {id, name, surname, email, address, phone, created_at, updated_at}).
Integer ids come from a (:Sequence {name: <label>}) counter node. Timestamps are
ISO-8601 UTC strings with microseconds so they compare correctly as strings.
Unique fields are backed by node uniqueness constraints (see ensure_constraints).
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from neo4j.exceptions import ConstraintError

from roster.application.criteria import AnyOf, Condition, Criteria, Op, Order
from roster.application.errors import UniqueViolation

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_VIOLATED_PROPERTY = re.compile(r"property `([^`]+)`")

_TIMESTAMP_FIELDS = ("created_at", "updated_at")


def _datetime_to_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _now_iso() -> str:
    return _datetime_to_iso(datetime.now(timezone.utc))


def _to_param(value: Any) -> Any:
    return _datetime_to_iso(value) if isinstance(value, datetime) else value


def _checked(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def ensure_constraints(driver, label: str, unique_fields: tuple[str, ...], *, database: str | None = None) -> None:
    """Create uniqueness constraints for the label's id, its unique fields and its id sequence, if missing."""
    label = _checked(label)
    statements = [
        f"CREATE CONSTRAINT {label.lower()}_{_checked(field)}_unique IF NOT EXISTS "
        f"FOR (n:`{label}`) REQUIRE n.`{field}` IS UNIQUE"
        for field in ("id", *unique_fields)
    ]
    statements.append(
        "CREATE CONSTRAINT sequence_name_unique IF NOT EXISTS FOR (s:Sequence) REQUIRE s.name IS UNIQUE"
    )
    with driver.session(database=database) as session:
        for statement in statements:
            session.run(statement).consume()
    logger.info("Ensured Neo4j constraints for :%s (id, %s)", label, ", ".join(unique_fields))


class Neo4jStore:
    """Stores rows as labelled nodes. Runs on auto-commit sessions, or on `transaction` when given."""

    def __init__(
        self,
        driver: object,
        label: str,
        fields: tuple[str, ...],
        unique_fields: tuple[str, ...] = (),
        *,
        database: str | None = None,
        transaction: object | None = None,
    ) -> None:
        self._driver = driver
        self._label = _checked(label)
        self._fields = tuple(_checked(f) for f in fields)
        self._columns = {"id", *self._fields, *_TIMESTAMP_FIELDS}
        self._unique_fields = unique_fields
        self._database = database
        self._tx = transaction

    # --- plumbing ---

    def _run(self, query: str, **params) -> list:
        try:
            if self._tx is not None:
                return list(self._tx.run(query, **params))
            with self._driver.session(database=self._database) as session:
                return list(session.run(query, **params))
        except ConstraintError as e:
            raise UniqueViolation(self._violated_field(e)) from e

    def _violated_field(self, error: ConstraintError) -> str:
        match = _VIOLATED_PROPERTY.search(str(error.message or error))
        if match:
            return match.group(1)
        return self._unique_fields[0] if self._unique_fields else "id"

    def _row(self, node) -> dict[str, Any]:
        props = dict(node)
        row = {"id": props["id"]}
        for field in self._fields:
            row[field] = props.get(field)
        for field in _TIMESTAMP_FIELDS:
            row[field] = _iso_to_datetime(props[field])
        return row

    def _property(self, field: str) -> str:
        if field not in self._columns:
            raise ValueError(f"Unknown field for {self._label}: {field!r}")
        return f"n.`{field}`"

    def _compile(self, criteria: Criteria | None) -> tuple[str, dict[str, Any]]:
        """Return (WHERE clause or "", params) for the criteria."""
        if not criteria:
            return "", {}
        params: dict[str, Any] = {}

        def condition(c: Condition) -> str:
            prop = self._property(c.field)
            if c.op is Op.BLANK:
                return f"({prop} IS NULL OR {prop} = '')"
            if c.op is Op.PRESENT:
                return f"({prop} IS NOT NULL AND {prop} <> '')"
            name = f"p{len(params)}"
            params[name] = _to_param(c.value)
            if c.op is Op.EQ:
                return f"{prop} = ${name}"
            if c.op is Op.NE:
                return f"{prop} <> ${name}"
            if c.op is Op.ICONTAINS:
                return f"toLower({prop}) CONTAINS toLower(${name})"
            if c.op is Op.CONTAINS:
                return f"{prop} CONTAINS ${name}"
            if c.op is Op.GTE:
                return f"{prop} >= ${name}"
            if c.op is Op.LTE:
                return f"{prop} <= ${name}"
            raise ValueError(f"Unsupported operator: {c.op}")

        parts = []
        for clause in criteria.clauses:
            if isinstance(clause, AnyOf):
                parts.append("(" + " OR ".join(condition(c) for c in clause.conditions) + ")")
            else:
                parts.append(condition(clause))
        return "WHERE " + " AND ".join(parts), params

    def _order_by(self, order: Order) -> str:
        terms = [
            f"{self._property(field)} {'DESC' if direction.lower() == 'desc' else 'ASC'}"
            for field, direction in order
        ]
        terms.append("n.id ASC")
        return "ORDER BY " + ", ".join(terms)

    # --- EntityStore ---

    def insert(self, values: dict[str, Any]) -> dict[str, Any]:
        now = _now_iso()
        records = self._run(
            f"""
            MERGE (seq:Sequence {{name: $label}})
            ON CREATE SET seq.value = 0
            SET seq.value = seq.value + 1
            WITH seq.value AS next_id
            CREATE (n:`{self._label}` {{id: next_id}})
            SET n += $props, n.created_at = $now, n.updated_at = $now
            RETURN n
            """,
            label=self._label,
            props={k: v for k, v in values.items() if k in self._fields},
            now=now,
        )
        return self._row(records[0]["n"])

    def get(self, row_id: int) -> dict[str, Any] | None:
        records = self._run(
            f"MATCH (n:`{self._label}` {{id: $id}}) RETURN n",
            id=row_id,
        )
        return self._row(records[0]["n"]) if records else None

    def select(
        self,
        criteria: Criteria | None = None,
        order: Order = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        where, params = self._compile(criteria)
        query = f"MATCH (n:`{self._label}`) {where} RETURN n {self._order_by(order)} SKIP $offset"
        if limit is not None:
            query += " LIMIT $limit"
            params["limit"] = limit
        records = self._run(query, offset=offset, **params)
        return [self._row(rec["n"]) for rec in records]

    def count(self, criteria: Criteria | None = None) -> int:
        where, params = self._compile(criteria)
        records = self._run(
            f"MATCH (n:`{self._label}`) {where} RETURN count(n) AS total",
            **params,
        )
        return records[0]["total"]

    def update(self, row_id: int, values: dict[str, Any]) -> dict[str, Any] | None:
        records = self._run(
            f"""
            MATCH (n:`{self._label}` {{id: $id}})
            SET n += $props, n.updated_at = $now
            RETURN n
            """,
            id=row_id,
            props={k: v for k, v in values.items() if k in self._fields},
            now=_now_iso(),
        )
        return self._row(records[0]["n"]) if records else None

    def delete(self, row_id: int) -> bool:
        records = self._run(
            f"MATCH (n:`{self._label}` {{id: $id}}) DETACH DELETE n RETURN count(*) AS deleted",
            id=row_id,
        )
        return bool(records and records[0]["deleted"])

    def begin(self) -> "Neo4jTransaction":
        return Neo4jTransaction(self)

    def bound_to(self, transaction: object) -> "Neo4jStore":
        return Neo4jStore(
            self._driver,
            self._label,
            self._fields,
            self._unique_fields,
            database=self._database,
            transaction=transaction,
        )

    @property
    def driver(self):
        return self._driver

    @property
    def database(self) -> str | None:
        return self._database


class Neo4jTransaction:
    """Explicit driver transaction on its own session. Writes go through `store`."""

    def __init__(self, store: Neo4jStore) -> None:
        self._session = store.driver.session(database=store.database)
        self._tx = self._session.begin_transaction()
        self.store = store.bound_to(self._tx)

    def commit(self) -> None:
        try:
            self._tx.commit()
        finally:
            self._session.close()

    def rollback(self) -> None:
        try:
            if not self._tx.closed():
                self._tx.rollback()
        finally:
            self._session.close()
