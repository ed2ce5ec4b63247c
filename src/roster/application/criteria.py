"""Store-neutral query predicates.

A Criteria is an AND of clauses; each clause is a Condition or an AnyOf
(OR of Conditions). The in-memory store evaluates them with `matches`, the
Neo4j store compiles them to Cypher. `key()` gives a JSON-ready form used
for cache keys.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Op(str, Enum):
    EQ = "eq"
    NE = "ne"
    ICONTAINS = "icontains"
    CONTAINS = "contains"
    GTE = "gte"
    LTE = "lte"
    BLANK = "blank"
    PRESENT = "present"


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


@dataclass(frozen=True)
class Condition:
    field: str
    op: Op
    value: Any = None

    def matches(self, row: dict) -> bool:
        actual = row.get(self.field)
        if self.op is Op.BLANK:
            return _is_blank(actual)
        if self.op is Op.PRESENT:
            return not _is_blank(actual)
        if self.op is Op.EQ:
            return actual == self.value
        if self.op is Op.NE:
            return actual != self.value
        if actual is None:
            return False
        if self.op is Op.ICONTAINS:
            return str(self.value).lower() in str(actual).lower()
        if self.op is Op.CONTAINS:
            return str(self.value) in str(actual)
        if self.op is Op.GTE:
            return actual >= self.value
        if self.op is Op.LTE:
            return actual <= self.value
        raise ValueError(f"Unsupported operator: {self.op}")

    def key(self) -> list:
        value = self.value.isoformat() if isinstance(self.value, datetime) else self.value
        return [self.field, self.op.value, value]


@dataclass(frozen=True)
class AnyOf:
    conditions: tuple[Condition, ...]

    def matches(self, row: dict) -> bool:
        return any(c.matches(row) for c in self.conditions)

    def key(self) -> list:
        return ["or", [c.key() for c in self.conditions]]


@dataclass(frozen=True)
class Criteria:
    clauses: tuple[Condition | AnyOf, ...] = ()

    def matches(self, row: dict) -> bool:
        return all(c.matches(row) for c in self.clauses)

    def key(self) -> list:
        return [c.key() for c in self.clauses]

    def fields(self) -> set[str]:
        names = set()
        for clause in self.clauses:
            if isinstance(clause, AnyOf):
                names.update(c.field for c in clause.conditions)
            else:
                names.add(clause.field)
        return names

    def __bool__(self) -> bool:
        return bool(self.clauses)


# Sort order: ((field, "asc" | "desc"), ...)
Order = tuple[tuple[str, str], ...]


def where(*clauses: Condition | AnyOf) -> Criteria:
    return Criteria(tuple(clauses))


def any_of(*conditions: Condition) -> AnyOf:
    return AnyOf(tuple(conditions))


def eq(field: str, value: Any) -> Condition:
    return Condition(field, Op.EQ, value)


def ne(field: str, value: Any) -> Condition:
    return Condition(field, Op.NE, value)


def icontains(field: str, value: str) -> Condition:
    return Condition(field, Op.ICONTAINS, value)


def contains(field: str, value: str) -> Condition:
    return Condition(field, Op.CONTAINS, value)


def gte(field: str, value: Any) -> Condition:
    return Condition(field, Op.GTE, value)


def lte(field: str, value: Any) -> Condition:
    return Condition(field, Op.LTE, value)


def blank(field: str) -> Condition:
    return Condition(field, Op.BLANK)


def present(field: str) -> Condition:
    return Condition(field, Op.PRESENT)
