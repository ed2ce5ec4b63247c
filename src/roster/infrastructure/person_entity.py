"""EntitySpec for the Person table and helpers that build its stores."""

from roster.application.errors import DuplicateEntryError, UniqueViolation
from roster.application.person_queries import DEFAULT_ORDER
from roster.domain import Person
from roster.infrastructure.memory_store import InMemoryStore
from roster.infrastructure.persistence.neo4j_store import Neo4jStore, ensure_constraints
from roster.infrastructure.repository import EntitySpec


def person_unique_error(violation: UniqueViolation) -> Exception:
    if violation.field == "email":
        return DuplicateEntryError("Email already exists", "email", "DUPLICATE_EMAIL")
    return DuplicateEntryError(f"{violation.field} already exists", violation.field)


PERSON = EntitySpec(
    name="Person",
    fields=("name", "surname", "email", "address", "phone"),
    factory=Person.from_row,
    unique_fields=("email",),
    default_order=DEFAULT_ORDER,
    on_unique_violation=person_unique_error,
)


def in_memory_person_store() -> InMemoryStore:
    return InMemoryStore(PERSON.unique_fields)


def neo4j_person_store(driver, *, database: str | None = None) -> Neo4jStore:
    """Neo4j store for persons. Ensures the label's constraints first."""
    ensure_constraints(driver, PERSON.name, PERSON.unique_fields, database=database)
    return Neo4jStore(
        driver,
        PERSON.name,
        PERSON.fields,
        PERSON.unique_fields,
        database=database,
    )
