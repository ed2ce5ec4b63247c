"""
Roster core: clean-architecture layout.

- domain: the Person entity and phone normalization. No outer dependencies.
- application: use cases (PersonService), ports, DTOs, query criteria, errors.
- infrastructure: adapters (InMemoryStore, Neo4jStore), cached Repository, UnitOfWork.
"""

from roster.application import (
    BusinessError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PersonInput,
    PersonService,
    SearchFilters,
    SearchOptions,
    ValidationError,
)
from roster.domain import Person
from roster.infrastructure import (
    PERSON,
    CacheService,
    InMemoryStore,
    Neo4jStore,
    Repository,
    UnitOfWork,
)

__all__ = [
    "PERSON",
    "BusinessError",
    "CacheService",
    "ConflictError",
    "ForbiddenError",
    "InMemoryStore",
    "Neo4jStore",
    "NotFoundError",
    "Person",
    "PersonInput",
    "PersonService",
    "Repository",
    "SearchFilters",
    "SearchOptions",
    "UnitOfWork",
    "ValidationError",
]
