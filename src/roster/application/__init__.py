"""Application layer: use cases, ports, DTOs and errors. Depends only on domain."""

from roster.application.dto import (
    Page,
    PersonInput,
    PersonStatistics,
    SearchFilters,
    SearchOptions,
)
from roster.application.errors import (
    BusinessError,
    ConflictError,
    DuplicateEntryError,
    ErrorKind,
    ForbiddenError,
    NotFoundError,
    RosterError,
    TransactionError,
    UniqueViolation,
    ValidationError,
)
from roster.application.person_service import PersonService
from roster.application.ports import EntityStore, PersonRepository, UnitOfWork

__all__ = [
    "BusinessError",
    "ConflictError",
    "DuplicateEntryError",
    "EntityStore",
    "ErrorKind",
    "ForbiddenError",
    "NotFoundError",
    "Page",
    "PersonInput",
    "PersonRepository",
    "PersonService",
    "PersonStatistics",
    "RosterError",
    "SearchFilters",
    "SearchOptions",
    "TransactionError",
    "UniqueViolation",
    "UnitOfWork",
    "ValidationError",
]
