"""Error taxonomy shared by the data-access, service and HTTP layers.

Domain errors carry an ErrorKind tag; the HTTP layer maps each kind to one
status code. Store-level errors (UniqueViolation, DuplicateEntryError) never
leave the service: they are translated into ConflictError there.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    BUSINESS = "business"


class RosterError(Exception):
    """Base class for domain errors. Subclasses fix `kind`."""

    kind: ErrorKind = ErrorKind.BUSINESS

    def __init__(self, message: str, code: str = "BUSINESS_ERROR") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(RosterError):
    """Input violates one or more business rules. `errors` lists every violated rule."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: list[str], message: str | None = None) -> None:
        self.errors = list(errors)
        super().__init__(
            message or f"Business validation failed: {', '.join(self.errors)}",
            "VALIDATION_ERROR",
        )


class NotFoundError(RosterError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "Resource", identifier: int | str | None = None) -> None:
        self.resource = resource
        self.identifier = identifier
        if identifier is not None:
            message = f"{resource} with ID {identifier} not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, "NOT_FOUND")


class ConflictError(RosterError):
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, code: str = "CONFLICT") -> None:
        super().__init__(message, code)


class ForbiddenError(RosterError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str, code: str = "FORBIDDEN") -> None:
        super().__init__(message, code)


class BusinessError(RosterError):
    """Unexpected failure inside a service operation.

    `message` is safe to show to clients; `detail` holds the technical cause.
    """

    kind = ErrorKind.BUSINESS

    def __init__(self, message: str, code: str = "BUSINESS_ERROR", detail: str | None = None) -> None:
        super().__init__(message, code)
        self.detail = detail


# --- store-level errors ---


class UniqueViolation(Exception):
    """Raised by an entity store when a write breaks a unique constraint."""

    def __init__(self, field: str, value: object = None) -> None:
        super().__init__(f"{field} already exists")
        self.field = field
        self.value = value


class DuplicateEntryError(Exception):
    """A UniqueViolation after the entity's error mapper gave it a message and code."""

    def __init__(self, message: str, field: str, code: str = "DUPLICATE_ENTRY") -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.code = code


class TransactionError(RuntimeError):
    """Programming error: unit of work used out of order (nested begin, commit without begin)."""
