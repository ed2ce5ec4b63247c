"""Domain entity: Person."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

# Column limits of the persons store.
NAME_MAX_LENGTH = 100
SURNAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
ADDRESS_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def display_name_for(name: str, surname: str) -> str:
    """Uppercase "NAME SURNAME" built from the trimmed parts."""
    return f"{(name or '').strip()} {(surname or '').strip()}".upper()


@dataclass(frozen=True)
class Person:
    """
    A stored person record.
    The id and timestamps are assigned by the store; display_name is always derived.
    """

    id: int
    name: str
    surname: str
    email: str
    address: str | None = None
    phone: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Person name must be non-empty.")
        if not self.surname or not self.surname.strip():
            raise ValueError("Person surname must be non-empty.")
        if not self.email or not self.email.strip():
            raise ValueError("Person email must be non-empty.")

    @property
    def display_name(self) -> str:
        return display_name_for(self.name, self.surname)

    @property
    def is_complete(self) -> bool:
        """True when both phone and address are filled in."""
        return bool(self.phone) and bool(self.address)

    @classmethod
    def from_row(cls, row: dict) -> "Person":
        return cls(
            id=row["id"],
            name=row["name"],
            surname=row["surname"],
            email=row["email"],
            address=row.get("address"),
            phone=row.get("phone"),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self) -> dict:
        """JSON-ready representation used by the REST API."""
        return {
            "id": self.id,
            "name": self.name,
            "surname": self.surname,
            "email": self.email,
            "address": self.address,
            "phone": self.phone,
            "displayName": self.display_name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
