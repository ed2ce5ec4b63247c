"""Domain layer: entities and value helpers. No dependencies on outer layers."""

from roster.domain.entities import (
    ADDRESS_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    SURNAME_MAX_LENGTH,
    Person,
    display_name_for,
)
from roster.domain.phone import normalize_phone

__all__ = [
    "ADDRESS_MAX_LENGTH",
    "EMAIL_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "PHONE_MAX_LENGTH",
    "SURNAME_MAX_LENGTH",
    "Person",
    "display_name_for",
    "normalize_phone",
]
