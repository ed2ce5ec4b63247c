"""Person business rules and workflows: create, update, delete, list, search, statistics."""

import logging
import re
from collections.abc import Callable, Iterable

from roster.application.criteria import present, where
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
    ForbiddenError,
    NotFoundError,
    RosterError,
    ValidationError,
)
from roster.application.person_queries import (
    DEFAULT_ORDER,
    email_taken,
    incomplete_profiles,
    parse_date_bound,
    search_criteria,
)
from roster.application.ports import PersonRepository, UnitOfWork
from roster.domain import (
    ADDRESS_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    SURNAME_MAX_LENGTH,
    Person,
    normalize_phone,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_PROTECTED_EMAIL = "admin@system.com"
DEFAULT_DISALLOWED_EMAIL_DOMAINS = ("temp.com",)
DEFAULT_MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


class PersonService:
    """Business layer between the HTTP handlers and the person repository.

    Every mutating workflow runs inside a unit of work obtained from
    `unit_of_work_factory`; reads go straight to the (cached) repository.
    """

    def __init__(
        self,
        repository: PersonRepository,
        unit_of_work_factory: Callable[[], UnitOfWork],
        *,
        protected_email: str = DEFAULT_PROTECTED_EMAIL,
        disallowed_email_domains: Iterable[str] = DEFAULT_DISALLOWED_EMAIL_DOMAINS,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self._repo = repository
        self._unit_of_work_factory = unit_of_work_factory
        self._protected_email = protected_email.strip().lower()
        self._disallowed_domains = frozenset(d.strip().lower() for d in disallowed_email_domains if d.strip())
        self._max_page_size = max_page_size

    # --- rules ---

    def validate_business_rules(self, data: PersonInput) -> None:
        """Raise ValidationError listing every violated rule."""
        errors = []

        if _blank(data.name):
            errors.append("Name is required")
        elif len(data.name.strip()) > NAME_MAX_LENGTH:
            errors.append(f"Name must be at most {NAME_MAX_LENGTH} characters")

        if _blank(data.surname):
            errors.append("Surname is required")
        elif len(data.surname.strip()) > SURNAME_MAX_LENGTH:
            errors.append(f"Surname must be at most {SURNAME_MAX_LENGTH} characters")

        if _blank(data.email):
            errors.append("Email is required")
        else:
            email = data.email.strip()
            if not EMAIL_PATTERN.match(email):
                errors.append("Email must be in valid format")
            elif email.rsplit("@", 1)[1].lower() in self._disallowed_domains:
                errors.append("Temporary email domains are not allowed")
            if len(email) > EMAIL_MAX_LENGTH:
                errors.append(f"Email must be at most {EMAIL_MAX_LENGTH} characters")

        if _blank(data.phone):
            errors.append("Phone is required")
        elif len(normalize_phone(data.phone) or "") > PHONE_MAX_LENGTH:
            errors.append(f"Phone must be at most {PHONE_MAX_LENGTH} characters")

        if _blank(data.address):
            errors.append("Address is required")
        elif len(data.address.strip()) > ADDRESS_MAX_LENGTH:
            errors.append(f"Address must be at most {ADDRESS_MAX_LENGTH} characters")

        if (
            not _blank(data.name)
            and not _blank(data.surname)
            and data.name.strip().casefold() == data.surname.strip().casefold()
        ):
            errors.append("Name and surname cannot be identical")

        if errors:
            raise ValidationError(errors)

    @staticmethod
    def apply_business_transformations(data: PersonInput) -> dict:
        """Trimmed, normalized field values ready for the store. Call after validation."""
        return {
            "name": data.name.strip(),
            "surname": data.surname.strip(),
            "email": data.email.strip().lower(),
            "phone": normalize_phone(data.phone),
            "address": data.address.strip(),
        }

    def _check_email_uniqueness(
        self, repo: PersonRepository, email: str, exclude_id: int | None = None
    ) -> None:
        try:
            taken = repo.exists(email_taken(email, exclude_id))
        except Exception as e:
            raise BusinessError(
                "Unable to verify email uniqueness", "EMAIL_CHECK_ERROR", detail=str(e)
            ) from e
        if taken:
            raise ConflictError("Email address must be unique", "DUPLICATE_EMAIL")

    def _in_transaction(self, work: Callable[[PersonRepository], object]):
        return self._unit_of_work_factory().run(work)

    # --- workflows ---

    def create_person(self, data: PersonInput) -> Person:
        self.validate_business_rules(data)
        values = self.apply_business_transformations(data)

        def work(repo: PersonRepository) -> Person:
            self._check_email_uniqueness(repo, values["email"])
            return repo.create(values)

        try:
            person = self._in_transaction(work)
        except RosterError:
            raise
        except DuplicateEntryError as e:
            raise ConflictError(e.message, e.code) from e
        except Exception as e:
            logger.error("Failed to create person: %s", e)
            raise BusinessError("Failed to create person", "CREATION_ERROR", detail=str(e)) from e

        logger.info("New person created with ID %s", person.id)
        return person

    def update_person(self, person_id: int, data: PersonInput) -> Person:
        existing = self._find_or_raise(person_id)

        self.validate_business_rules(data)
        values = self.apply_business_transformations(data)
        email_changed = values["email"] != existing.email

        def work(repo: PersonRepository) -> Person:
            if email_changed:
                self._check_email_uniqueness(repo, values["email"], exclude_id=person_id)
            updated = repo.update(person_id, values)
            if updated is None:
                raise BusinessError("Person update failed", "UPDATE_FAILED")
            return updated

        try:
            person = self._in_transaction(work)
        except RosterError:
            raise
        except DuplicateEntryError as e:
            raise ConflictError(e.message, e.code) from e
        except Exception as e:
            logger.error("Failed to update person %s: %s", person_id, e)
            raise BusinessError("Failed to update person", "UPDATE_ERROR", detail=str(e)) from e

        if email_changed:
            logger.info("Email changed for person %s", person_id)
        logger.info("Person %s updated", person_id)
        return person

    def delete_person(self, person_id: int) -> bool:
        person = self._find_or_raise(person_id)
        if person.email == self._protected_email:
            raise ForbiddenError("System persons cannot be deleted", "SYSTEM_PERSON_PROTECTION")

        try:
            deleted = self._in_transaction(lambda repo: repo.delete(person_id))
        except RosterError:
            raise
        except Exception as e:
            logger.error("Failed to delete person %s: %s", person_id, e)
            raise BusinessError("Failed to delete person", "DELETE_ERROR", detail=str(e)) from e

        if deleted:
            logger.info("Person %s deleted", person_id)
        return deleted

    # --- reads ---

    def _find_or_raise(self, person_id: int) -> Person:
        try:
            person = self._repo.find_by_id(person_id)
        except Exception as e:
            raise BusinessError("Failed to retrieve person", "RETRIEVAL_ERROR", detail=str(e)) from e
        if person is None:
            raise NotFoundError("Person", person_id)
        return person

    def get_person_by_id(self, person_id: int) -> Person:
        return self._find_or_raise(person_id)

    def get_all_persons(self, limit: int | None = None, offset: int = 0) -> list[Person]:
        try:
            return self._repo.find_all(order=DEFAULT_ORDER, limit=limit, offset=offset)
        except Exception as e:
            raise BusinessError("Failed to retrieve persons", "RETRIEVAL_ERROR", detail=str(e)) from e

    def search_persons(
        self,
        filters: SearchFilters,
        options: SearchOptions | None = None,
    ) -> list[Person] | Page[Person]:
        """Filtered persons. A Page when page or limit is given, otherwise the full list."""
        options = options or SearchOptions()
        errors = []
        for label, value, end_of_day in (
            ("createdAfter", filters.created_after, False),
            ("createdBefore", filters.created_before, True),
        ):
            if value:
                try:
                    parse_date_bound(value, end_of_day=end_of_day)
                except ValueError:
                    errors.append(f"{label} must be an ISO date or datetime")
        if options.page is not None and options.page < 1:
            errors.append("Page must be a positive integer")
        if options.limit is not None and options.limit < 1:
            errors.append("Limit must be a positive integer")
        if errors:
            raise ValidationError(errors)

        order = options.order or DEFAULT_ORDER
        try:
            criteria = search_criteria(filters)
            if not options.paginated:
                return self._repo.find_by(criteria, order=order)
            page = options.page or 1
            limit = min(options.limit or DEFAULT_PAGE_SIZE, self._max_page_size)
            return self._repo.paginate(page, limit, criteria=criteria, order=order)
        except Exception as e:
            raise BusinessError("Search failed", "SEARCH_ERROR", detail=str(e)) from e

    def get_incomplete_profiles(self) -> list[Person]:
        try:
            return self._repo.find_by(incomplete_profiles(), order=DEFAULT_ORDER)
        except Exception as e:
            raise BusinessError(
                "Failed to get incomplete profiles", "INCOMPLETE_PROFILES_ERROR", detail=str(e)
            ) from e

    def get_statistics(self) -> PersonStatistics:
        try:
            total = self._repo.count()
            with_phone = self._repo.count(where(present("phone")))
            with_address = self._repo.count(where(present("address")))
            persons = self._repo.find_all()
        except Exception as e:
            raise BusinessError("Failed to get statistics", "STATISTICS_ERROR", detail=str(e)) from e
        lengths = [len(p.name) + len(p.surname) for p in persons]
        average = sum(lengths) / len(lengths) if lengths else 0.0
        return PersonStatistics(
            total_persons=total,
            with_phone=with_phone,
            with_address=with_address,
            avg_name_length=f"{average:.2f}",
        )
