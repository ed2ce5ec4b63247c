"""REST routes for persons: /api/persons.

Handlers only trim strings and parse ids and integers; every rule lives in
PersonService. Literal routes are declared before /{person_id}.
"""

import re

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from api.errors import error_response
from roster.application import (
    Page,
    PersonInput,
    PersonService,
    SearchFilters,
    SearchOptions,
    ValidationError,
)

router = APIRouter(prefix="/api/persons", tags=["Persons"])

_ID_PATTERN = re.compile(r"^-?[0-9]+\Z")


class PersonPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


def get_person_service(request: Request) -> PersonService:
    return request.app.state.person_service


def sanitize_input(payload: PersonPayload) -> PersonInput:
    """Trim every string value. No semantic checks."""
    values = {
        key: value.strip() if isinstance(value, str) else value
        for key, value in payload.model_dump().items()
    }
    return PersonInput.from_mapping(values)


def _parse_id(raw: str) -> int | None:
    if not _ID_PATTERN.match(raw):
        return None
    return int(raw)


def _invalid_id() -> JSONResponse:
    return error_response(400, "Invalid person ID format")


def _int_param(raw: str | None, label: str, minimum: int) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError:
        value = None
    if value is None or value < minimum:
        qualifier = "a positive" if minimum > 0 else "a non-negative"
        raise ValidationError([f"{label} must be {qualifier} integer"])
    return value


def _strip(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


@router.get("")
def list_persons(request: Request, limit: str | None = None, offset: str | None = None):
    service = get_person_service(request)
    persons = service.get_all_persons(
        limit=_int_param(limit, "Limit", 1),
        offset=_int_param(offset, "Offset", 0) or 0,
    )
    return {"success": True, "count": len(persons), "data": [p.to_dict() for p in persons]}


@router.get("/search")
def search_persons(
    request: Request,
    name: str | None = None,
    email: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    createdAfter: str | None = None,  # noqa: N803
    createdBefore: str | None = None,  # noqa: N803
    page: str | None = None,
    limit: str | None = None,
):
    service = get_person_service(request)
    filters = SearchFilters(
        name=_strip(name),
        email=_strip(email),
        phone=_strip(phone),
        address=_strip(address),
        created_after=_strip(createdAfter),
        created_before=_strip(createdBefore),
    )
    options = SearchOptions(
        page=_int_param(page, "Page", 1),
        limit=_int_param(limit, "Limit", 1),
    )
    result = service.search_persons(filters, options)
    if isinstance(result, Page):
        return {
            "success": True,
            "data": [p.to_dict() for p in result.items],
            "pagination": result.pagination(),
            "filters": filters.to_dict(),
        }
    return {
        "success": True,
        "count": len(result),
        "data": [p.to_dict() for p in result],
        "filters": filters.to_dict(),
    }


@router.get("/incomplete")
def incomplete_profiles(request: Request):
    persons = get_person_service(request).get_incomplete_profiles()
    return {
        "success": True,
        "count": len(persons),
        "data": [p.to_dict() for p in persons],
        "message": "Persons with incomplete profiles (missing phone or address)",
    }


@router.get("/statistics")
def statistics(request: Request):
    stats = get_person_service(request).get_statistics()
    return {"success": True, "data": stats.to_dict()}


@router.get("/{person_id}")
def get_person(person_id: str, request: Request):
    parsed = _parse_id(person_id)
    if parsed is None:
        return _invalid_id()
    person = get_person_service(request).get_person_by_id(parsed)
    return {"success": True, "data": person.to_dict()}


@router.post("", status_code=201)
def create_person(body: PersonPayload, request: Request):
    person = get_person_service(request).create_person(sanitize_input(body))
    return JSONResponse(
        status_code=201,
        content={"success": True, "message": "Person created successfully", "data": person.to_dict()},
    )


@router.put("/{person_id}")
def update_person(person_id: str, body: PersonPayload, request: Request):
    parsed = _parse_id(person_id)
    if parsed is None:
        return _invalid_id()
    person = get_person_service(request).update_person(parsed, sanitize_input(body))
    return {"success": True, "message": "Person updated successfully", "data": person.to_dict()}


@router.delete("/{person_id}")
def delete_person(person_id: str, request: Request):
    parsed = _parse_id(person_id)
    if parsed is None:
        return _invalid_id()
    if not get_person_service(request).delete_person(parsed):
        return error_response(404, "Person not found")
    return {"success": True, "message": "Person deleted successfully"}
