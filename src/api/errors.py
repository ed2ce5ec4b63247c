"""Exception handlers: translate errors into the JSON error envelope.

Every error body is {"success": false, "message": ..., ...}. Domain errors
map to a status code by their kind; `error` (the technical detail) is only
exposed when the app runs in development.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from roster.application.errors import (
    BusinessError,
    ErrorKind,
    NotFoundError,
    RosterError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.BUSINESS: 500,
}


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


def _expose_details(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.is_development)


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def roster_error_handler(request: Request, exc: RosterError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    body = {"code": exc.code}
    if isinstance(exc, ValidationError):
        body["errors"] = exc.errors
    elif isinstance(exc, NotFoundError):
        body["resource"] = exc.resource
        body["identifier"] = exc.identifier
    elif isinstance(exc, BusinessError):
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
        if exc.detail and _expose_details(request):
            body["error"] = exc.detail
    return error_response(status_code, exc.message, **body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        400,
        "Invalid request body",
        code="VALIDATION_ERROR",
        errors=[_describe(error) for error in exc.errors()],
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, "Route not found", path=request.url.path)
    return error_response(exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    body = {"error": str(exc)} if _expose_details(request) else {}
    return error_response(500, "Internal server error", **body)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RosterError, roster_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
