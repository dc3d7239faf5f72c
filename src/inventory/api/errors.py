"""Exception handlers that render failures in the API's error envelope.

Every failure leaves the service as::

    {"status": "error", "message": "...", "errors": ...}

``errors`` is only present when there are field-level details to report.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory.domain import logger
from inventory.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    MalformedIdentifierError,
    StaleItemError,
)

_DUPLICATE_MESSAGES = {
    "sku": "SKU already exists",
    "username": "User already exists",
    "email": "User already exists",
}


def error_response(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    content = {"status": "error", "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _duplicate_message(messages: dict) -> str | None:
    for field_name, message in _DUPLICATE_MESSAGES.items():
        for text in messages.get(field_name) or []:
            if "already" in str(text).lower():
                return message
    return None


def _field_errors(messages: dict) -> list[dict]:
    return [
        {"field": field_name, "message": str(text)}
        for field_name, texts in messages.items()
        for text in (texts if isinstance(texts, list | tuple) else [texts])
    ]


def _not_found_message(request: Request) -> str:
    if request.url.path.rstrip("/").split("/")[-2:-1] == ["users"]:
        return "User not found"
    return "Inventory item not found"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the service's exception handlers to ``app``."""

    # Unmatched routes and disallowed methods are raised by the router itself.
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "body",
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        return error_response(400, "Validation failed", errors)

    @app.exception_handler(ValidationError)
    async def domain_validation_error(request: Request, exc: ValidationError):
        messages = exc.messages if isinstance(exc.messages, dict) else {"_entity": [str(exc.messages)]}
        duplicate = _duplicate_message(messages)
        if duplicate:
            return error_response(400, duplicate)
        return error_response(400, "Validation failed", _field_errors(messages))

    @app.exception_handler(MalformedIdentifierError)
    async def malformed_identifier(request: Request, exc: MalformedIdentifierError):
        return error_response(400, exc.message)

    @app.exception_handler(AuthenticationRequiredError)
    async def authentication_required(request: Request, exc: AuthenticationRequiredError):
        return error_response(401, exc.message)

    @app.exception_handler(AccessDeniedError)
    async def access_denied(request: Request, exc: AccessDeniedError):
        return error_response(403, exc.message)

    @app.exception_handler(ObjectNotFoundError)
    async def object_not_found(request: Request, exc: ObjectNotFoundError):
        return error_response(404, _not_found_message(request))

    @app.exception_handler(StaleItemError)
    async def stale_item(request: Request, exc: StaleItemError):
        return error_response(409, exc.message)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("unhandled_request_error", path=request.url.path, method=request.method)
        return error_response(500, "Server error")
