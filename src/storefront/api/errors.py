"""Render domain errors as ``{"error": {...}}`` JSON responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError

from storefront.errors import AccessDeniedError, InsufficientStockError, PersistenceError

logger = structlog.get_logger(__name__)

# Starlette picks the handler of the closest class in the exception's MRO,
# so InsufficientStockError wins over its ValidationError base.
_STATUS_CODES = {
    ValidationError: 400,
    InsufficientStockError: 409,
    ObjectNotFoundError: 404,
    AccessDeniedError: 403,
    PersistenceError: 503,
    ExpectedVersionError: 503,
}


def _error_body(exc) -> dict:
    if isinstance(exc, ExpectedVersionError):
        return {"error": {"version": ["The record was changed by another request. Please retry."]}}
    messages = getattr(exc, "messages", None)
    if not isinstance(messages, dict):
        messages = {"detail": [str(exc)]}
    return {"error": messages}


def _handler_for(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        log = logger.error if status_code >= 500 else logger.info
        log("Request failed", path=request.url.path, status_code=status_code, error=type(exc).__name__)
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    return handle


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages: dict[str, list[str]] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        messages.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content={"error": messages})


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler_for(status_code))
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
