import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskapi.config import CORS_HEADERS

logger = logging.getLogger(__name__)

TASK_NOT_FOUND = "Task not found"
TITLE_REQUIRED = "Title is required"
INVALID_STATUS = "Invalid status"


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _validation_message(exc: RequestValidationError):
    """Return (status_code, message) for the first meaningful validation error."""
    for err in exc.errors():
        loc = err.get("loc") or ()
        where = loc[0] if loc else None
        field = loc[1] if len(loc) > 1 else None
        if where == "path":
            # a non-integer or out-of-range id can never match a row
            return 404, TASK_NOT_FOUND
        missing_body = field is None and err.get("type") == "missing"
        if where == "body" and (field == "title" or missing_body):
            return 400, TITLE_REQUIRED
        if where == "body" and field == "status":
            return 400, INVALID_STATUS
    return 400, "Invalid request body"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    status_code, message = _validation_message(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(status_code, message)


async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    # rendered outside the http middleware, so CORS headers are set here
    return error_response(500, "Internal server error", headers=CORS_HEADERS)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
