"""
Error types and the JSON error envelope.

Every failure leaves the API as ``{"success": false, "error": "..."}``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_MISSING_TABLE_MARKERS = ("does not exist", "no such table")


class CarWashError(Exception):
    """Business rule violation raised below the routing layer."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CarWashError):
    """Invalid input."""


class NotFoundError(CarWashError):
    status_code = status.HTTP_404_NOT_FOUND


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def is_missing_table_error(exc: Exception) -> bool:
    text = str(getattr(exc, "orig", exc)).lower()
    return any(marker in text for marker in _MISSING_TABLE_MARKERS)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that render every error as the JSON envelope."""

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, _first_validation_message(exc))

    @app.exception_handler(CarWashError)
    async def handle_carwash_error(request: Request, exc: CarWashError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(DBAPIError)
    async def handle_database_error(request: Request, exc: DBAPIError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        if is_missing_table_error(exc):
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Database table does not exist. Please create the missing tables first.",
                needsTableCreation=True,
            )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Database error")
