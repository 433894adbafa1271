"""
Error Handler Middleware
Sanitizes database errors so SQL and connection details never reach clients
"""
import logging
import re
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError

from ..exceptions import (
    send_response,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from ..logging_config import get_request_id

logger = logging.getLogger(__name__)


class ErrorSanitizer:
    """
    Removes sensitive fragments from error text before it is logged or returned

    - File paths
    - SQL statements
    - Connection strings
    - Email addresses
    """

    PATH_PATTERN = re.compile(r'(?:[A-Z]:\\|/)[^\s\'"<>|]+')
    SQL_PATTERN = re.compile(r'(SELECT|INSERT|UPDATE|DELETE|CREATE|DROP|ALTER)\s+.*', re.IGNORECASE)
    CONNECTION_PATTERN = re.compile(r'(postgresql|mysql|sqlite)(\+\w+)?://[^\s\'"<>]*')
    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')

    @classmethod
    def sanitize_message(cls, message: str) -> str:
        """
        Sanitize error message to remove sensitive information

        Args:
            message: Original error message

        Returns:
            Sanitized message
        """
        if not message:
            return "An error occurred"

        # Connection strings first, the path pattern would otherwise eat their tail
        message = cls.CONNECTION_PATTERN.sub('[REDACTED_CONNECTION]', message)
        message = cls.SQL_PATTERN.sub('SQL statement [REDACTED]', message)
        message = cls.PATH_PATTERN.sub('[REDACTED_PATH]', message)
        message = cls.EMAIL_PATTERN.sub('[REDACTED_EMAIL]', message)

        if len(message) > 500:
            message = message[:500] + "... [truncated]"

        return message


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Handle database errors with sanitization

    The client receives a generic message; the sanitized detail is logged
    alongside the request ID.
    """
    request_id = get_request_id(request)

    logger.error(
        f"Database error (request_id: {request_id}) on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {ErrorSanitizer.sanitize_message(str(exc))}"
    )

    if isinstance(exc, IntegrityError):
        message = "Database constraint violation. The operation could not be completed."
    elif isinstance(exc, OperationalError):
        message = "Database connection error. Please try again later."
    else:
        message = "A database error occurred. Please try again later."

    return send_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message,
        {"error_type": type(exc).__name__},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every envelope-producing handler to the app"""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
