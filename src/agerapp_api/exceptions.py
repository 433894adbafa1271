"""
Response envelope and exception handlers with request ID support
Every response body has the shape: { status, message, error, data }
"""
from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any, Optional

from .logging_config import get_request_id

logger = logging.getLogger(__name__)


class ApiResponse:
    """
    Standard response envelope

    Schema: { status, message, error, data }
    "status" is "success" and "error" is false only for HTTP 200.
    """

    @staticmethod
    def create(status_code: int, message: str, data: Any = None) -> dict:
        ok = status_code == status.HTTP_200_OK
        return {
            "status": "success" if ok else "error",
            "message": message,
            "error": not ok,
            "data": jsonable_encoder(data) if data is not None else None,
        }


def send_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    """Build a JSONResponse carrying the standard envelope"""
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.create(status_code, message, data),
    )


def api_error(status_code: int, message: str, data: Any = None) -> StarletteHTTPException:
    """
    Build an HTTPException whose detail renders into the envelope

    Handlers raise the result; http_exception_handler unpacks message/data.
    """
    if data is None:
        return HTTPException(status_code=status_code, detail=message)
    return HTTPException(status_code=status_code, detail={"message": message, "data": data})


def _split_detail(detail: Any, status_code: int) -> tuple[str, Optional[Any]]:
    if isinstance(detail, dict):
        return str(detail.get("message", f"HTTP {status_code} error")), detail.get("data")
    return (str(detail) if detail else f"HTTP {status_code} error"), None


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP exceptions in the standard envelope"""
    message, data = _split_detail(exc.detail, exc.status_code)

    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {message}")
    else:
        logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {message}")

    response = send_response(exc.status_code, message, data)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures as 400 with field-level details"""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", []) if part not in ("body", "query", "path", "form")]
        errors.append({
            "field": ".".join(loc),
            "message": err.get("msg", "Invalid value"),
        })

    summary = "; ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
    logger.warning(f"Validation error on {request.url.path}: {summary}")

    return send_response(status.HTTP_400_BAD_REQUEST, "Invalid request data", {"errors": errors})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything not caught elsewhere"""
    from .config import config

    request_id = get_request_id(request)
    logger.error(
        f"Unhandled exception (request_id: {request_id}): {type(exc).__name__}: {exc}",
        exc_info=True,
    )

    data = None
    if config.is_dev:
        data = {"exception_type": type(exc).__name__, "detail": str(exc)}

    return send_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", data)
