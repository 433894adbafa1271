"""
Structured logging configuration with request ID and environment labels
"""
import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request ID
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


def get_request_id(request: Optional[Request] = None) -> Optional[str]:
    """
    Get the current request ID

    Exception handlers that run outside the middleware pass their request,
    whose state keeps the ID after the context variable is reset.
    """
    if request is not None:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            return request_id
    return request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach an X-Request-ID to every request and echo it on the response"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = request_id
        return response


class StructuredFormatter(logging.Formatter):
    """Formatter that includes request ID and environment"""

    DEFAULT_FORMAT = "%(asctime)s [%(env)s] [%(request_id)s] %(levelname)-8s %(name)s: %(message)s"

    def __init__(self, env: str = "dev", fmt: str = None, datefmt: str = None):
        self.env = env
        super().__init__(fmt=fmt or self.DEFAULT_FORMAT, datefmt=datefmt or "%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or "-"
        record.env = self.env
        return super().format(record)


def setup_logging(env: str = "dev", log_level: str = "INFO"):
    """
    Set up structured logging with request ID and environment labels

    Args:
        env: Environment name (dev, test, staging, prod)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Format: timestamp [ENV] [REQUEST_ID] level logger message
    formatter = StructuredFormatter(env=env)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    return root_logger
