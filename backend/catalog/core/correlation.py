"""
Correlation ID Middleware

Assigns every request a correlation ID, binds it into the structlog context so
all log events emitted while serving the request carry it, and echoes it back
in the response headers.
"""

import uuid
from typing import Optional, Callable, Awaitable

import structlog
from fastapi import Request
from starlette.types import ASGIApp
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response as StarletteResponse

logger = structlog.get_logger()

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware for managing correlation IDs in HTTP requests.
    """

    def __init__(self, app: ASGIApp, header_name: str = "x-correlation-id"):
        super().__init__(app)
        self.header_name = header_name.lower()

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[StarletteResponse]],
    ) -> StarletteResponse:
        correlation_id = self._extract_correlation_id(request) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        logger.debug("Request started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unexpected error during request processing",
                method=request.method,
                path=request.url.path,
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")

        response.headers[self.header_name] = correlation_id
        logger.debug(
            "Request completed",
            status_code=response.status_code,
            correlation_id=correlation_id,
        )
        return response

    def _extract_correlation_id(self, request: Request) -> Optional[str]:
        """Return a valid correlation ID from the request headers, if any."""
        for header_name in CORRELATION_HEADERS:
            value = request.headers.get(header_name, "").strip()
            if value and self._is_valid_correlation_id(value):
                return value
        return None

    @staticmethod
    def _is_valid_correlation_id(correlation_id: str) -> bool:
        try:
            uuid.UUID(correlation_id)
        except ValueError:
            return False
        return True
