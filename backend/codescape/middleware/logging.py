"""
Logging middleware for request/response tracking
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from codescape.core.logging import bind_request_context, clear_request_context, get_logger
from codescape.middleware.security import client_address

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with the client address the rate limiter keys on.

    The request id and client are bound to structlog's context, so store
    and service log lines emitted while handling the request carry them too.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        bind_request_context(request_id, client_address(request))
        start_time = time.perf_counter()

        logger.info("Request started", method=request.method, path=request.url.path)

        try:
            response = await call_next(request)

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                rate_limit_remaining=response.headers.get("RateLimit-Remaining"),
                duration=f"{time.perf_counter() - start_time:.3f}s",
            )
        finally:
            clear_request_context()

        response.headers["X-Request-ID"] = request_id
        return response
