"""
Security middleware: fixed-window rate limiting and hardening headers
Flow: Request -> Rate limit check -> Handler -> Security headers
"""

import time
from typing import Callable, Dict, Tuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from codescape.core.logging import get_logger

logger = get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


def client_address(request: Request) -> str:
    """Address the rate limiter counts requests against."""
    return request.client.host if request.client else "unknown"


class FixedWindowRateLimiter:
    """
    Counts requests per client address inside fixed time windows.

    Requests are handled on a single event loop, so the counters need
    no locking.
    """

    def __init__(self, max_requests: int, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._next_sweep = clock() + window_seconds

    def hit(self, key: str) -> Tuple[bool, int, float]:
        """
        Record one request for ``key``.

        Returns:
            (allowed, remaining requests, seconds until the window resets)
        """
        now = self.clock()
        window_start, count = self._windows.get(key, (now, 0))
        if now - window_start >= self.window_seconds:
            window_start, count = now, 0

        count += 1
        self._windows[key] = (window_start, count)
        if now >= self._next_sweep:
            self._evict_expired(now)
            self._next_sweep = now + self.window_seconds

        reset_in = self.window_seconds - (now - window_start)
        return count <= self.max_requests, max(self.max_requests - count, 0), reset_in

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed the request budget of the current window."""

    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client = client_address(request)
        allowed, remaining, reset_in = self.limiter.hit(client)

        if not allowed:
            logger.warning("Rate limit exceeded", client_host=client, path=request.url.path)
            response = JSONResponse(
                status_code=429,
                content={"success": False, "message": RATE_LIMIT_MESSAGE},
            )
        else:
            response = await call_next(request)

        response.headers["RateLimit-Limit"] = str(self.limiter.max_requests)
        response.headers["RateLimit-Remaining"] = str(remaining)
        response.headers["RateLimit-Reset"] = str(int(reset_in))
        return response


async def security_headers_middleware(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Add hardening headers to every response."""
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response
