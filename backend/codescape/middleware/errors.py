"""
Innermost error boundary
Flow: Handler raises -> log -> {success: false} envelope -> outer middlewares add headers
"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint

from codescape.core.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong!"


def internal_error_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "message": INTERNAL_ERROR_MESSAGE})


async def unhandled_error_middleware(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """
    Turn exceptions no handler converted into the 500 envelope.

    Registered before every other middleware so the logging, rate limit and
    security header middlewares still wrap the error response.
    """
    try:
        return await call_next(request)
    except Exception as e:
        logger.error("Global error handler", path=request.url.path, error=str(e), exc_info=e)
        return internal_error_response()
