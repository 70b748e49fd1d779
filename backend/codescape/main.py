"""
CodeScape Backend Main Application
Flow: main.py -> config -> middleware -> routers -> services -> participant store
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from codescape.config.settings import Settings, get_settings
from codescape.core.exceptions import CodeScapeException
from codescape.core.logging import get_logger, setup_logging
from codescape.middleware.errors import INTERNAL_ERROR_MESSAGE, unhandled_error_middleware
from codescape.middleware.logging import LoggingMiddleware
from codescape.middleware.security import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    security_headers_middleware,
)
from codescape.services.participant_store import ParticipantStore

logger = get_logger(__name__)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager: open the store on startup, close it on shutdown."""
    settings: Settings = app.state.settings
    store = ParticipantStore(settings.DATABASE_URL, echo=settings.DEBUG)

    try:
        await store.open()
    except Exception as e:
        logger.error("Database connection error", error=str(e))
        raise

    app.state.store = store
    logger.info(
        "CodeScape Backend Server is running!",
        port=settings.PORT,
        environment=settings.ENVIRONMENT,
        database=settings.DATABASE_KIND,
        started_at=datetime.now(timezone.utc).isoformat(),
    )

    try:
        yield
    finally:
        logger.info("Shutting down gracefully")
        await store.close()


def register_exception_handlers(app: FastAPI) -> None:
    """Convert every error into the JSON envelope."""

    @app.exception_handler(CodeScapeException)
    async def codescape_exception_handler(request: Request, exc: CodeScapeException):
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return _envelope(404, "API endpoint not found")
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [error.get("msg", "Invalid request") for error in exc.errors()]
        return _envelope(400, ", ".join(messages) or "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Global error handler",
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return _envelope(500, INTERNAL_ERROR_MESSAGE)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )
    app.state.settings = settings

    # Add middlewares (last added runs first)
    app.middleware("http")(unhandled_error_middleware)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.middleware("http")(security_headers_middleware)

    register_exception_handlers(app)

    # Include routers
    from codescape.api import health, participants, stats

    app.include_router(health.router, prefix="/api/health", tags=["health"])
    app.include_router(participants.router, prefix="/api/participants", tags=["participants"])
    app.include_router(stats.router, prefix="/api/stats", tags=["stats"])

    return app


app = create_app()


def run() -> None:
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "codescape.main:app",
        host=settings.BACKEND_HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,  # Use structlog instead
    )


if __name__ == "__main__":
    run()
