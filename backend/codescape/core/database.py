"""
Database configuration and session management
Flow: Settings -> Engine -> async_sessionmaker -> ParticipantStore -> get_store dependency
"""

from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

if TYPE_CHECKING:
    from codescape.services.participant_store import ParticipantStore

# Create declarative base
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for a database URL."""
    options = {"echo": echo, "future": True, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_store(request: Request) -> "ParticipantStore":
    """Dependency returning the store opened by the application lifespan."""
    return request.app.state.store
