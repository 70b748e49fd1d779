"""Shared fixtures: settings on a temporary SQLite database, app client and store."""
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from codescape.config.settings import Settings
from codescape.main import create_app
from codescape.services.participant_store import ParticipantStore


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh database file."""
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'codescape-test.db'}",
        LOG_FORMAT="console",
        RATE_LIMIT_MAX_REQUESTS=1000,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client with the lifespan (store open/close) running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def store(settings):
    """An opened participant store."""
    participant_store = ParticipantStore(settings.DATABASE_URL)
    await participant_store.open()
    yield participant_store
    await participant_store.close()
