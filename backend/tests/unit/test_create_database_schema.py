"""Tests for the schema creation script."""
import pytest

from codescape.scripts.create_database_schema import create_all_tables


@pytest.mark.asyncio
async def test_creates_participants_table(settings):
    tables = await create_all_tables(settings.DATABASE_URL)

    assert "participants" in tables


@pytest.mark.asyncio
async def test_is_idempotent(settings):
    await create_all_tables(settings.DATABASE_URL)

    assert "participants" in await create_all_tables(settings.DATABASE_URL)
