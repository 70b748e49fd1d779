"""
Create Database Schema Script
Creates the participants table for the configured DATABASE_URL
"""

import asyncio

import structlog
from sqlalchemy import inspect

from codescape.config.settings import get_settings
from codescape.services.participant_store import ParticipantStore

logger = structlog.get_logger()


async def create_all_tables(database_url: str | None = None) -> list[str]:
    """Create all tables and return the table names found afterwards."""
    database_url = database_url or get_settings().DATABASE_URL
    logger.info("Creating database schema")

    store = ParticipantStore(database_url)
    await store.open()
    try:
        async with store.session() as session:
            conn = await session.connection()
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await store.close()

    logger.info("Tables created", tables=tables)
    if "participants" not in tables:
        logger.error("Participants table is missing after schema creation")
        raise RuntimeError("participants table was not created")

    return tables


def main() -> None:
    asyncio.run(create_all_tables())


if __name__ == "__main__":
    main()
