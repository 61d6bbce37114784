"""
Create database tables for the configured DB_URI.
"""

import asyncio
import logging

from sqlmodel import SQLModel

import invite_service.domain.entities  # noqa: F401  registers all tables
from invite_service.depends import engine

logger = logging.getLogger(__name__)


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_tables())
    logger.info("Tables created")
