"""Create the saved-scenario tables."""

import asyncio
import logging

from maintlytics.db.connection import engine
from maintlytics.db.models import Base

logger = logging.getLogger(__name__)


async def init() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created successfully.")
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[init_db] %(message)s")
    asyncio.run(init())
