"""Create the HRM tables in the configured database.

Usage:
    python -m scripts.init_db
"""
import asyncio
import logging

from app.config import settings
from app.database import engine, init_db


async def main() -> None:
    await init_db()
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    asyncio.run(main())
