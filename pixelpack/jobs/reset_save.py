"""
Erase the saved game.

Clears both persistence namespaces from the configured database. The next
startup begins a brand-new game from the shipped catalog. Cannot be undone.
"""

import asyncio
import logging

from pixelpack.config import CONFIG_NAMESPACE, PROGRESS_NAMESPACE
from pixelpack.db.database import async_session_factory, init_db
from pixelpack.db.operations import clear_namespace

logger = logging.getLogger(__name__)


async def run_reset() -> int:
    """
    Delete every stored record.

    Returns:
        Number of records deleted
    """
    await init_db()

    async with async_session_factory() as session:
        deleted = 0
        for namespace in (CONFIG_NAMESPACE, PROGRESS_NAMESPACE):
            count = await clear_namespace(session, namespace)
            logger.info("Cleared %d %s records", count, namespace)
            deleted += count
        await session.commit()

    return deleted


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        deleted = asyncio.run(run_reset())
    except Exception as e:
        logger.error("Failed to reset save data: %s", e)
        raise
    logger.info("Save data erased (%d records)", deleted)


if __name__ == "__main__":
    main()
