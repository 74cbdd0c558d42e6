"""Main entry point for preparing the FoodBridge record store."""

import asyncio
import sys

from loguru import logger

from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.records.registry import get_schema_registry
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    init_database,
)


async def bootstrap() -> bool:
    """Check connectivity and create the record tables.

    Returns:
        bool: True when the database is reachable and the schema exists.
    """
    try:
        is_healthy, error = await check_database_connection()
        if not is_healthy:
            logger.error("Database unreachable: {}", error)
            return False

        await init_database()
    finally:
        await close_database()

    kinds = [kind.value for kind in get_schema_registry().kinds()]
    logger.info("Record store ready for kinds: {}", ", ".join(kinds))
    return True


def main() -> None:
    """Main entry point for the FoodBridge application."""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    logger.info(
        "Starting {} {} ({})",
        settings.app_name,
        settings.app_version,
        settings.environment,
    )

    if not asyncio.run(bootstrap()):
        sys.exit(1)


if __name__ == "__main__":
    main()
