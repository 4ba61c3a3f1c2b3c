#!/usr/bin/env python
"""
Load the storefront reference data.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --create-schema
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from storefront.config import get_settings
from storefront.config.logging import configure_logging
from storefront.database.connection import close_database, get_db, init_database
from storefront.database.seed import seed_catalog

logger = structlog.get_logger(__name__)


async def main(create_schema: bool) -> None:
    configure_logging(get_settings().monitoring.log_level)

    await init_database(create_schema=create_schema)
    try:
        async with get_db() as db:
            loaded = await seed_catalog(db)
        logger.info("Seeding finished", loaded=loaded)
    finally:
        await close_database()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the storefront catalog")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before loading",
    )
    args = parser.parse_args()
    asyncio.run(main(args.create_schema))
