#!/usr/bin/env python3
"""
Database Seed Script

Creates the schema (if missing) and loads the default roles, super-admin
account and blog categories. Safe to run repeatedly.

Usage:
    python -m scripts.seed_db

    # Only create tables
    python -m scripts.seed_db --schema-only
"""

import asyncio
import argparse
import logging

from cms.config import get_settings
from cms.database import async_session, init_db
from cms.logging_config import configure_logging
from cms.seed import seed_all

logger = logging.getLogger(__name__)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the CMS database")
    parser.add_argument("--schema-only", action="store_true", help="Create tables without seeding")
    args = parser.parse_args()

    configure_logging(get_settings())
    await init_db()
    logger.info("Database schema ready")

    if args.schema_only:
        return

    async with async_session() as session:
        await seed_all(session)


if __name__ == "__main__":
    asyncio.run(main())
