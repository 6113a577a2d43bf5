#!/usr/bin/env python3
"""
Database initialization script.

Creates the schema and seeds the default exam templates. Safe to run more
than once; existing templates are never modified.

Usage:
    python -m examsheet.scripts.init_db [--database-url URL] [--with-licenses]
"""

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

from examsheet.common.db.connection import get_database_settings
from examsheet.config import settings
from examsheet.database.init_db import close_database, create_schema, get_session_factory, initialize_database
from examsheet.evaluations.seed import DEFAULT_TEMPLATES, seed_templates
from examsheet.registry.models import License

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def ensure_licenses(session, license_types) -> int:
    """Register missing licence categories. For local databases without the registry data."""
    created = 0
    for license_type in license_types:
        found = (await session.execute(
            select(License.id).where(License.type == license_type)
        )).scalar_one_or_none()
        if found is None:
            session.add(License(type=license_type))
            created += 1
    await session.commit()
    return created


async def async_main(database_url: str, with_licenses: bool) -> None:
    """Initialize the database."""
    try:
        await initialize_database(database_url=database_url, echo=settings.SQL_ECHO)
        await create_schema()

        async with get_session_factory()() as session:
            if with_licenses:
                created = await ensure_licenses(session, [d.license_type for d in DEFAULT_TEMPLATES])
                logger.info(f"Registered {created} licence categories")

        async with get_session_factory()() as session:
            report = await seed_templates(session)

        if report.skipped_licenses:
            logger.warning(f"No licence rows for: {', '.join(report.skipped_licenses)}")
        logger.info("Database initialized successfully")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        sys.exit(1)
    finally:
        await close_database()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the schema and seed exam templates.")
    parser.add_argument(
        "--database-url",
        default=settings.DATABASE_URL or get_database_settings()["database_url"],
        help="SQLAlchemy async database URL",
    )
    parser.add_argument(
        "--with-licenses",
        action="store_true",
        help="Also register the licence categories the default templates need",
    )
    args = parser.parse_args()
    asyncio.run(async_main(args.database_url, args.with_licenses))


if __name__ == "__main__":
    main()
