"""Database initialization script using SQLAlchemy create_all().

Creates (or drops) every table registered on ``Base.metadata``.
"""

import asyncio
import sys
from typing import NoReturn

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from summoner_sync.core import Base, get_global_settings
from summoner_sync.core.logging import setup_logging

# Register every table on Base.metadata
from summoner_sync.features.summoners import orm_models  # noqa: F401

logger = structlog.get_logger(__name__)


def _masked_url(url: str, password: str) -> str:
    return url.replace(password, "***") if password else url


async def init_db() -> None:
    """Initialize database by creating all tables defined in models.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    settings = get_global_settings()
    database_url = settings.database_url

    logger.info(
        "Initializing database",
        database_url=_masked_url(database_url, settings.postgres_password),
    )

    engine = create_async_engine(database_url, echo=settings.debug, future=True)
    try:
        async with engine.begin() as conn:
            logger.info("Creating database tables...")
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error(
            "Database initialization failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        await engine.dispose()

    logger.info(
        "Database initialization completed successfully",
        tables_created=len(Base.metadata.tables),
        table_names=list(Base.metadata.tables.keys()),
    )


async def drop_all_tables() -> None:
    """Drop all tables from the database.

    WARNING: This is destructive and will delete all data!

    Raises:
        SQLAlchemyError: If database connection or table dropping fails
    """
    settings = get_global_settings()

    logger.warning("Dropping all database tables...")

    engine = create_async_engine(settings.database_url, echo=settings.debug, future=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    except SQLAlchemyError as e:
        logger.error(
            "Failed to drop database tables",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise
    finally:
        await engine.dispose()

    logger.info("All database tables dropped successfully")


async def reset_db() -> None:
    """Reset database by dropping and recreating all tables."""
    logger.warning("Resetting database (drop + create)...")
    await drop_all_tables()
    await init_db()
    logger.info("Database reset completed successfully")


def main() -> NoReturn:
    """Run CLI for database initialization commands.

    Usage:
        python -m summoner_sync.init_db [init|drop|reset]
    """
    setup_logging(get_global_settings().log_level)
    command = sys.argv[1] if len(sys.argv) > 1 else "init"

    if command == "init":
        asyncio.run(init_db())
    elif command == "drop":
        asyncio.run(drop_all_tables())
    elif command == "reset":
        asyncio.run(reset_db())
    else:
        logger.error("Unknown command", command=command)
        print("Usage: python -m summoner_sync.init_db [init|drop|reset]")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
