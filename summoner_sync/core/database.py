"""Database engine and session factory management using SQLAlchemy with async support."""

from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from .config import get_global_settings


class DatabaseManager:
    """Database connection and session factory manager.

    Sessions are opened per unit of work from ``async_session_factory``.
    """

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        """Initialize database manager with async engine."""
        settings = get_global_settings()
        self.database_url = database_url or settings.database_url

        self.engine = create_async_engine(
            self.database_url,
            echo=settings.debug if echo is None else echo,
            future=True,
        )

        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


# Created on first use so importing the package never opens an engine
db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get or create the global database manager."""
    global db_manager
    if db_manager is None:
        db_manager = DatabaseManager()
    return db_manager
