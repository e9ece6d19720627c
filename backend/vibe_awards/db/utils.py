"""Database utility functions and common queries."""

from typing import Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from vibe_awards.models.base import Base


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table registered on Base.metadata (no-op for existing ones)."""
    # Import all models so they register with Base.metadata
    import vibe_awards.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database_health(db: AsyncSession) -> dict[str, Union[bool, str]]:
    """Check if database is accessible and responsive.

    Returns:
        dict with 'healthy' boolean and optional 'error' message
    """
    try:
        await db.execute(text("SELECT 1"))
        return {"healthy": True}
    except SQLAlchemyError as e:
        return {"healthy": False, "error": str(e)}
