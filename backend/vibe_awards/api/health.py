"""Health check endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.db.utils import check_database_health
from vibe_awards.dependencies import get_db
from vibe_awards.schemas import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Return service health status.

    Checks connectivity to the database. Reports "degraded" rather than
    failing when the database is unreachable.
    """
    health = await check_database_health(db)
    if health["healthy"]:
        return HealthCheckResponse(status="ok", database="ok")
    return HealthCheckResponse(status="degraded", database=f"error: {health['error']}")
