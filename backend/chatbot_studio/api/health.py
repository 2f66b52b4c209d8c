"""
Health check API endpoint.
"""
import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from chatbot_studio.api.deps import DbSession
from chatbot_studio.core.config import settings
from chatbot_studio.core.redis import RedisClient

router = APIRouter()
logger = logging.getLogger(__name__)


class ServiceHealth(BaseModel):
    """Health status for a service."""

    name: str
    status: str  # "healthy", "unhealthy"
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy", "unhealthy", "degraded"
    services: list[ServiceHealth]


async def check_database_health(db) -> ServiceHealth:
    """Check database connection health."""
    try:
        await db.execute(text("SELECT 1"))
        return ServiceHealth(name="database", status="healthy")
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return ServiceHealth(
            name="database",
            status="unhealthy",
            message=str(e),
        )


async def check_redis_health() -> ServiceHealth:
    """Check Redis connection health."""
    try:
        await RedisClient.ping()
        return ServiceHealth(name="redis", status="healthy")
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return ServiceHealth(
            name="redis",
            status="unhealthy",
            message=str(e),
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """
    Check the database and, when rate limiting is on, Redis.

    The service is unhealthy without its database; a Redis outage only
    degrades it because the chat rate limiter fails open.
    """
    database = await check_database_health(db)
    services = [database]

    if settings.rate_limit_enabled:
        services.append(await check_redis_health())

    if database.status != "healthy":
        overall_status = "unhealthy"
    elif all(s.status == "healthy" for s in services):
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        services=services,
    )
