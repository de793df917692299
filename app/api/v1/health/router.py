import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import APP_VERSION
from app.core.exceptions import ServiceError
from app.core.schemas import ApiResponse, Timestamp, utcnow
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    status: str
    database: str
    timestamp: Timestamp
    version: str


@router.get("", response_model=ApiResponse[HealthStatus])
async def health(db: AsyncSession = Depends(get_db)):
    """Liveness plus a database round trip. No authentication."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check database probe failed: %s", exc)
        raise ServiceError(
            "Database is not reachable",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "SERVICE_UNAVAILABLE",
        )
    return ApiResponse(
        data=HealthStatus(
            status="healthy",
            database="connected",
            timestamp=utcnow(),
            version=APP_VERSION,
        )
    )
