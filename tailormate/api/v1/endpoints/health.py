"""Liveness and database reachability."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.config import settings
from tailormate.core.database import get_async_session, ping
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str
    service: str
    database: str


@router.get(
    "",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Service and database status",
    operation_id="get_service_health_status",
)
async def health_check(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
) -> HealthCheckResponse:
    """Report ``degraded`` rather than failing when the database is down."""
    try:
        await ping(db_session)
        database = "reachable"
    except (SQLAlchemyError, OSError) as e:
        LOGGER.warning(f"Database unreachable: {e}")
        database = "unreachable"

    return HealthCheckResponse(
        status="healthy" if database == "reachable" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=database,
    )
