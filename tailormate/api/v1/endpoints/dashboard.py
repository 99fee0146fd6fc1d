"""Dashboard API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.auth import get_current_session
from tailormate.core.database import get_async_session as get_session
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.common import ApiResponse
from tailormate.services.dashboard_service import DashboardService
from tailormate.utils.responses import create_api_response

router = APIRouter()


async def get_dashboard_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> DashboardService:
    return DashboardService(db_session)


@router.get(
    "/stats",
    response_model=ApiResponse,
    summary="Record counts for the acting tailor",
    operation_id="get_dashboard_stats",
)
async def get_stats(
    request: Request,
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    dashboard: Annotated[DashboardService, Depends(get_dashboard_service)] = None,
) -> ApiResponse:
    stats = await dashboard.get_stats(session.tailor_id)
    return create_api_response(
        data=stats,
        message="Dashboard stats retrieved successfully",
        request=request
    )
