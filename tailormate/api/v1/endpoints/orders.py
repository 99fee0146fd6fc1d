"""Order API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.auth import get_current_session
from tailormate.core.database import get_async_session as get_session
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.common import ApiResponse
from tailormate.services.order_service import OrderService
from tailormate.utils.responses import create_api_response

router = APIRouter()


async def get_order_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> OrderService:
    return OrderService(db_session)


@router.get(
    "/",
    response_model=ApiResponse,
    summary="List orders",
    operation_id="list_orders",
)
async def list_orders(
    request: Request,
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    order_service: Annotated[OrderService, Depends(get_order_service)] = None,
) -> ApiResponse:
    """List the tailor's orders, most recent first."""
    orders = await order_service.list_orders(session.tailor_id)
    return create_api_response(
        data=orders,
        message="Orders retrieved successfully",
        request=request
    )
