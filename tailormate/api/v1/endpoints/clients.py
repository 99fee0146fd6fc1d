"""Client archive API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.auth import get_current_session
from tailormate.core.database import get_async_session as get_session
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.common import ApiResponse
from tailormate.services.client_archive_service import ClientArchiveService
from tailormate.utils.responses import create_api_response, create_error_detail

router = APIRouter()


async def get_client_archive_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> ClientArchiveService:
    return ClientArchiveService(db_session)


@router.get(
    "/",
    response_model=ApiResponse,
    summary="List clients",
    operation_id="list_clients",
)
async def list_clients(
    request: Request,
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    archive: Annotated[ClientArchiveService, Depends(get_client_archive_service)] = None,
) -> ApiResponse:
    """List the tailor's clients, one entry per person."""
    groups = await archive.list_clients(session.tailor_id)
    return create_api_response(
        data=groups,
        message="Clients retrieved successfully",
        request=request
    )


@router.get(
    "/{client_id}",
    response_model=ApiResponse,
    summary="Get client details",
    operation_id="get_client",
)
async def get_client(
    request: Request,
    client_id: UUID,
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    archive: Annotated[ClientArchiveService, Depends(get_client_archive_service)] = None,
) -> ApiResponse:
    """Retrieve a client with measurements, notes and files."""
    detail = await archive.get_client_detail(session.tailor_id, client_id)
    if not detail:
        error_detail = create_error_detail(
            title="Client Not Found",
            status=status.HTTP_404_NOT_FOUND,
            detail=f"Client with ID {client_id} not found",
            request=request
        )
        raise HTTPException(status_code=404, detail=error_detail.model_dump(mode='json'))

    return create_api_response(
        data=detail,
        message="Client details retrieved successfully",
        request=request
    )
