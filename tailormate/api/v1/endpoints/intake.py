"""Document intake API endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.auth import get_current_session
from tailormate.core.config import settings
from tailormate.core.database import get_async_session as get_session
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.common import ApiResponse
from tailormate.schemas.intake import (
    AnalyzedDocument,
    AnalyzeIntakeResponse,
    IntakeKind,
    SaveIntakeRequest,
)
from tailormate.services.extraction_service import ExtractionService
from tailormate.services.intake import IntakeRun
from tailormate.services.storage_service import StorageService
from tailormate.utils.logging import get_logger
from tailormate.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


async def get_storage_service() -> StorageService:
    return StorageService()


async def get_extraction_service() -> ExtractionService:
    return ExtractionService()


async def get_intake_run(
    kind: IntakeKind,
    storage: Annotated[StorageService, Depends(get_storage_service)],
    extraction: Annotated[ExtractionService, Depends(get_extraction_service)],
) -> IntakeRun:
    return IntakeRun(kind, storage=storage, extraction=extraction)


@router.post(
    "/{kind}/analyze",
    response_model=ApiResponse,
    summary="Upload documents and extract client data",
    operation_id="analyze_intake_documents",
)
async def analyze_documents(
    request: Request,
    kind: IntakeKind,
    files: List[UploadFile] = File(
        ...,
        description="Photos or scans of client cards, measurement sheets or order forms"
    ),
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    run: Annotated[IntakeRun, Depends(get_intake_run)] = None,
    storage: Annotated[StorageService, Depends(get_storage_service)] = None,
) -> ApiResponse:
    """Upload the documents and return the extraction results for review."""
    selected = []
    for upload in files:
        selected.append((upload.filename or "document", await upload.read(), upload.content_type))
    run.add_files(selected)

    results = await run.analyze(session)

    documents = [
        AnalyzedDocument(
            id=doc.id,
            name=doc.name,
            storage_path=doc.storage_path,
            public_url=storage.get_public_url(settings.storage_bucket, doc.storage_path)
            if doc.storage_path else None,
            has_preview=doc.preview is not None and not doc.preview.released,
        )
        for doc in run.documents
    ]
    response = AnalyzeIntakeResponse(
        kind=kind,
        documents=documents,
        results=[result.model_dump(by_alias=True) for result in results],
    )
    return create_api_response(
        data=response,
        message=f"Extracted {len(results)} result(s) from {len(documents)} document(s)",
        request=request
    )


@router.post(
    "/{kind}/save",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save reviewed extraction results",
    operation_id="save_intake_results",
)
async def save_results(
    request: Request,
    kind: IntakeKind,
    body: SaveIntakeRequest,
    session: Annotated[ActorSession, Depends(get_current_session)] = None,
    db_session: Annotated[AsyncSession, Depends(get_session)] = None,
    run: Annotated[IntakeRun, Depends(get_intake_run)] = None,
) -> ApiResponse:
    """Reconcile reviewed results into clients, measurements, notes and orders."""
    run.resume_review(body.documents, body.results)
    summary = await run.save(session, db_session)

    return create_api_response(
        data=summary.as_dict(),
        message=f"Saved {summary.processed} result(s), skipped {summary.skipped}",
        request=request
    )
