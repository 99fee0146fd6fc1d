"""Submits an uploaded batch to the extraction service."""

from typing import List, Optional

from tailormate.core.auth import require_session
from tailormate.core.exceptions import UploadError
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.intake import ExtractionResult, UploadedDocument
from tailormate.services.extraction_service import ExtractionService
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ExtractionStage:

    def __init__(self, service: ExtractionService):
        self.service = service

    async def run(
        self, session: Optional[ActorSession], documents: List[UploadedDocument]
    ) -> List[ExtractionResult]:
        """Extract structured fields for every uploaded document, in one request.

        Raises:
            SessionRequiredError: Without an active session
            UploadError: If a document has no storage path yet
            ExtractionServiceError: If the service call fails
        """
        session = require_session(session)

        paths = []
        for doc in documents:
            if not doc.storage_path:
                raise UploadError(f"Document {doc.name} has not been uploaded")
            paths.append(doc.storage_path)

        results = await self.service.extract(paths, session.access_token)
        LOGGER.info(f"Extraction returned {len(results)} result(s) for {len(paths)} document(s)")
        return results
