"""Concurrent, all-or-nothing upload of an intake batch."""

import asyncio
import uuid
from typing import List, Optional

from tailormate.core.auth import require_session
from tailormate.core.config import settings
from tailormate.core.exceptions import AppError, UploadError
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.intake import UploadedDocument
from tailormate.services.storage_service import StorageService
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


def build_storage_path(prefix: str, filename: str) -> str:
    return f"{prefix}/{uuid.uuid4()}-{filename}"


class UploadStage:
    """Writes every document of a batch to storage under ``prefix``."""

    def __init__(
        self,
        storage: StorageService,
        prefix: str,
        bucket: Optional[str] = None,
    ):
        self.storage = storage
        self.prefix = prefix
        self.bucket = bucket or settings.storage_bucket

    async def run(
        self, session: Optional[ActorSession], documents: List[UploadedDocument]
    ) -> List[UploadedDocument]:
        """Upload all documents concurrently.

        Storage paths are attached only once every upload succeeded; the
        first failure fails the whole batch. Objects already written by
        the other uploads are left in place.

        Raises:
            SessionRequiredError: Without an active session, before any upload
            UploadError: If any single upload fails
        """
        session = require_session(session)
        if not documents:
            return documents

        paths = [build_storage_path(self.prefix, doc.name) for doc in documents]
        LOGGER.info(f"Uploading {len(documents)} document(s) to {self.bucket}/{self.prefix}")

        try:
            await asyncio.gather(
                *(
                    self.storage.upload(
                        self.bucket,
                        path,
                        doc.content,
                        doc.content_type,
                        session.access_token,
                    )
                    for doc, path in zip(documents, paths)
                )
            )
        except UploadError:
            raise
        except AppError as e:
            raise UploadError(e.message, original_error=e)

        for doc, path in zip(documents, paths):
            doc.storage_path = path

        LOGGER.info(f"Uploaded {len(documents)} document(s)")
        return documents
