"""One intake run: collect -> upload -> extract -> (review) -> reconcile."""

from typing import Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.config import IntakeSettings, settings
from tailormate.core.exceptions import AppError, ValidationError
from tailormate.schemas.auth import ActorSession
from tailormate.schemas.intake import (
    ExtractionResult,
    IntakeKind,
    ReconciliationSummary,
    RunStep,
    StoredDocument,
    UploadedDocument,
)
from tailormate.services.extraction_service import ExtractionService
from tailormate.services.intake.collector import IntakeCollector, SelectedFile
from tailormate.services.intake.extraction_stage import ExtractionStage
from tailormate.services.intake.reconciliation_stage import ReconciliationStage
from tailormate.services.intake.upload_stage import UploadStage
from tailormate.services.storage_service import StorageService
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class IntakeRun:
    """State of one intake run.

    Steps move ``upload -> processing -> review -> saving -> done``. A failed
    analysis returns the run to ``upload`` (uploaded paths are forgotten, so a
    retry uploads everything again); a failed save returns it to ``review``.
    The last failure message is kept in ``error``.
    """

    def __init__(
        self,
        kind: IntakeKind,
        storage: Optional[StorageService] = None,
        extraction: Optional[ExtractionService] = None,
        intake_settings: Optional[IntakeSettings] = None,
        bucket: Optional[str] = None,
        reconciliation: Optional[ReconciliationStage] = None,
    ):
        self.kind = kind
        self.config = intake_settings or settings.intake
        prefix = self.config.client_prefix if kind == IntakeKind.CLIENT else self.config.order_prefix

        self.collector = IntakeCollector(preview_size=self.config.preview_size)
        self.upload_stage = UploadStage(storage or StorageService(), prefix, bucket=bucket)
        self.extraction_stage = ExtractionStage(extraction or ExtractionService())
        self.reconciliation_stage = reconciliation or ReconciliationStage(kind, self.config)

        self.step = RunStep.UPLOAD
        self.error: Optional[str] = None
        self.results: List[ExtractionResult] = []
        self.stored_documents: List[StoredDocument] = []

    @property
    def documents(self) -> List[UploadedDocument]:
        return self.collector.documents

    def add_files(self, files: Optional[Iterable[SelectedFile]]) -> List[UploadedDocument]:
        return self.collector.add(files)

    def remove_document(self, document_id: str) -> bool:
        if self.step != RunStep.UPLOAD:
            raise ValidationError("Documents can only be removed before analysis")
        return self.collector.remove(document_id)

    async def analyze(self, session: Optional[ActorSession]) -> List[ExtractionResult]:
        """Upload the collected documents and extract them.

        Raises:
            SessionRequiredError, UploadError, ExtractionServiceError: after
                the run has been put back to the upload step
        """
        if self.step != RunStep.UPLOAD:
            raise ValidationError(f"Cannot analyze a run in step {self.step.value}")
        if not len(self.collector):
            raise ValidationError("No documents to analyze")

        self.error = None
        self.step = RunStep.PROCESSING
        documents = self.collector.documents

        try:
            await self.upload_stage.run(session, documents)
            self.results = await self.extraction_stage.run(session, documents)
        except Exception as e:
            for doc in documents:
                doc.storage_path = None
            self.results = []
            self._fail(e, RunStep.UPLOAD)
            raise

        self.stored_documents = [
            StoredDocument(storage_path=doc.storage_path, original_name=doc.name)
            for doc in documents
        ]
        self.step = RunStep.REVIEW
        return self.results

    def resume_review(
        self,
        documents: Sequence[StoredDocument],
        results: Sequence[ExtractionResult],
    ) -> None:
        """Enter review with documents and results produced by an earlier analysis."""
        self.stored_documents = list(documents)
        self.results = list(results)
        self.error = None
        self.step = RunStep.REVIEW

    def update_result(self, index: int, result: ExtractionResult) -> None:
        """Replace one extraction result during review."""
        if self.step != RunStep.REVIEW:
            raise ValidationError("Results can only be edited during review")
        if not 0 <= index < len(self.results):
            raise ValidationError(f"No extraction result at index {index}")
        self.results[index] = result

    async def save(
        self, session: Optional[ActorSession], db: AsyncSession
    ) -> ReconciliationSummary:
        """Persist the reviewed results.

        Raises:
            SessionRequiredError, ReconciliationError: after the run has been
                put back to the review step
        """
        if self.step != RunStep.REVIEW:
            raise ValidationError(f"Cannot save a run in step {self.step.value}")

        self.error = None
        self.step = RunStep.SAVING
        try:
            summary = await self.reconciliation_stage.run(
                session, db, self.results, self.stored_documents
            )
        except Exception as e:
            self._fail(e, RunStep.REVIEW)
            raise

        self.step = RunStep.DONE
        return summary

    def reset(self) -> None:
        self.collector.clear()
        self.results = []
        self.stored_documents = []
        self.error = None
        self.step = RunStep.UPLOAD

    def _fail(self, error: Exception, step: RunStep) -> None:
        message = error.message if isinstance(error, AppError) else str(error)
        self.error = message or "Intake failed"
        self.step = step
        LOGGER.warning(f"{self.kind.value} intake failed, back to {step.value}: {self.error}")
