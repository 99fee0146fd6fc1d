"""Document intake pipeline."""

from tailormate.services.intake.collector import IntakeCollector, make_preview
from tailormate.services.intake.extraction_stage import ExtractionStage
from tailormate.services.intake.pipeline import IntakeRun
from tailormate.services.intake.reconciliation_stage import ReconciliationStage
from tailormate.services.intake.upload_stage import UploadStage, build_storage_path

__all__ = [
    "IntakeCollector",
    "IntakeRun",
    "UploadStage",
    "ExtractionStage",
    "ReconciliationStage",
    "build_storage_path",
    "make_preview",
]
