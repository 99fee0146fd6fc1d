"""Schemas for the document intake pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IntakeKind(str, Enum):
    """Which intake flow a run belongs to."""

    CLIENT = "clients"
    ORDER = "orders"


class RunStep(str, Enum):
    """Where an intake run currently stands."""

    UPLOAD = "upload"
    PROCESSING = "processing"
    REVIEW = "review"
    SAVING = "saving"
    DONE = "done"


@dataclass
class PreviewHandle:
    """Transient thumbnail of an image document."""

    content: Optional[bytes]
    content_type: str = "image/jpeg"

    @property
    def released(self) -> bool:
        return self.content is None

    def release(self) -> None:
        self.content = None


@dataclass
class UploadedDocument:
    """A user-selected file inside one intake run.

    ``storage_path`` is set only after the document was uploaded.
    """

    id: str
    name: str
    content: bytes
    content_type: str = "application/octet-stream"
    preview: Optional[PreviewHandle] = None
    storage_path: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


class OrderItemDescriptor(BaseModel):
    """A garment line detected on an order form."""

    garment: str = ""
    quantity: Optional[int] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _lenient_quantity(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return None


class StructuredFields(BaseModel):
    """Best-effort structured parse of one document."""

    model_config = ConfigDict(extra="ignore")

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    measurements: Optional[Dict[str, Any]] = None
    notes: Optional[List[str]] = None
    order_items: Optional[List[OrderItemDescriptor]] = None

    @field_validator("full_name", "email", "phone", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        return value if isinstance(value, str) else None

    @field_validator("measurements", mode="before")
    @classmethod
    def _mapping_or_none(cls, value: Any) -> Optional[Dict[str, Any]]:
        return value if isinstance(value, dict) else None

    @field_validator("notes", mode="before")
    @classmethod
    def _drop_empty_notes(cls, value: Any) -> Optional[List[str]]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return None
        return [str(note) for note in value if note is not None and str(note).strip()]

    @field_validator("order_items", mode="before")
    @classmethod
    def _drop_unusable_items(cls, value: Any) -> Optional[List[Any]]:
        """Keep only items that name a garment; the rest of the result survives."""
        if not isinstance(value, list):
            return None
        return [
            item for item in value
            if isinstance(item, OrderItemDescriptor)
            or (isinstance(item, dict) and isinstance(item.get("garment"), str))
        ]


class ExtractionResult(BaseModel):
    """Extraction service output for one stored document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_name: str = Field(default="", alias="fileName")
    raw_text: str = Field(default="", alias="rawText")
    structured: StructuredFields = Field(default_factory=StructuredFields)

    @field_validator("file_name", "raw_text", mode="before")
    @classmethod
    def _empty_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("structured", mode="before")
    @classmethod
    def _empty_structured(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, StructuredFields)) else {}

    @property
    def has_identity(self) -> bool:
        return bool(self.structured.full_name and self.structured.full_name.strip())


class StoredDocument(BaseModel):
    """A document already in storage, as referenced when saving a reviewed run."""

    storage_path: str
    original_name: Optional[str] = None


@dataclass
class ReconciliationOutcome:
    """What was written for one extraction result."""

    index: int
    file_name: str
    skipped: bool = False
    client_id: Optional[UUID] = None
    client_created: bool = False
    measurement_id: Optional[UUID] = None
    measurement_values: int = 0
    note_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    order_number: Optional[str] = None
    order_items: int = 0
    files_linked: int = 0


@dataclass
class ReconciliationSummary:
    """Totals for one reconciliation pass."""

    kind: IntakeKind
    outcomes: List[ReconciliationOutcome] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(1 for o in self.outcomes if not o.skipped)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def clients_created(self) -> int:
        return sum(1 for o in self.outcomes if o.client_created)

    @property
    def clients_reused(self) -> int:
        return sum(1 for o in self.outcomes if o.client_id and not o.client_created)

    @property
    def orders_created(self) -> int:
        return sum(1 for o in self.outcomes if o.order_id)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "processed": self.processed,
            "skipped": self.skipped,
            "clients_created": self.clients_created,
            "clients_reused": self.clients_reused,
            "orders_created": self.orders_created,
            "outcomes": [
                {
                    "index": o.index,
                    "file_name": o.file_name,
                    "skipped": o.skipped,
                    "client_id": str(o.client_id) if o.client_id else None,
                    "client_created": o.client_created,
                    "measurement_id": str(o.measurement_id) if o.measurement_id else None,
                    "measurement_values": o.measurement_values,
                    "note_id": str(o.note_id) if o.note_id else None,
                    "order_id": str(o.order_id) if o.order_id else None,
                    "order_number": o.order_number,
                    "order_items": o.order_items,
                    "files_linked": o.files_linked,
                }
                for o in self.outcomes
            ],
        }


class SaveIntakeRequest(BaseModel):
    """Reviewed extraction results to persist."""

    documents: List[StoredDocument] = Field(default_factory=list)
    results: List[ExtractionResult] = Field(default_factory=list)


class AnalyzedDocument(BaseModel):
    """A document after upload, as returned to the caller."""

    id: str
    name: str
    storage_path: Optional[str] = None
    public_url: Optional[str] = None
    has_preview: bool = False


class AnalyzeIntakeResponse(BaseModel):
    """Upload + extraction outcome for the review step."""

    kind: IntakeKind
    documents: List[AnalyzedDocument]
    results: List[Dict[str, Any]]
