"""Read-side schemas for the client archive and order listing."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None


class ClientGroupResponse(BaseModel):
    """One display identity: client rows that share a normalized name."""

    key: str = Field(..., description="Normalized name shared by the group")
    client: ClientResponse = Field(..., description="Most recently created row")
    member_ids: List[UUID] = Field(default_factory=list)


class MeasurementValueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    garment: str
    key: str
    value: Optional[float] = None
    unit: Optional[str] = None


class MeasurementSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    raw_text: Optional[str] = None
    structured_data: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    values: List[MeasurementValueResponse] = Field(default_factory=list)


class ClientNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    notes: List[str] = Field(default_factory=list)
    raw_text: Optional[str] = None
    source: str
    created_at: Optional[datetime] = None


class FileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    storage_path: str
    original_name: Optional[str] = None
    public_url: Optional[str] = None


class ClientDetailResponse(BaseModel):
    client: ClientResponse
    measurements: List[MeasurementSessionResponse] = Field(default_factory=list)
    notes: List[ClientNoteResponse] = Field(default_factory=list)
    files: List[FileResponse] = Field(default_factory=list)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    garment: str
    quantity: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_id: Optional[UUID] = None
    client_name: Optional[str] = None
    order_number: Optional[str] = None
    status: str
    order_date: Optional[date] = None
    delivery_date: Optional[date] = None
    total_amount: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    files: List[FileResponse] = Field(default_factory=list)


class AtelierStatsResponse(BaseModel):
    """Per-tailor record counts shown on the dashboard."""

    clients: int = Field(0, description="Stored client rows, before name grouping")
    orders: int = 0
    measurements: int = Field(0, description="Measurement sessions")
