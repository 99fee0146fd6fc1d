"""Repository layer modules."""

from tailormate.repositories.client_repository import ClientRepository
from tailormate.repositories.file_repository import ClientFileRepository
from tailormate.repositories.measurement_repository import (
    MeasurementRepository,
    MeasurementValueRepository,
)
from tailormate.repositories.note_repository import ClientNoteRepository
from tailormate.repositories.order_repository import (
    OrderFileRepository,
    OrderItemRepository,
    OrderRepository,
)

__all__ = [
    "ClientRepository",
    "ClientFileRepository",
    "ClientNoteRepository",
    "MeasurementRepository",
    "MeasurementValueRepository",
    "OrderRepository",
    "OrderItemRepository",
    "OrderFileRepository",
]
