"""Database models for the atelier archive."""

from tailormate.database.models import (
    Client,
    ClientFile,
    ClientMeasurement,
    ClientMeasurementValue,
    ClientNote,
    Order,
    OrderFile,
    OrderItem,
)

__all__ = [
    "Client",
    "ClientFile",
    "ClientMeasurement",
    "ClientMeasurementValue",
    "ClientNote",
    "Order",
    "OrderFile",
    "OrderItem",
]
