"""Repositories for orders, their garment lines and linked documents."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tailormate.database.models import Order, OrderFile, OrderItem
from tailormate.repositories.base_repository import BaseRepository
from tailormate.schemas.intake import OrderItemDescriptor, StoredDocument
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OrderRepository(BaseRepository[Order]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Order)

    async def create_order(
        self,
        tailor_id: UUID,
        client_id: UUID,
        order_number: str,
        status: str = "draft",
        notes: Optional[str] = None,
    ) -> Order:
        order = await self.create(
            tailor_id=tailor_id,
            client_id=client_id,
            order_number=order_number,
            status=status,
            notes=notes,
        )
        LOGGER.info(f"Created order {order.order_number} ({order.id}) for client {client_id}")
        return order

    async def list_for_tailor(self, tailor_id: UUID) -> List[Order]:
        """Orders of the tailor with client, items and files loaded, most recent first."""
        stmt = (
            select(Order)
            .where(Order.tailor_id == tailor_id)
            .options(
                selectinload(Order.client),
                selectinload(Order.items),
                selectinload(Order.files),
            )
            .order_by(Order.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class OrderItemRepository(BaseRepository[OrderItem]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, OrderItem)

    async def add_items(
        self, order_id: UUID, items: List[OrderItemDescriptor]
    ) -> List[OrderItem]:
        """Insert one line per detected item; a missing quantity means 1."""
        return await self.create_many(
            [
                {"order_id": order_id, "garment": item.garment, "quantity": item.quantity or 1}
                for item in items
            ]
        )


class OrderFileRepository(BaseRepository[OrderFile]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, OrderFile)

    async def attach_files(
        self, order_id: UUID, documents: List[StoredDocument]
    ) -> List[OrderFile]:
        return await self.create_many(
            [
                {
                    "order_id": order_id,
                    "storage_path": doc.storage_path,
                    "original_name": doc.original_name,
                }
                for doc in documents
            ]
        )
