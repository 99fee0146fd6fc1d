"""Order listing."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.config import settings
from tailormate.repositories import OrderRepository
from tailormate.schemas.archive import FileResponse, OrderItemResponse, OrderResponse
from tailormate.services.storage_service import StorageService


class OrderService:

    def __init__(self, db_session: AsyncSession, storage: Optional[StorageService] = None):
        self.repository = OrderRepository(db_session)
        self.storage = storage or StorageService()

    async def list_orders(self, tailor_id: UUID) -> List[OrderResponse]:
        """The tailor's orders, most recent first, with client name, items and files."""
        orders = await self.repository.list_for_tailor(tailor_id)
        return [
            OrderResponse(
                id=order.id,
                client_id=order.client_id,
                client_name=order.client.full_name if order.client else None,
                order_number=order.order_number,
                status=order.status,
                order_date=order.order_date,
                delivery_date=order.delivery_date,
                total_amount=order.total_amount,
                notes=order.notes,
                created_at=order.created_at,
                items=[OrderItemResponse.model_validate(item) for item in order.items],
                files=[
                    FileResponse(
                        id=f.id,
                        storage_path=f.storage_path,
                        original_name=f.original_name,
                        public_url=self.storage.get_public_url(settings.storage_bucket, f.storage_path),
                    )
                    for f in order.files
                ],
            )
            for order in orders
        ]
