"""Repositories for measurement sessions and their flattened values."""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tailormate.database.models import ClientMeasurement, ClientMeasurementValue
from tailormate.repositories.base_repository import BaseRepository


class MeasurementRepository(BaseRepository[ClientMeasurement]):
    """Measurement sessions (raw text plus the original nested blob)."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ClientMeasurement)

    async def create_session(
        self,
        tailor_id: UUID,
        client_id: UUID,
        raw_text: Optional[str],
        structured_data: Optional[Dict[str, Any]],
    ) -> ClientMeasurement:
        return await self.create(
            tailor_id=tailor_id,
            client_id=client_id,
            raw_text=raw_text,
            structured_data=structured_data,
        )

    async def list_for_client(self, client_ids: List[UUID]) -> List[ClientMeasurement]:
        """Sessions of the given clients with their values, most recent first."""
        stmt = (
            select(ClientMeasurement)
            .where(ClientMeasurement.client_id.in_(client_ids))
            .options(selectinload(ClientMeasurement.values))
            .order_by(ClientMeasurement.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class MeasurementValueRepository(BaseRepository[ClientMeasurementValue]):
    """Flattened measurement rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ClientMeasurementValue)

    async def bulk_create(self, rows: List[Dict[str, Any]]) -> List[ClientMeasurementValue]:
        return await self.create_many(rows)
