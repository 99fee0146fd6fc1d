"""Repository for client notes."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.database.models import ClientNote
from tailormate.repositories.base_repository import BaseRepository


class ClientNoteRepository(BaseRepository[ClientNote]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, ClientNote)

    async def create_note(
        self,
        tailor_id: UUID,
        client_id: UUID,
        notes: List[str],
        raw_text: str = "",
        source: str = "manual",
    ) -> ClientNote:
        return await self.create(
            tailor_id=tailor_id,
            client_id=client_id,
            raw_text=raw_text,
            notes=list(notes),
            source=source,
        )

    async def list_for_client(self, client_ids: List[UUID]) -> List[ClientNote]:
        stmt = (
            select(ClientNote)
            .where(ClientNote.client_id.in_(client_ids))
            .order_by(ClientNote.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
