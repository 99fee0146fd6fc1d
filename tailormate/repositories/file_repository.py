"""Repository for documents linked to clients."""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.database.models import ClientFile
from tailormate.repositories.base_repository import BaseRepository
from tailormate.schemas.intake import StoredDocument


class ClientFileRepository(BaseRepository[ClientFile]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, ClientFile)

    async def attach_files(
        self, client_id: UUID, documents: List[StoredDocument]
    ) -> List[ClientFile]:
        return await self.create_many(
            [
                {
                    "client_id": client_id,
                    "storage_path": doc.storage_path,
                    "original_name": doc.original_name,
                }
                for doc in documents
            ]
        )

    async def list_for_client(self, client_ids: List[UUID]) -> List[ClientFile]:
        stmt = (
            select(ClientFile)
            .where(ClientFile.client_id.in_(client_ids))
            .order_by(ClientFile.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
