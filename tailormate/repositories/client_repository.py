"""Repository for client records."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import String, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.database.models import Client
from tailormate.repositories.base_repository import BaseRepository
from tailormate.utils.logging import get_logger
from tailormate.utils.name_matching import names_match, normalize_name, search_token

LOGGER = get_logger(__name__)


class ClientRepository(BaseRepository[Client]):
    """Repository for Client entity operations, always scoped to one tailor."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Client)

    async def find_candidates(self, tailor_id: UUID, token: str) -> List[Client]:
        """Clients of the tailor whose name contains ``token`` (case-insensitive), newest first.

        Periods are removed from the stored name before matching, the same
        way ``normalize_name`` removes them, so every word of a normalized
        key is found in any name that normalizes to it.
        """
        bare_name = func.replace(Client.full_name, ".", "", type_=String)
        stmt = (
            select(Client)
            .where(Client.tailor_id == tailor_id)
            .where(bare_name.icontains(token, autoescape=True))
            .order_by(Client.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_name(self, tailor_id: UUID, full_name: str) -> Optional[Client]:
        """Resolve a stated name to an existing client of the tailor.

        Candidates come from a pattern match on the longest name token; the
        first (most recent) candidate with the same normalized name wins.

        Args:
            tailor_id: Owning tailor
            full_name: Name as extracted from a document

        Returns:
            The matching client or None
        """
        if not normalize_name(full_name):
            return None

        for candidate in await self.find_candidates(tailor_id, search_token(full_name)):
            if names_match(full_name, candidate.full_name):
                return candidate
        return None

    async def create_client(
        self,
        tailor_id: UUID,
        full_name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Client:
        client = await self.create(
            tailor_id=tailor_id,
            full_name=full_name,
            email=email,
            phone=phone,
            address=address,
        )
        LOGGER.info(f"Created client: {client.id}")
        return client

    async def list_for_tailor(self, tailor_id: UUID) -> List[Client]:
        """All clients of the tailor, most recent first."""
        stmt = (
            select(Client)
            .where(Client.tailor_id == tailor_id)
            .order_by(Client.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_tailor(self, tailor_id: UUID, client_id: UUID) -> Optional[Client]:
        stmt = select(Client).where(Client.id == client_id, Client.tailor_id == tailor_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
