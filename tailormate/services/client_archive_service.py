"""Client archive: grouped client listing and per-client detail."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.core.config import settings
from tailormate.repositories import (
    ClientFileRepository,
    ClientNoteRepository,
    ClientRepository,
    MeasurementRepository,
)
from tailormate.schemas.archive import (
    ClientDetailResponse,
    ClientGroupResponse,
    ClientNoteResponse,
    ClientResponse,
    FileResponse,
    MeasurementSessionResponse,
)
from tailormate.services.storage_service import StorageService
from tailormate.utils.logging import get_logger
from tailormate.utils.name_matching import group_clients

LOGGER = get_logger(__name__)


class ClientArchiveService:
    """Read side of the client archive, scoped to one tailor."""

    def __init__(self, db_session: AsyncSession, storage: Optional[StorageService] = None):
        """Initialize service with database session.

        Args:
            db_session: SQLAlchemy async session
            storage: Used to resolve public URLs of client files
        """
        self.clients = ClientRepository(db_session)
        self.measurements = MeasurementRepository(db_session)
        self.notes = ClientNoteRepository(db_session)
        self.files = ClientFileRepository(db_session)
        self.storage = storage or StorageService()

    async def list_clients(self, tailor_id: UUID) -> List[ClientGroupResponse]:
        """List the tailor's clients as display identities.

        Rows with the same normalized name collapse into one entry whose
        representative is the most recently created row.
        """
        rows = await self.clients.list_for_tailor(tailor_id)
        groups = group_clients(rows)
        LOGGER.debug(f"Grouped {len(rows)} client row(s) into {len(groups)} identities")
        return [
            ClientGroupResponse(
                key=group.key,
                client=ClientResponse.model_validate(group.representative),
                member_ids=group.member_ids,
            )
            for group in groups
        ]

    async def get_client_detail(
        self, tailor_id: UUID, client_id: UUID
    ) -> Optional[ClientDetailResponse]:
        """Get a client with its measurement sessions, notes and files.

        Returns:
            Detail response or None if the tailor has no such client
        """
        client = await self.clients.get_for_tailor(tailor_id, client_id)
        if not client:
            return None

        sessions = await self.measurements.list_for_client([client.id])
        notes = await self.notes.list_for_client([client.id])
        files = await self.files.list_for_client([client.id])

        return ClientDetailResponse(
            client=ClientResponse.model_validate(client),
            measurements=[MeasurementSessionResponse.model_validate(s) for s in sessions],
            notes=[ClientNoteResponse.model_validate(n) for n in notes],
            files=[
                FileResponse(
                    id=f.id,
                    storage_path=f.storage_path,
                    original_name=f.original_name,
                    public_url=self.storage.get_public_url(settings.storage_bucket, f.storage_path),
                )
                for f in files
            ],
        )
