"""Dashboard counters."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tailormate.repositories import ClientRepository, MeasurementRepository, OrderRepository
from tailormate.schemas.archive import AtelierStatsResponse


class DashboardService:

    def __init__(self, db_session: AsyncSession):
        self.clients = ClientRepository(db_session)
        self.orders = OrderRepository(db_session)
        self.measurements = MeasurementRepository(db_session)

    async def get_stats(self, tailor_id: UUID) -> AtelierStatsResponse:
        """Count the tailor's clients, orders and measurement sessions."""
        return AtelierStatsResponse(
            clients=await self.clients.count(tailor_id=tailor_id),
            orders=await self.orders.count(tailor_id=tailor_id),
            measurements=await self.measurements.count(tailor_id=tailor_id),
        )
