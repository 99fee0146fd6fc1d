from fastapi import APIRouter

from tailormate.api.v1.endpoints import clients, dashboard, intake, orders

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(intake.router, prefix="/intake", tags=["Intake"])
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"])
api_router.include_router(orders.router, prefix="/orders", tags=["Orders"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])

__all__ = ["api_router"]
