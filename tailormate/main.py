"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tailormate.api.v1.endpoints import health
from tailormate.api.v1.router import api_router
from tailormate.core.config import settings
from tailormate.core.database import close_database, init_database
from tailormate.core.exceptions import (
    AppError,
    ExtractionServiceError,
    ReconciliationError,
    SessionRequiredError,
    UploadError,
    ValidationError,
)
from tailormate.utils.logging import get_logger
from tailormate.utils.responses import create_error_detail

LOGGER = get_logger(__name__, level=settings.log_level)

# Most specific first; the first matching class decides the status
ERROR_STATUS = [
    (SessionRequiredError, status.HTTP_401_UNAUTHORIZED, "Session Required"),
    (UploadError, status.HTTP_502_BAD_GATEWAY, "Upload Failed"),
    (ExtractionServiceError, status.HTTP_502_BAD_GATEWAY, "Extraction Failed"),
    (ReconciliationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Save Failed"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Invalid Request"),
]


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )

    try:
        await init_database(auto_create=settings.db.auto_create)
        LOGGER.info("Database initialized successfully")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    LOGGER.info("Shutting down application")
    try:
        await close_database()
    except Exception as e:
        LOGGER.error(
            "Error closing database",
            exc_info=True,
            extra={"error": str(e)}
        )


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Client intake, measurement archive and order tracking for tailoring ateliers",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as problem details."""
    status_code, title = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Error"
    for error_class, mapped_status, mapped_title in ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code, title = mapped_status, mapped_title
            break

    if status_code >= 500:
        LOGGER.error(f"{title}: {exc.message}")
    else:
        LOGGER.warning(f"{title}: {exc.message}")

    error_detail = create_error_detail(
        title=title,
        status=status_code,
        detail=exc.message,
        request=request
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": error_detail.model_dump(mode="json")},
        headers=headers,
    )


app.include_router(api_router, prefix=settings.api_v1_prefix)
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    description="Get basic information about the API",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    """Root endpoint.

    Returns:
        RootResponse: Basic API information
    """
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health="/health",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tailormate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
