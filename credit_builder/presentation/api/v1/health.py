"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from credit_builder import __version__
from credit_builder.core.config import settings
from credit_builder.infrastructure.database import db_manager

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    database: str
    payment_processor_configured: bool


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="""
    Returns the health status of the service.

    Reports "degraded" when the database does not answer; the endpoint
    itself always returns 200.
    """,
)
async def health_check() -> HealthResponse:
    database_ok = await db_manager.ping()

    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        version=__version__,
        database="ok" if database_ok else "unavailable",
        payment_processor_configured=bool(
            settings.stripe_secret_key and settings.stripe_webhook_secret
        ),
    )
