"""
Credit Builder Payments - Main Application Entry Point

Credit-builder plans with monthly scheduled payments, settled through
verified payment processor webhooks.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from credit_builder import __version__
from credit_builder.core.config import settings
from credit_builder.core.logging import setup_logging
from credit_builder.core.metrics import get_metrics, get_metrics_content_type
from credit_builder.infrastructure.clients import StripePaymentProcessorClient
from credit_builder.infrastructure.database import db_manager
from credit_builder.presentation.api import api_router, webhook_alias_router
from credit_builder.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Startup configures logging, opens the database pool (creating tables
    when DB_CREATE_TABLES is set) and builds the one Stripe client the
    process shares. Shutdown disposes of the pool.
    """
    setup_logging()
    db_manager.init()
    if settings.db_create_tables:
        await db_manager.create_tables()

    app.state.payment_processor = StripePaymentProcessorClient()

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_started",
        version=__version__,
        processor_configured=bool(settings.stripe_secret_key),
        webhook_secret_configured=bool(settings.stripe_webhook_secret),
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Credit Builder Payments",
    description="Credit-builder plans, scheduled payments and processor webhooks",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)
app.include_router(webhook_alias_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics_enabled:
        return Response(status_code=404)

    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
