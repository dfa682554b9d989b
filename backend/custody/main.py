"""Custody Vault API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CustodyError -> structured JSON responses
    - Database and CustodyService created on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from custody.api.error_handlers import register_error_handlers
from custody.api.routes import (
    audit_events, deployment, health, ledger_accounts, vault, whitelist,
)
from custody.config import get_settings
from custody.infrastructure.database import init_db
from custody.infrastructure.observability import setup_logging
from custody.services.custody_service import CustodyService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    service = CustodyService.from_settings(settings, manager.session)
    app.state.custody_service = service
    logger.info(
        "Custody API started",
        extra={"deployment_id": service.deployment_id},
    )
    yield
    await manager.dispose()
    logger.info("Custody API shutting down")


app = FastAPI(
    title="Custody Vault API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(deployment.router)
app.include_router(whitelist.router)
app.include_router(vault.router)
app.include_router(audit_events.router)
app.include_router(ledger_accounts.router)

register_error_handlers(app)
