"""Service test fixtures: async DB + CustodyService + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - CustodyService built against the test session factory (faucet enabled)
    - get_custody_service dependency overridden to return that service
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from custody.api.dependencies import get_custody_service
from custody.core.deployment_keys import AdminAddressStrategy
from custody.core.domain_types import normalize_address
from custody.db.base import Base
from custody.infrastructure.database import DatabaseSessionManager
from custody.main import app
from custody.services.custody_service import CustodyService
import custody.infrastructure.database as db_module
import custody.models  # noqa: F401

ADMIN = normalize_address("0xad")


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test engine (no pool sizing)."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def service(test_db_manager):
    return CustodyService(
        test_db_manager.session, ADMIN, AdminAddressStrategy(),
        faucet_enabled=True,
    )


@pytest.fixture
async def bootstrapped(service):
    await service.bootstrap(ADMIN)
    return service


@pytest.fixture
async def client(service, test_db_manager):
    """FastAPI test client with the service dependency overridden."""
    app.dependency_overrides[get_custody_service] = lambda: service

    original_manager = db_module.db_manager
    db_module.db_manager = test_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
