"""
Product API Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:      AsyncMock standing in for AsyncSession
    ├── mock_product_service: patches the service the route handlers call
    ├── database:             real SQLite schema, created and dropped per test
    └── test_client:          HTTPX AsyncClient talking to the ASGI app
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock, patch

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run BEFORE any app import: settings and the engine are built at import
_TEST_DIR = tempfile.mkdtemp(prefix="products_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["FRONTEND_URL"] = "http://localhost:5173"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = product
        result = await product_service.get_product(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_product_service():
    """
    Replaces the product service seen by the route handlers.

    Every method is an AsyncMock, so tests can assert the store was (or was
    not) awaited.
    """
    with patch("app.routes.products.product_service") as service:
        for name in (
            "list_products",
            "get_product",
            "create_product",
            "update_product",
            "toggle_availability",
            "delete_product",
        ):
            setattr(service, name, AsyncMock())
        yield service


@pytest_asyncio.fixture
async def database():
    """Creates the products table in the test SQLite file and drops it afterwards."""
    from app.database import Base, engine
    from app.models.product import Product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient routed straight to the FastAPI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from app.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
