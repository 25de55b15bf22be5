"""
ServiceHub Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine: Throwaway SQLite database (aiosqlite) with every table
    ├── db_session: AsyncSession bound to db_engine
    ├── tenant_ctx / other_tenant_ctx / no_tenant_ctx: RequestContexts
    ├── customer / location / service_offering: Seed rows for tenant_ctx
    └── test_client: HTTPX AsyncClient against the app, sharing db_engine
"""

import os

# Override settings for testing BEFORE any servicehub imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["REQUIRE_AUTHENTICATION"] = "true"

import uuid
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import servicehub.models  # noqa: F401
from servicehub.database import Base, build_engine, get_db_session
from servicehub.models.catalog import ServiceOffering
from servicehub.models.customer import Customer
from servicehub.models.location import Location
from servicehub.tenancy import RequestContext


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A fresh SQLite file database per test.

    Why a file (not :memory:): every connection from the pool must see the
    same tables, including the ones opened by the HTTP client fixture.
    """
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'servicehub_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """
    Provides an async database session for service-level tests.

    Usage:
        async def test_get_customer(db_session, tenant_ctx, customer):
            result = await customer_service.get_customer(db_session, tenant_ctx, customer.id)
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Caller Contexts
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def tenant_ctx():
    return RequestContext(tenant_id=uuid.uuid4(), user_id=uuid.uuid4(), authenticated=True)


@pytest.fixture
def other_tenant_ctx():
    return RequestContext(tenant_id=uuid.uuid4(), user_id=uuid.uuid4(), authenticated=True)


@pytest.fixture
def no_tenant_ctx():
    """Authenticated caller whose claims carry no tenant."""
    return RequestContext(tenant_id=None, user_id=uuid.uuid4(), authenticated=True)


# ══════════════════════════════════════════════════════════════════════════
# Seed Rows
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def customer(db_session, tenant_ctx):
    row = Customer(
        tenant_id=tenant_ctx.tenant_id,
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        phone="555-0100",
    )
    db_session.add(row)
    await db_session.flush()
    return row


@pytest_asyncio.fixture
async def location(db_session, tenant_ctx):
    row = Location(tenant_id=tenant_ctx.tenant_id, name="Main Street Shop", city="Springfield")
    db_session.add(row)
    await db_session.flush()
    return row


@pytest_asyncio.fixture
async def service_offering(db_session, tenant_ctx):
    row = ServiceOffering(
        tenant_id=tenant_ctx.tenant_id,
        name="Oil Change",
        description="Synthetic oil and filter",
        price=Decimal("50.00"),
        duration_minutes=30,
        category="Maintenance",
        tax_rate=Decimal("8"),
    )
    db_session.add(row)
    await db_session.flush()
    return row


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def tenant_headers(tenant_ctx):
    """Gateway headers identifying tenant_ctx."""
    return {"X-Tenant-ID": str(tenant_ctx.tenant_id), "X-User-ID": str(tenant_ctx.user_id)}


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Provides an async HTTP test client for endpoint testing.

    How:   Uses ASGITransport to route requests directly to the app, with
           get_db_session overridden to use the per-test database.
           raise_app_exceptions=False lets the 500 handler answer instead of
           the exception surfacing in the test.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from servicehub.main import app

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
