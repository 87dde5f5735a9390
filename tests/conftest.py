from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.clock import FixedClock
from app.core.rate_limit import limiter
from app.graphql.gateway import QueryGateway
from app.graphql.router import get_gateway
from app.graphql.schema import schema
from app.main import app

# --- Fixtures ---


@pytest.fixture
def fixed_instant() -> datetime:
    """A consistent instant for clock-dependent assertions."""
    return datetime(2026, 1, 2, 3, 4, 5, 678901, tzinfo=UTC)


@pytest.fixture
def fixed_clock(fixed_instant: datetime) -> FixedClock:
    return FixedClock(fixed_instant, reading=100.0)


@pytest.fixture
def gateway() -> QueryGateway:
    """Gateway over the real schema and the system clock."""
    return QueryGateway(schema)


@pytest.fixture
def fixed_gateway(fixed_clock: FixedClock) -> QueryGateway:
    return QueryGateway(schema, clock=fixed_clock)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Each test starts with fresh rate limit counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture
async def test_client():
    """AsyncClient bound to the ASGI app, no network involved."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def fixed_clock_client(fixed_clock: FixedClock):
    """Like test_client, with the GraphQL route using a frozen clock."""
    app.dependency_overrides[get_gateway] = lambda: QueryGateway(
        schema, clock=fixed_clock
    )
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.pop(get_gateway, None)
