"""Route test fixtures — FastAPI test client over the per-test gateway.

Invariants:
    - app.state.gateway points at the test database for the test's duration
    - The lifespan is not run; the gateway is injected directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from cattery.main import app


@pytest.fixture
async def client(gateway):
    app.state.gateway = gateway
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.gateway = None
