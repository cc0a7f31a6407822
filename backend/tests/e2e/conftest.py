"""E2E test fixtures: the full app over an in-process HTTP client."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
async def e2e_client(engine, fake_redis):
    """Client against the production app wired to the test DB and fake Redis."""
    from melimou.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
