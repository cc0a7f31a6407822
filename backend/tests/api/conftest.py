"""API-specific test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def app(engine, fake_redis):
    """The production app. Lifespan is not run; fixtures own the DB and Redis."""
    from melimou.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
