import pytest
from httpx import ASGITransport, AsyncClient

from alertnav.config import Settings
from alertnav.main import create_app
from alertnav.models import LocationReading


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        session_secret="test-secret",
        cors_origins=["http://testserver"],
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await app.state.db.create_all()
    yield app
    await app.state.db.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


@pytest.fixture
def add_readings(app):
    """Insert iot_data rows directly, the way the ingestion pipeline would"""
    async def _add(*readings):
        async with app.state.db.session() as session:
            rows = [LocationReading(**reading) for reading in readings]
            session.add_all(rows)
            await session.commit()
            return [row.id for row in rows]
    return _add


@pytest.fixture
def login(client):
    async def _login(email):
        return await client.post("/api/auth/login", json={"email": email})
    return _login
