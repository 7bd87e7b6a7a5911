import os

# Settings are read at import time; configure before importing the app.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ENV", "test")

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from promptmarket.main import app
from promptmarket.seed_data import DEMO_PASSWORD, seed_store
from promptmarket.store.memory import MemoryStore
from promptmarket.store.providers import MemoryStoreProvider


class TickingClock:
    """Deterministic clock: every call is one second after the previous."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    """Empty in-memory store with a deterministic clock."""
    return MemoryStore(clock=TickingClock())


@pytest.fixture
async def seeded_store(store):
    """In-memory store holding the demo catalog (6 categories, 3 users, 6 prompts)."""
    await seed_store(store)
    return store


@pytest.fixture
async def client(seeded_store):
    # ASGITransport does not run the lifespan, so wire the provider directly.
    previous = getattr(app.state, "store_provider", None)
    app.state.store_provider = MemoryStoreProvider(seeded_store)
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.state.store_provider = previous


@pytest.fixture
def login_as(client):
    """Log in as a demo user; returns Authorization headers."""

    async def _login(username: str = "sarah_chen") -> dict:
        response = await client.post(
            "/api/login", json={"username": username, "password": DEMO_PASSWORD}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
async def auth_headers(login_as):
    return await login_as()
