"""Per-request store providers, chosen once at startup from settings."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from promptmarket.database import async_session_factory
from promptmarket.seed_data import seed_store
from promptmarket.store.base import EntityStore
from promptmarket.store.memory import MemoryStore
from promptmarket.store.sql import SqlStore


class MemoryStoreProvider:
    """Hands every request the same process-wide MemoryStore."""

    def __init__(self, store: MemoryStore) -> None:
        self.store = store

    @asynccontextmanager
    async def session(self) -> AsyncIterator[EntityStore]:
        yield self.store


class SqlStoreProvider:
    """Opens one AsyncSession per request and wraps it in a SqlStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[EntityStore]:
        async with self._session_factory() as session:
            yield SqlStore(session)


async def build_store_provider(backend: str, seed: bool = True):
    """Return the provider for *backend* ("memory" or "sql")."""
    if backend == "memory":
        store = MemoryStore()
        if seed:
            await seed_store(store)
        return MemoryStoreProvider(store)
    if backend == "sql":
        return SqlStoreProvider(async_session_factory)
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")
