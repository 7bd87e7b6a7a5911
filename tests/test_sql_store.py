"""Tests for the SQLAlchemy-backed entity store on an in-memory SQLite database."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from promptmarket.errors import DuplicateMembershipError
from promptmarket.models import Base
from promptmarket.schemas import PromptFilters, Relation
from promptmarket.seed_data import seed_store
from promptmarket.services.catalog_query import query_prompts
from promptmarket.services.membership import cart, favorites
from promptmarket.services.purchase_service import checkout_cart
from promptmarket.services.stats_service import compute_stats
from promptmarket.store.sql import SqlStore


@pytest.fixture
async def sql_store():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        store = SqlStore(session)
        await seed_store(store)
        await store.commit()
        yield store
    await engine.dispose()


@pytest.mark.asyncio
async def test_seed_is_idempotent(sql_store):
    assert await seed_store(sql_store) is False
    assert await sql_store.count_prompts() == 6
    assert await sql_store.count_categories() == 6
    assert await sql_store.count_users() == 3


@pytest.mark.asyncio
async def test_query_newest_first_with_paging(sql_store):
    result = await query_prompts(sql_store, PromptFilters(offset=2, limit=3))
    assert [p.id for p in result] == [4, 3, 2]


@pytest.mark.asyncio
async def test_query_flags_and_author(sql_store):
    result = await query_prompts(sql_store, PromptFilters(trending=True))
    assert [p.id for p in result] == [6, 4, 2]

    result = await query_prompts(sql_store, PromptFilters(author_id=1))
    assert [p.id for p in result] == [4, 1]


@pytest.mark.asyncio
async def test_query_search_matches_tags(sql_store):
    result = await query_prompts(sql_store, PromptFilters(search="portraits"))
    assert [p.id for p in result] == [2]

    result = await query_prompts(sql_store, PromptFilters(search="xyz123"))
    assert result == []


@pytest.mark.asyncio
async def test_query_limit_zero(sql_store):
    assert await query_prompts(sql_store, PromptFilters(limit=0)) == []


@pytest.mark.asyncio
async def test_tags_round_trip(sql_store):
    prompt = await sql_store.get_prompt(1)
    assert prompt.tags == ["SEO", "Content Marketing", "Blogging"]
    assert prompt.price == Decimal("12.99")


@pytest.mark.asyncio
async def test_duplicate_membership_rejected_by_constraint(sql_store):
    await sql_store.add_membership(Relation.CART, 2, 1)
    await sql_store.commit()

    with pytest.raises(DuplicateMembershipError):
        await sql_store.add_membership(Relation.CART, 2, 1)

    memberships = await sql_store.list_memberships(Relation.CART, 2)
    assert [m.prompt_id for m in memberships] == [1]


@pytest.mark.asyncio
async def test_membership_remove_and_clear(sql_store):
    await favorites.add(sql_store, 2, 1)
    await favorites.add(sql_store, 2, 2)

    assert await sql_store.remove_membership(Relation.FAVORITES, 2, 1) is True
    assert await sql_store.remove_membership(Relation.FAVORITES, 2, 1) is False
    assert await sql_store.clear_memberships(Relation.FAVORITES, 2) == 1
    assert not await sql_store.has_membership(Relation.FAVORITES, 2, 2)


@pytest.mark.asyncio
async def test_checkout(sql_store):
    await cart.add(sql_store, 3, 1)
    await cart.add(sql_store, 3, 2)

    purchases = await checkout_cart(sql_store, 3)
    await sql_store.commit()

    assert [p.price for p in purchases] == [Decimal("12.99"), Decimal("18.99")]
    assert (await sql_store.get_prompt(1)).sales_count == 848
    assert await cart.list_for_user(sql_store, 3) == []

    stats = await compute_stats(sql_store)
    assert stats.total_earnings == Decimal("31.98")


@pytest.mark.asyncio
async def test_review_counts(sql_store):
    await sql_store.create_review(prompt_id=3, user_id=1, rating=5)
    await sql_store.create_review(prompt_id=3, user_id=2, rating=4, comment="Solid")

    counts = await sql_store.count_reviews([1, 3])
    assert counts == {1: 0, 3: 2}
    assert [r.comment for r in await sql_store.list_reviews(3)] == [None, "Solid"]


@pytest.mark.asyncio
async def test_update_prompt(sql_store):
    updated = await sql_store.update_prompt(5, {"featured": True, "tags": ["Learning"]})
    assert updated.featured is True
    assert updated.tags == ["Learning"]
    assert await sql_store.update_prompt(999, {"featured": True}) is None
