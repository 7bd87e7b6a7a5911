"""Tests for category lookup and author-side prompt management."""

from __future__ import annotations

from decimal import Decimal

import pytest

from promptmarket.errors import NotFoundError, PermissionDeniedError
from promptmarket.services import catalog_service
from promptmarket.services.catalog_service import CreatePromptRequest, UpdatePromptRequest
from promptmarket.services.membership import cart, favorites


def _create_request(**overrides) -> CreatePromptRequest:
    fields = {
        "title": "Unit Test Writer",
        "description": "Writes pytest suites",
        "content": "Write tests for [MODULE]...",
        "price": Decimal("9.50"),
        "category_id": 3,
        "tags": ["Testing"],
    }
    fields.update(overrides)
    return CreatePromptRequest(**fields)


@pytest.mark.asyncio
async def test_list_categories(seeded_store):
    categories = await catalog_service.list_categories(seeded_store)
    assert [c.slug for c in categories] == [
        "writing",
        "art-design",
        "coding",
        "business",
        "education",
        "gaming",
    ]


@pytest.mark.asyncio
async def test_category_by_slug(seeded_store):
    category = await catalog_service.get_category_by_slug(seeded_store, "gaming")
    assert category.name == "Gaming"


@pytest.mark.asyncio
async def test_category_by_unknown_slug(seeded_store):
    with pytest.raises(NotFoundError):
        await catalog_service.get_category_by_slug(seeded_store, "cooking")


@pytest.mark.asyncio
async def test_prompt_details_anonymous(seeded_store):
    details = await catalog_service.get_prompt_details(seeded_store, 1)
    assert details.is_favorited is None
    assert details.in_cart is None


@pytest.mark.asyncio
async def test_prompt_details_for_viewer(seeded_store):
    await favorites.add(seeded_store, 2, 1)
    details = await catalog_service.get_prompt_details(seeded_store, 1, viewer_id=2)
    assert details.is_favorited is True
    assert details.in_cart is False

    await cart.add(seeded_store, 2, 1)
    details = await catalog_service.get_prompt_details(seeded_store, 1, viewer_id=2)
    assert details.in_cart is True


@pytest.mark.asyncio
async def test_prompt_details_not_found(seeded_store):
    with pytest.raises(NotFoundError):
        await catalog_service.get_prompt_details(seeded_store, 999)


@pytest.mark.asyncio
async def test_create_prompt(seeded_store):
    created = await catalog_service.create_prompt(seeded_store, 3, _create_request())

    assert created.author.username == "mike_johnson"
    assert created.category.slug == "coding"
    assert created.rating == Decimal("0")
    assert created.sales_count == 0
    assert created.is_new is True
    assert await seeded_store.count_prompts() == 7


@pytest.mark.asyncio
async def test_create_prompt_unknown_category(seeded_store):
    with pytest.raises(NotFoundError):
        await catalog_service.create_prompt(seeded_store, 3, _create_request(category_id=99))


@pytest.mark.asyncio
async def test_update_prompt_by_author(seeded_store):
    updated = await catalog_service.update_prompt(
        seeded_store, 1, 1, UpdatePromptRequest(price=Decimal("14.99"), trending=True)
    )
    assert updated.price == Decimal("14.99")
    assert updated.trending is True
    # Untouched fields keep their values.
    assert updated.title == "Master Blog Writer - SEO Optimized Content"


@pytest.mark.asyncio
async def test_update_prompt_by_other_user_denied(seeded_store):
    with pytest.raises(PermissionDeniedError):
        await catalog_service.update_prompt(
            seeded_store, 1, 2, UpdatePromptRequest(title="Hijacked")
        )
    assert (await seeded_store.get_prompt(1)).title != "Hijacked"


@pytest.mark.asyncio
async def test_update_unknown_prompt(seeded_store):
    with pytest.raises(NotFoundError):
        await catalog_service.update_prompt(seeded_store, 999, 1, UpdatePromptRequest())
