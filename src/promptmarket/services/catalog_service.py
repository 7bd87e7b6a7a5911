"""Categories, single-prompt lookup, and author-side prompt management."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import Field

from promptmarket.errors import NotFoundError, PermissionDeniedError
from promptmarket.schemas import CamelModel, CategoryRecord, PromptWithDetails
from promptmarket.services.enrichment import enrich
from promptmarket.services.membership import cart, favorites
from promptmarket.store.base import EntityStore

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------


class CreatePromptRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category_id: int
    featured: bool = False
    trending: bool = False
    is_new: bool = True
    tags: list[str] = Field(default_factory=list)
    preview_image: Optional[str] = Field(default=None, max_length=500)


class UpdatePromptRequest(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category_id: Optional[int] = None
    featured: Optional[bool] = None
    trending: Optional[bool] = None
    is_new: Optional[bool] = None
    tags: Optional[list[str]] = None
    preview_image: Optional[str] = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


async def list_categories(store: EntityStore) -> list[CategoryRecord]:
    return await store.list_categories()


async def get_category_by_slug(store: EntityStore, slug: str) -> CategoryRecord:
    category = await store.get_category_by_slug(slug)
    if category is None:
        raise NotFoundError("Category not found")
    return category


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


async def get_prompt_details(
    store: EntityStore,
    prompt_id: int,
    viewer_id: Optional[int] = None,
) -> PromptWithDetails:
    """Enriched prompt; with a viewer, also whether it is favorited / in cart."""
    prompt = await store.get_prompt(prompt_id)
    if prompt is None:
        raise NotFoundError("Prompt not found")

    details = await enrich(store, prompt)
    if viewer_id is not None:
        details.is_favorited = await favorites.is_member(store, viewer_id, prompt_id)
        details.in_cart = await cart.is_member(store, viewer_id, prompt_id)
    return details


async def _require_category(store: EntityStore, category_id: int) -> None:
    if await store.get_category(category_id) is None:
        raise NotFoundError("Category not found")


async def create_prompt(
    store: EntityStore,
    author_id: int,
    request: CreatePromptRequest,
) -> PromptWithDetails:
    """Create a prompt owned by *author_id*; rating and sales start at zero."""
    await _require_category(store, request.category_id)
    prompt = await store.create_prompt(
        author_id=author_id,
        rating=Decimal("0"),
        sales_count=0,
        **request.model_dump(),
    )
    log.info("prompt_created", prompt_id=prompt.id, author_id=author_id)
    return await enrich(store, prompt)


async def update_prompt(
    store: EntityStore,
    prompt_id: int,
    user_id: int,
    request: UpdatePromptRequest,
) -> PromptWithDetails:
    """Apply a partial update. Only the prompt's author may update it."""
    prompt = await store.get_prompt(prompt_id)
    if prompt is None:
        raise NotFoundError("Prompt not found")
    if prompt.author_id != user_id:
        raise PermissionDeniedError("Only the author can update this prompt")

    changes = request.model_dump(exclude_unset=True)
    if changes.get("category_id") is not None:
        await _require_category(store, changes["category_id"])
    # Explicit nulls only make sense for the optional preview image.
    changes = {
        name: value
        for name, value in changes.items()
        if value is not None or name == "preview_image"
    }

    updated = await store.update_prompt(prompt_id, changes)
    log.info("prompt_updated", prompt_id=prompt_id, fields=sorted(changes))
    return await enrich(store, updated)
