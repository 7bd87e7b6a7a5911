"""Catalog API: categories, prompt browsing and management, reviews, stats."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from promptmarket.api.dependencies import get_current_user, get_optional_user, get_store
from promptmarket.schemas import (
    CategoryRecord,
    MarketplaceStats,
    PromptFilters,
    PromptWithDetails,
    ReviewRecord,
    UserRecord,
)
from promptmarket.services import catalog_service, review_service
from promptmarket.services.catalog_query import query_prompts
from promptmarket.services.catalog_service import CreatePromptRequest, UpdatePromptRequest
from promptmarket.services.review_service import CreateReviewRequest
from promptmarket.services.stats_service import compute_stats
from promptmarket.store.base import EntityStore

router = APIRouter(prefix="/api", tags=["catalog"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

@router.get("/categories", response_model=list[CategoryRecord])
async def list_categories(store: EntityStore = Depends(get_store)):
    return await catalog_service.list_categories(store)


@router.get("/categories/{slug}", response_model=CategoryRecord)
async def get_category(slug: str, store: EntityStore = Depends(get_store)):
    return await catalog_service.get_category_by_slug(store, slug)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

@router.get("/prompts", response_model=list[PromptWithDetails])
async def list_prompts(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    author_id: Optional[int] = Query(default=None, alias="authorId"),
    search: Optional[str] = Query(default=None),
    featured: Optional[bool] = Query(default=None),
    trending: Optional[bool] = Query(default=None),
    is_new: Optional[bool] = Query(default=None, alias="isNew"),
    limit: Optional[int] = Query(default=None, ge=0),
    offset: Optional[int] = Query(default=None, ge=0),
    store: EntityStore = Depends(get_store),
):
    """Filter, sort (newest first), and page the catalog."""
    filters = PromptFilters(
        category_id=category_id,
        author_id=author_id,
        search=search,
        featured=featured,
        trending=trending,
        is_new=is_new,
        limit=limit,
        offset=offset,
    )
    return await query_prompts(store, filters)


@router.post(
    "/prompts",
    response_model=PromptWithDetails,
    status_code=status.HTTP_201_CREATED,
)
async def create_prompt(
    body: CreatePromptRequest,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """List a new prompt authored by the caller."""
    prompt = await catalog_service.create_prompt(store, current_user.id, body)
    await store.commit()
    return prompt


@router.get("/prompts/{prompt_id}", response_model=PromptWithDetails)
async def get_prompt(
    prompt_id: int,
    viewer: Optional[UserRecord] = Depends(get_optional_user),
    store: EntityStore = Depends(get_store),
):
    """Single prompt; annotated with isFavorited / inCart for a signed-in caller."""
    viewer_id = viewer.id if viewer is not None else None
    return await catalog_service.get_prompt_details(store, prompt_id, viewer_id)


@router.patch("/prompts/{prompt_id}", response_model=PromptWithDetails)
async def update_prompt(
    prompt_id: int,
    body: UpdatePromptRequest,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Partially update a prompt. Author only."""
    prompt = await catalog_service.update_prompt(store, prompt_id, current_user.id, body)
    await store.commit()
    return prompt


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

@router.get("/prompts/{prompt_id}/reviews", response_model=list[ReviewRecord])
async def list_reviews(prompt_id: int, store: EntityStore = Depends(get_store)):
    return await review_service.list_reviews(store, prompt_id)


@router.post(
    "/prompts/{prompt_id}/reviews",
    response_model=ReviewRecord,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    prompt_id: int,
    body: CreateReviewRequest,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    review = await review_service.create_review(
        store,
        prompt_id=prompt_id,
        user_id=current_user.id,
        rating=body.rating,
        comment=body.comment,
    )
    await store.commit()
    return review


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

@router.get("/stats", response_model=MarketplaceStats)
async def read_stats(store: EntityStore = Depends(get_store)):
    return await compute_stats(store)
