"""Favorites API -- /api/favorites. Every endpoint requires a subject."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from promptmarket.api.dependencies import get_current_user, get_store
from promptmarket.schemas import CamelModel, MembershipRecord, PromptWithDetails, UserRecord
from promptmarket.services.membership import favorites
from promptmarket.store.base import EntityStore

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


class MembershipRequest(CamelModel):
    prompt_id: int


class MembershipStatus(CamelModel):
    prompt_id: int
    is_member: bool


@router.get("", response_model=list[PromptWithDetails])
async def list_favorites(
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await favorites.list_for_user(store, current_user.id)


@router.post("", response_model=MembershipRecord, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    body: MembershipRequest,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Favorite a prompt; a second add for the same prompt is rejected (400)."""
    record = await favorites.add(store, current_user.id, body.prompt_id)
    await store.commit()
    return record


@router.get("/{prompt_id}", response_model=MembershipStatus)
async def favorite_status(
    prompt_id: int,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    is_member = await favorites.is_member(store, current_user.id, prompt_id)
    return MembershipStatus(prompt_id=prompt_id, is_member=is_member)


@router.delete("/{prompt_id}")
async def remove_favorite(
    prompt_id: int,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    await favorites.remove(store, current_user.id, prompt_id)
    await store.commit()
    return {"message": "Removed from favorites"}
