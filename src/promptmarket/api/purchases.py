"""Purchase history API -- /api/purchases."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from promptmarket.api.dependencies import get_current_user, get_store
from promptmarket.schemas import PromptWithDetails, UserRecord
from promptmarket.services.purchase_service import list_purchased_prompts
from promptmarket.store.base import EntityStore

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.get("", response_model=list[PromptWithDetails])
async def list_purchases(
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Prompts the caller has bought, oldest purchase first."""
    return await list_purchased_prompts(store, current_user.id)
