"""Cart API -- /api/cart, including checkout into the purchase ledger."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from promptmarket.api.dependencies import get_current_user, get_store
from promptmarket.api.favorites import MembershipRequest, MembershipStatus
from promptmarket.schemas import MembershipRecord, PromptWithDetails, PurchaseRecord, UserRecord
from promptmarket.services.membership import cart
from promptmarket.services.purchase_service import checkout_cart
from promptmarket.store.base import EntityStore

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=list[PromptWithDetails])
async def list_cart(
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    return await cart.list_for_user(store, current_user.id)


@router.post("", response_model=MembershipRecord, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    body: MembershipRequest,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Add a prompt to the cart; a second add for the same prompt is rejected (400)."""
    record = await cart.add(store, current_user.id, body.prompt_id)
    await store.commit()
    return record


@router.delete("")
async def clear_cart(
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    await cart.clear(store, current_user.id)
    await store.commit()
    return {"message": "Cart cleared"}


@router.post(
    "/checkout",
    response_model=list[PurchaseRecord],
    status_code=status.HTTP_201_CREATED,
)
async def checkout(
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    """Record a purchase for every cart item and empty the cart."""
    purchases = await checkout_cart(store, current_user.id)
    await store.commit()
    return purchases


@router.get("/{prompt_id}", response_model=MembershipStatus)
async def cart_status(
    prompt_id: int,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    is_member = await cart.is_member(store, current_user.id, prompt_id)
    return MembershipStatus(prompt_id=prompt_id, is_member=is_member)


@router.delete("/{prompt_id}")
async def remove_from_cart(
    prompt_id: int,
    current_user: UserRecord = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    await cart.remove(store, current_user.id, prompt_id)
    await store.commit()
    return {"message": "Removed from cart"}
