"""Cart checkout into the append-only purchase ledger, and purchase history.

No money moves here: a checkout snapshots each cart prompt's current price
into a Purchase row, bumps the prompt's sales counter, and empties the cart.
The caller commits the whole unit of work at once.
"""

from __future__ import annotations

import structlog

from promptmarket.errors import ValidationError
from promptmarket.schemas import PromptWithDetails, PurchaseRecord, Relation
from promptmarket.services.audit_logger import audit
from promptmarket.services.enrichment import enrich_many
from promptmarket.store.base import EntityStore

log = structlog.get_logger()


async def checkout_cart(store: EntityStore, user_id: int) -> list[PurchaseRecord]:
    """Convert every resolvable cart item into a purchase.

    Raises ValidationError when the cart holds nothing purchasable.
    """
    items = await store.list_memberships(Relation.CART, user_id)
    prompts = await store.get_prompts(item.prompt_id for item in items)
    purchasable = [prompts[item.prompt_id] for item in items if item.prompt_id in prompts]

    if not purchasable:
        raise ValidationError("Cart is empty")

    purchases = await store.create_purchases(
        user_id, [(prompt.id, prompt.price) for prompt in purchasable]
    )
    await store.increment_sales_count([prompt.id for prompt in purchasable])
    await store.clear_memberships(Relation.CART, user_id)

    audit.log_checkout(user_id, purchases)
    return purchases


async def list_purchased_prompts(store: EntityStore, user_id: int) -> list[PromptWithDetails]:
    """Purchase history as enriched prompts, oldest purchase first."""
    purchases = await store.list_purchases(user_id)
    prompts = await store.get_prompts(p.prompt_id for p in purchases)

    dangling = [p.prompt_id for p in purchases if p.prompt_id not in prompts]
    if dangling:
        log.warning("purchase_prompt_missing", user_id=user_id, prompt_ids=dangling)

    resolved = [prompts[p.prompt_id] for p in purchases if p.prompt_id in prompts]
    return await enrich_many(store, resolved)
