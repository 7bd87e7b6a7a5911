"""Marketplace-wide counters."""

from __future__ import annotations

from promptmarket.schemas import MarketplaceStats
from promptmarket.store.base import EntityStore


async def compute_stats(store: EntityStore) -> MarketplaceStats:
    """Count prompts, users, and categories; sum the purchase ledger."""
    return MarketplaceStats(
        total_prompts=await store.count_prompts(),
        active_users=await store.count_users(),
        categories_count=await store.count_categories(),
        total_earnings=await store.total_earnings(),
    )
