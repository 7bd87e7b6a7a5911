"""Catalog query engine: filter predicates, newest-first ordering, pagination.

The predicate and ordering helpers are pure so both entity stores share one
definition of what a filter means; ``query_prompts`` is the public entry point.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional, TypeVar

from promptmarket.schemas import PromptFilters, PromptRecord, PromptWithDetails
from promptmarket.services.enrichment import enrich_many

if TYPE_CHECKING:
    from promptmarket.store.base import EntityStore

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def matches_search(prompt: PromptRecord, term: str) -> bool:
    """Case-insensitive substring match on title, description, or any tag."""
    needle = term.lower()
    if needle in prompt.title.lower() or needle in prompt.description.lower():
        return True
    return any(needle in tag.lower() for tag in prompt.tags)


def matches_filters(prompt: PromptRecord, filters: PromptFilters) -> bool:
    """True when *prompt* satisfies every filter that is set."""
    if filters.category_id is not None and prompt.category_id != filters.category_id:
        return False
    if filters.author_id is not None and prompt.author_id != filters.author_id:
        return False
    if filters.featured is not None and prompt.featured != filters.featured:
        return False
    if filters.trending is not None and prompt.trending != filters.trending:
        return False
    if filters.is_new is not None and prompt.is_new != filters.is_new:
        return False
    if filters.search and not matches_search(prompt, filters.search):
        return False
    return True


# ---------------------------------------------------------------------------
# Ordering and pagination
# ---------------------------------------------------------------------------


def newest_first(prompts: Iterable[PromptRecord]) -> list[PromptRecord]:
    """Sort by created_at descending, ties broken by id descending."""
    return sorted(prompts, key=lambda p: (p.created_at, p.id), reverse=True)


def paginate(items: Sequence[T], offset: Optional[int], limit: Optional[int]) -> list[T]:
    """Skip *offset* items, then take at most *limit* of the remainder."""
    start = offset or 0
    if limit is None:
        return list(items[start:])
    return list(items[start:start + limit])


def select_prompts(prompts: Iterable[PromptRecord], filters: PromptFilters) -> list[PromptRecord]:
    """Apply filters, ordering, and pagination to an in-memory prompt set."""
    matching = [p for p in prompts if matches_filters(p, filters)]
    return paginate(newest_first(matching), filters.offset, filters.limit)


# ---------------------------------------------------------------------------
# Public query
# ---------------------------------------------------------------------------


async def query_prompts(
    store: EntityStore,
    filters: Optional[PromptFilters] = None,
) -> list[PromptWithDetails]:
    """Return the enriched, ordered, paginated prompts matching *filters*."""
    prompts = await store.select_prompts(filters or PromptFilters())
    return await enrich_many(store, prompts)
