"""Detail enricher: the single code path that builds PromptWithDetails.

Category, author, and review-count lookups are batched per call, so listing
N prompts costs three store reads instead of 3N.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from promptmarket.errors import InternalConsistencyError
from promptmarket.schemas import (
    AuthorSummary,
    CategoryRecord,
    PromptRecord,
    PromptWithDetails,
    UserRecord,
)

if TYPE_CHECKING:
    from promptmarket.store.base import EntityStore

log = structlog.get_logger()


def _assemble(
    prompt: PromptRecord,
    categories: dict[int, CategoryRecord],
    authors: dict[int, UserRecord],
    review_counts: dict[int, int],
) -> PromptWithDetails:
    category = categories.get(prompt.category_id)
    if category is None:
        log.error(
            "internal_consistency_error",
            prompt_id=prompt.id,
            missing="category",
            category_id=prompt.category_id,
        )
        raise InternalConsistencyError(
            f"Prompt {prompt.id} references missing category {prompt.category_id}"
        )

    author = authors.get(prompt.author_id)
    if author is None:
        log.error(
            "internal_consistency_error",
            prompt_id=prompt.id,
            missing="author",
            author_id=prompt.author_id,
        )
        raise InternalConsistencyError(
            f"Prompt {prompt.id} references missing author {prompt.author_id}"
        )

    return PromptWithDetails(
        **prompt.model_dump(),
        category=category,
        # Explicit projection: the password hash never leaves the store layer.
        author=AuthorSummary(id=author.id, username=author.username, avatar=author.avatar),
        review_count=review_counts.get(prompt.id, 0),
    )


async def enrich_many(
    store: EntityStore,
    prompts: Sequence[PromptRecord],
) -> list[PromptWithDetails]:
    """Enrich *prompts*, preserving their order.

    Raises InternalConsistencyError if any category or author reference
    does not resolve.
    """
    if not prompts:
        return []

    categories = await store.get_categories({p.category_id for p in prompts})
    authors = await store.get_users({p.author_id for p in prompts})
    review_counts = await store.count_reviews({p.id for p in prompts})

    return [_assemble(p, categories, authors, review_counts) for p in prompts]


async def enrich(store: EntityStore, prompt: PromptRecord) -> PromptWithDetails:
    """Enrich a single prompt."""
    [details] = await enrich_many(store, [prompt])
    return details
