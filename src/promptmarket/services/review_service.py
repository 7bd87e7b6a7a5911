"""Review ledger: append-only ratings and comments per prompt."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from promptmarket.errors import NotFoundError, ValidationError
from promptmarket.schemas import CamelModel, ReviewRecord
from promptmarket.services.audit_logger import audit
from promptmarket.store.base import EntityStore

MIN_RATING = 1
MAX_RATING = 5


class CreateReviewRequest(CamelModel):
    rating: int
    comment: Optional[str] = Field(default=None, max_length=5000)


async def list_reviews(store: EntityStore, prompt_id: int) -> list[ReviewRecord]:
    """Reviews for *prompt_id* in insertion order (empty for unknown prompts)."""
    return await store.list_reviews(prompt_id)


async def create_review(
    store: EntityStore,
    prompt_id: int,
    user_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> ReviewRecord:
    """Append a review.

    Neither one-review-per-user nor a self-review ban is enforced.
    """
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    if await store.get_prompt(prompt_id) is None:
        raise NotFoundError("Prompt not found")

    review = await store.create_review(
        prompt_id=prompt_id,
        user_id=user_id,
        rating=rating,
        comment=comment or None,
    )
    audit.log_review(review.id, prompt_id, user_id, rating)
    return review
