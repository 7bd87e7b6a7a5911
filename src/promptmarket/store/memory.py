"""Ephemeral map-backed entity store.

Each instance owns its tables and one id sequence per entity type.  All
methods run without awaiting in between reads and writes, so on a single
event loop every method is atomic -- which is what makes the membership
uniqueness check-and-insert safe here.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from promptmarket.errors import DuplicateMembershipError
from promptmarket.schemas import (
    CategoryRecord,
    MembershipRecord,
    PromptFilters,
    PromptRecord,
    PurchaseRecord,
    Relation,
    ReviewRecord,
    UserRecord,
)
from promptmarket.services.catalog_query import select_prompts
from promptmarket.store.base import EntityStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore(EntityStore):

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._ids = {
            name: itertools.count(1)
            for name in ("users", "categories", "prompts", "reviews", "memberships", "purchases")
        }
        self._users: dict[int, UserRecord] = {}
        self._categories: dict[int, CategoryRecord] = {}
        self._prompts: dict[int, PromptRecord] = {}
        self._reviews: dict[int, ReviewRecord] = {}
        self._memberships: dict[Relation, dict[tuple[int, int], MembershipRecord]] = {
            relation: {} for relation in Relation
        }
        self._purchases: dict[int, PurchaseRecord] = {}

    def _next_id(self, table: str) -> int:
        return next(self._ids[table])

    # ---- unit of work ----

    async def commit(self) -> None:
        # Writes are applied immediately.
        return None

    async def rollback(self) -> None:
        return None

    # ---- users ----

    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        return self._users.get(user_id)

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]:
        return {uid: self._users[uid] for uid in set(user_ids) if uid in self._users}

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        return next((u for u in self._users.values() if u.username == username), None)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return next((u for u in self._users.values() if u.email == email), None)

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        avatar: Optional[str] = None,
    ) -> UserRecord:
        user = UserRecord(
            id=self._next_id("users"),
            username=username,
            email=email,
            password_hash=password_hash,
            avatar=avatar,
            created_at=self._clock(),
        )
        self._users[user.id] = user
        return user

    async def count_users(self) -> int:
        return len(self._users)

    # ---- categories ----

    async def list_categories(self) -> list[CategoryRecord]:
        return list(self._categories.values())

    async def get_category(self, category_id: int) -> Optional[CategoryRecord]:
        return self._categories.get(category_id)

    async def get_categories(self, category_ids: Iterable[int]) -> dict[int, CategoryRecord]:
        return {
            cid: self._categories[cid] for cid in set(category_ids) if cid in self._categories
        }

    async def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]:
        return next((c for c in self._categories.values() if c.slug == slug), None)

    async def create_category(
        self,
        name: str,
        slug: str,
        icon: str,
        description: Optional[str] = None,
    ) -> CategoryRecord:
        category = CategoryRecord(
            id=self._next_id("categories"),
            name=name,
            slug=slug,
            icon=icon,
            description=description,
        )
        self._categories[category.id] = category
        return category

    async def count_categories(self) -> int:
        return len(self._categories)

    # ---- prompts ----

    async def select_prompts(self, filters: PromptFilters) -> list[PromptRecord]:
        return select_prompts(self._prompts.values(), filters)

    async def get_prompt(self, prompt_id: int) -> Optional[PromptRecord]:
        return self._prompts.get(prompt_id)

    async def get_prompts(self, prompt_ids: Iterable[int]) -> dict[int, PromptRecord]:
        return {pid: self._prompts[pid] for pid in set(prompt_ids) if pid in self._prompts}

    async def create_prompt(self, **fields: Any) -> PromptRecord:
        fields.setdefault("created_at", self._clock())
        prompt = PromptRecord(id=self._next_id("prompts"), **fields)
        self._prompts[prompt.id] = prompt
        return prompt

    async def update_prompt(
        self, prompt_id: int, changes: dict[str, Any]
    ) -> Optional[PromptRecord]:
        prompt = self._prompts.get(prompt_id)
        if prompt is None:
            return None
        updated = PromptRecord.model_validate({**prompt.model_dump(), **changes})
        self._prompts[prompt_id] = updated
        return updated

    async def increment_sales_count(self, prompt_ids: Sequence[int]) -> None:
        for pid in prompt_ids:
            prompt = self._prompts.get(pid)
            if prompt is not None:
                self._prompts[pid] = prompt.model_copy(
                    update={"sales_count": prompt.sales_count + 1}
                )

    async def count_prompts(self) -> int:
        return len(self._prompts)

    # ---- reviews ----

    async def list_reviews(self, prompt_id: int) -> list[ReviewRecord]:
        return [r for r in self._reviews.values() if r.prompt_id == prompt_id]

    async def create_review(
        self,
        prompt_id: int,
        user_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> ReviewRecord:
        review = ReviewRecord(
            id=self._next_id("reviews"),
            prompt_id=prompt_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            created_at=self._clock(),
        )
        self._reviews[review.id] = review
        return review

    async def count_reviews(self, prompt_ids: Iterable[int]) -> dict[int, int]:
        counts = {pid: 0 for pid in prompt_ids}
        for review in self._reviews.values():
            if review.prompt_id in counts:
                counts[review.prompt_id] += 1
        return counts

    # ---- memberships ----

    async def add_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> MembershipRecord:
        rows = self._memberships[relation]
        key = (user_id, prompt_id)
        if key in rows:
            raise DuplicateMembershipError(f"Already in {relation.value}")
        record = MembershipRecord(
            id=self._next_id("memberships"),
            user_id=user_id,
            prompt_id=prompt_id,
            created_at=self._clock(),
        )
        rows[key] = record
        return record

    async def remove_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool:
        return self._memberships[relation].pop((user_id, prompt_id), None) is not None

    async def has_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool:
        return (user_id, prompt_id) in self._memberships[relation]

    async def list_memberships(
        self, relation: Relation, user_id: int
    ) -> list[MembershipRecord]:
        rows = [m for m in self._memberships[relation].values() if m.user_id == user_id]
        return sorted(rows, key=lambda m: m.id)

    async def clear_memberships(self, relation: Relation, user_id: int) -> int:
        rows = self._memberships[relation]
        doomed = [key for key in rows if key[0] == user_id]
        for key in doomed:
            del rows[key]
        return len(doomed)

    # ---- purchases ----

    async def create_purchases(
        self, user_id: int, items: Sequence[tuple[int, Decimal]]
    ) -> list[PurchaseRecord]:
        created = []
        for prompt_id, price in items:
            purchase = PurchaseRecord(
                id=self._next_id("purchases"),
                user_id=user_id,
                prompt_id=prompt_id,
                price=price,
                created_at=self._clock(),
            )
            self._purchases[purchase.id] = purchase
            created.append(purchase)
        return created

    async def list_purchases(self, user_id: int) -> list[PurchaseRecord]:
        return [p for p in self._purchases.values() if p.user_id == user_id]

    async def total_earnings(self) -> Decimal:
        return sum((p.price for p in self._purchases.values()), Decimal("0"))
