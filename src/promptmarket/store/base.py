"""Entity store capability interface.

Services depend only on this interface.  Two implementations exist: the
ephemeral ``MemoryStore`` and the persistent ``SqlStore``; which one a
request gets is decided once at startup (see ``store.providers``).

Write methods stage changes; callers finish a unit of work with
``commit()``.  ``add_membership`` must enforce the (user, prompt)
uniqueness itself and raise ``DuplicateMembershipError`` on a clash --
a prior ``has_membership`` check is not enough under concurrency.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, Optional

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


class EntityStore(ABC):

    # ---- unit of work ----

    @abstractmethod
    async def commit(self) -> None: ...

    @abstractmethod
    async def rollback(self) -> None: ...

    # ---- users ----

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserRecord]: ...

    @abstractmethod
    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        avatar: Optional[str] = None,
    ) -> UserRecord: ...

    @abstractmethod
    async def count_users(self) -> int: ...

    # ---- categories ----

    @abstractmethod
    async def list_categories(self) -> list[CategoryRecord]: ...

    @abstractmethod
    async def get_category(self, category_id: int) -> Optional[CategoryRecord]: ...

    @abstractmethod
    async def get_categories(
        self, category_ids: Iterable[int]
    ) -> dict[int, CategoryRecord]: ...

    @abstractmethod
    async def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]: ...

    @abstractmethod
    async def create_category(
        self,
        name: str,
        slug: str,
        icon: str,
        description: Optional[str] = None,
    ) -> CategoryRecord: ...

    @abstractmethod
    async def count_categories(self) -> int: ...

    # ---- prompts ----

    @abstractmethod
    async def select_prompts(self, filters: PromptFilters) -> list[PromptRecord]:
        """Matching prompts, newest first, with offset/limit applied."""

    @abstractmethod
    async def get_prompt(self, prompt_id: int) -> Optional[PromptRecord]: ...

    @abstractmethod
    async def get_prompts(self, prompt_ids: Iterable[int]) -> dict[int, PromptRecord]: ...

    @abstractmethod
    async def create_prompt(self, **fields: Any) -> PromptRecord: ...

    @abstractmethod
    async def update_prompt(
        self, prompt_id: int, changes: dict[str, Any]
    ) -> Optional[PromptRecord]: ...

    @abstractmethod
    async def increment_sales_count(self, prompt_ids: Sequence[int]) -> None: ...

    @abstractmethod
    async def count_prompts(self) -> int: ...

    # ---- reviews ----

    @abstractmethod
    async def list_reviews(self, prompt_id: int) -> list[ReviewRecord]:
        """Reviews for a prompt in insertion order."""

    @abstractmethod
    async def create_review(
        self,
        prompt_id: int,
        user_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> ReviewRecord: ...

    @abstractmethod
    async def count_reviews(self, prompt_ids: Iterable[int]) -> dict[int, int]: ...

    # ---- memberships (favorites, cart) ----

    @abstractmethod
    async def add_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> MembershipRecord: ...

    @abstractmethod
    async def remove_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool:
        """Delete the row; False when there was nothing to delete."""

    @abstractmethod
    async def has_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool: ...

    @abstractmethod
    async def list_memberships(
        self, relation: Relation, user_id: int
    ) -> list[MembershipRecord]: ...

    @abstractmethod
    async def clear_memberships(self, relation: Relation, user_id: int) -> int:
        """Delete every row for the user in one step; returns the count."""

    # ---- purchases ----

    @abstractmethod
    async def create_purchases(
        self, user_id: int, items: Sequence[tuple[int, Decimal]]
    ) -> list[PurchaseRecord]:
        """Append one purchase per (prompt_id, price) pair."""

    @abstractmethod
    async def list_purchases(self, user_id: int) -> list[PurchaseRecord]: ...

    @abstractmethod
    async def total_earnings(self) -> Decimal: ...
