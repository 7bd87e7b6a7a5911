"""Persistent entity store on an async SQLAlchemy session.

One instance wraps one request-scoped ``AsyncSession``.  Writes are flushed
so generated ids and constraint violations surface immediately; the caller
commits.  Membership uniqueness is enforced by the (user_id, prompt_id)
unique constraints, not by a prior existence check.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from promptmarket.errors import DuplicateMembershipError
from promptmarket.models import (
    CartItem,
    Category,
    Favorite,
    Prompt,
    Purchase,
    Review,
    User,
)
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
from promptmarket.services.catalog_query import matches_search, paginate
from promptmarket.store.base import EntityStore

_MEMBERSHIP_MODELS = {
    Relation.FAVORITES: Favorite,
    Relation.CART: CartItem,
}


class SqlStore(EntityStore):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ---- unit of work ----

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    # ---- users ----

    async def get_user(self, user_id: int) -> Optional[UserRecord]:
        user = await self._session.scalar(select(User).where(User.id == user_id))
        return UserRecord.model_validate(user) if user is not None else None

    async def get_users(self, user_ids: Iterable[int]) -> dict[int, UserRecord]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = await self._session.scalars(select(User).where(User.id.in_(ids)))
        return {u.id: UserRecord.model_validate(u) for u in rows}

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        user = await self._session.scalar(select(User).where(User.username == username))
        return UserRecord.model_validate(user) if user is not None else None

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        user = await self._session.scalar(select(User).where(User.email == email))
        return UserRecord.model_validate(user) if user is not None else None

    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        avatar: Optional[str] = None,
    ) -> UserRecord:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            avatar=avatar,
        )
        self._session.add(user)
        await self._session.flush()
        return UserRecord.model_validate(user)

    async def count_users(self) -> int:
        return await self._session.scalar(select(func.count()).select_from(User))

    # ---- categories ----

    async def list_categories(self) -> list[CategoryRecord]:
        rows = await self._session.scalars(select(Category).order_by(Category.id))
        return [CategoryRecord.model_validate(c) for c in rows]

    async def get_category(self, category_id: int) -> Optional[CategoryRecord]:
        category = await self._session.scalar(
            select(Category).where(Category.id == category_id)
        )
        return CategoryRecord.model_validate(category) if category is not None else None

    async def get_categories(self, category_ids: Iterable[int]) -> dict[int, CategoryRecord]:
        ids = set(category_ids)
        if not ids:
            return {}
        rows = await self._session.scalars(select(Category).where(Category.id.in_(ids)))
        return {c.id: CategoryRecord.model_validate(c) for c in rows}

    async def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]:
        category = await self._session.scalar(select(Category).where(Category.slug == slug))
        return CategoryRecord.model_validate(category) if category is not None else None

    async def create_category(
        self,
        name: str,
        slug: str,
        icon: str,
        description: Optional[str] = None,
    ) -> CategoryRecord:
        category = Category(name=name, slug=slug, icon=icon, description=description)
        self._session.add(category)
        await self._session.flush()
        return CategoryRecord.model_validate(category)

    async def count_categories(self) -> int:
        return await self._session.scalar(select(func.count()).select_from(Category))

    # ---- prompts ----

    async def select_prompts(self, filters: PromptFilters) -> list[PromptRecord]:
        stmt = select(Prompt)
        if filters.category_id is not None:
            stmt = stmt.where(Prompt.category_id == filters.category_id)
        if filters.author_id is not None:
            stmt = stmt.where(Prompt.author_id == filters.author_id)
        if filters.featured is not None:
            stmt = stmt.where(Prompt.featured == filters.featured)
        if filters.trending is not None:
            stmt = stmt.where(Prompt.trending == filters.trending)
        if filters.is_new is not None:
            stmt = stmt.where(Prompt.is_new == filters.is_new)
        stmt = stmt.order_by(Prompt.created_at.desc(), Prompt.id.desc())

        if filters.search:
            # Tag matching is per element, so search and paging run in Python.
            rows = await self._session.scalars(stmt)
            records = [PromptRecord.model_validate(p) for p in rows]
            matching = [p for p in records if matches_search(p, filters.search)]
            return paginate(matching, filters.offset, filters.limit)

        if filters.offset:
            stmt = stmt.offset(filters.offset)
        if filters.limit is not None:
            stmt = stmt.limit(filters.limit)
        rows = await self._session.scalars(stmt)
        return [PromptRecord.model_validate(p) for p in rows]

    async def get_prompt(self, prompt_id: int) -> Optional[PromptRecord]:
        prompt = await self._session.scalar(select(Prompt).where(Prompt.id == prompt_id))
        return PromptRecord.model_validate(prompt) if prompt is not None else None

    async def get_prompts(self, prompt_ids: Iterable[int]) -> dict[int, PromptRecord]:
        ids = set(prompt_ids)
        if not ids:
            return {}
        rows = await self._session.scalars(select(Prompt).where(Prompt.id.in_(ids)))
        return {p.id: PromptRecord.model_validate(p) for p in rows}

    async def create_prompt(self, **fields: Any) -> PromptRecord:
        prompt = Prompt(**fields)
        self._session.add(prompt)
        await self._session.flush()
        return PromptRecord.model_validate(prompt)

    async def update_prompt(
        self, prompt_id: int, changes: dict[str, Any]
    ) -> Optional[PromptRecord]:
        prompt = await self._session.scalar(select(Prompt).where(Prompt.id == prompt_id))
        if prompt is None:
            return None
        for name, value in changes.items():
            setattr(prompt, name, value)
        await self._session.flush()
        return PromptRecord.model_validate(prompt)

    async def increment_sales_count(self, prompt_ids: Sequence[int]) -> None:
        if not prompt_ids:
            return
        await self._session.execute(
            update(Prompt)
            .where(Prompt.id.in_(prompt_ids))
            .values(sales_count=Prompt.sales_count + 1)
            .execution_options(synchronize_session="fetch")
        )

    async def count_prompts(self) -> int:
        return await self._session.scalar(select(func.count()).select_from(Prompt))

    # ---- reviews ----

    async def list_reviews(self, prompt_id: int) -> list[ReviewRecord]:
        rows = await self._session.scalars(
            select(Review).where(Review.prompt_id == prompt_id).order_by(Review.id)
        )
        return [ReviewRecord.model_validate(r) for r in rows]

    async def create_review(
        self,
        prompt_id: int,
        user_id: int,
        rating: int,
        comment: Optional[str] = None,
    ) -> ReviewRecord:
        review = Review(prompt_id=prompt_id, user_id=user_id, rating=rating, comment=comment)
        self._session.add(review)
        await self._session.flush()
        return ReviewRecord.model_validate(review)

    async def count_reviews(self, prompt_ids: Iterable[int]) -> dict[int, int]:
        ids = set(prompt_ids)
        counts = {pid: 0 for pid in ids}
        if not ids:
            return counts
        result = await self._session.execute(
            select(Review.prompt_id, func.count())
            .where(Review.prompt_id.in_(ids))
            .group_by(Review.prompt_id)
        )
        for prompt_id, count in result:
            counts[prompt_id] = count
        return counts

    # ---- memberships ----

    async def add_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> MembershipRecord:
        model = _MEMBERSHIP_MODELS[relation]
        row = model(user_id=user_id, prompt_id=prompt_id)
        self._session.add(row)
        try:
            await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise DuplicateMembershipError(f"Already in {relation.value}")
        return MembershipRecord.model_validate(row)

    async def remove_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool:
        model = _MEMBERSHIP_MODELS[relation]
        result = await self._session.execute(
            delete(model).where(model.user_id == user_id, model.prompt_id == prompt_id)
        )
        return result.rowcount > 0

    async def has_membership(
        self, relation: Relation, user_id: int, prompt_id: int
    ) -> bool:
        model = _MEMBERSHIP_MODELS[relation]
        found = await self._session.scalar(
            select(model.id).where(model.user_id == user_id, model.prompt_id == prompt_id)
        )
        return found is not None

    async def list_memberships(
        self, relation: Relation, user_id: int
    ) -> list[MembershipRecord]:
        model = _MEMBERSHIP_MODELS[relation]
        rows = await self._session.scalars(
            select(model).where(model.user_id == user_id).order_by(model.id)
        )
        return [MembershipRecord.model_validate(m) for m in rows]

    async def clear_memberships(self, relation: Relation, user_id: int) -> int:
        model = _MEMBERSHIP_MODELS[relation]
        result = await self._session.execute(delete(model).where(model.user_id == user_id))
        return result.rowcount

    # ---- purchases ----

    async def create_purchases(
        self, user_id: int, items: Sequence[tuple[int, Decimal]]
    ) -> list[PurchaseRecord]:
        rows = [Purchase(user_id=user_id, prompt_id=pid, price=price) for pid, price in items]
        self._session.add_all(rows)
        await self._session.flush()
        return [PurchaseRecord.model_validate(p) for p in rows]

    async def list_purchases(self, user_id: int) -> list[PurchaseRecord]:
        rows = await self._session.scalars(
            select(Purchase).where(Purchase.user_id == user_id).order_by(Purchase.id)
        )
        return [PurchaseRecord.model_validate(p) for p in rows]

    async def total_earnings(self) -> Decimal:
        total = await self._session.scalar(select(func.coalesce(func.sum(Purchase.price), 0)))
        return Decimal(str(total))
