"""Pydantic records shared by the entity stores, services, and API layer.

Every record serializes with camelCase keys (``categoryId``, ``isNew``,
``reviewCount``) and accepts either camelCase or snake_case on input.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Stored entities
# ---------------------------------------------------------------------------


class UserRecord(CamelModel):
    """Full user row. Internal only: carries the password hash."""

    id: int
    username: str
    email: str
    password_hash: str = Field(exclude=True, repr=False)
    avatar: Optional[str] = None
    created_at: datetime


class UserPublic(CamelModel):
    id: int
    username: str
    email: str
    avatar: Optional[str] = None
    created_at: datetime


class AuthorSummary(CamelModel):
    """The only author projection ever attached to a prompt."""

    id: int
    username: str
    avatar: Optional[str] = None


class CategoryRecord(CamelModel):
    id: int
    name: str
    slug: str
    icon: str
    description: Optional[str] = None


class PromptRecord(CamelModel):
    id: int
    title: str
    description: str
    content: str
    price: Decimal
    category_id: int
    author_id: int
    rating: Decimal = Decimal("0")
    sales_count: int = 0
    featured: bool = False
    trending: bool = False
    is_new: bool = True
    tags: list[str] = Field(default_factory=list)
    preview_image: Optional[str] = None
    created_at: datetime


class PromptWithDetails(PromptRecord):
    category: CategoryRecord
    author: AuthorSummary
    review_count: int
    is_favorited: Optional[bool] = None
    in_cart: Optional[bool] = None


class MembershipRecord(CamelModel):
    """A favorites or cart row."""

    id: int
    user_id: int
    prompt_id: int
    created_at: datetime


class ReviewRecord(CamelModel):
    id: int
    prompt_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime


class PurchaseRecord(CamelModel):
    id: int
    user_id: int
    prompt_id: int
    price: Decimal
    created_at: datetime


# ---------------------------------------------------------------------------
# Query / aggregate shapes
# ---------------------------------------------------------------------------


class Relation(str, Enum):
    """Membership relations sharing the at-most-one-per-(user, prompt) rule."""

    FAVORITES = "favorites"
    CART = "cart"


class PromptFilters(BaseModel):
    """Already-typed catalog filters; every field is optional and ANDed."""

    category_id: Optional[int] = None
    author_id: Optional[int] = None
    search: Optional[str] = None
    featured: Optional[bool] = None
    trending: Optional[bool] = None
    is_new: Optional[bool] = None
    limit: Optional[int] = Field(default=None, ge=0)
    offset: Optional[int] = Field(default=None, ge=0)


class MarketplaceStats(CamelModel):
    total_prompts: int
    active_users: int
    categories_count: int
    total_earnings: Decimal
