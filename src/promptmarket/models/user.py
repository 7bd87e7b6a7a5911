"""User account model."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptmarket.models.base import Base

if TYPE_CHECKING:
    from promptmarket.models.catalog import Prompt, Review
    from promptmarket.models.commerce import CartItem, Favorite, Purchase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    prompts: Mapped[list[Prompt]] = relationship(back_populates="author")
    reviews: Mapped[list[Review]] = relationship(back_populates="user")
    favorites: Mapped[list[Favorite]] = relationship(back_populates="user")
    cart_items: Mapped[list[CartItem]] = relationship(back_populates="user")
    purchases: Mapped[list[Purchase]] = relationship(back_populates="user")
