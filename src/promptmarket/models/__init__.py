"""ORM models package -- re-exports all models and the Base class."""

from promptmarket.models.base import Base
from promptmarket.models.user import User
from promptmarket.models.catalog import Category, Prompt, Review
from promptmarket.models.commerce import CartItem, Favorite, Purchase

__all__ = [
    "Base",
    "User",
    "Category",
    "Prompt",
    "Review",
    "Favorite",
    "CartItem",
    "Purchase",
]
