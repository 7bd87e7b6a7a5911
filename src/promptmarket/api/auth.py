"""Authentication API router -- /api/register, /api/login, /api/logout, /api/user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from promptmarket.api.dependencies import get_current_user, get_store
from promptmarket.schemas import UserPublic, UserRecord
from promptmarket.services.auth_service import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    login_user,
    register_user,
)
from promptmarket.store.base import EntityStore

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequest,
    store: EntityStore = Depends(get_store),
) -> AuthResponse:
    """Register a new user account and return a token for it."""
    response = await register_user(store, request)
    await store.commit()
    return response


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    store: EntityStore = Depends(get_store),
) -> AuthResponse:
    """Exchange username and password for a bearer token."""
    return await login_user(store, request)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout() -> dict:
    """Tokens are stateless; the client discards its copy."""
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserPublic)
async def read_current_user(
    current_user: UserRecord = Depends(get_current_user),
) -> UserPublic:
    return UserPublic.model_validate(current_user.model_dump())
