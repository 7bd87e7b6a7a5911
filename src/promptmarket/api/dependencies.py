"""Shared FastAPI dependencies: the request's entity store and its subject."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from promptmarket.errors import AuthenticationError
from promptmarket.schemas import UserRecord
from promptmarket.services.auth_service import Authenticator, JWTAuthenticator
from promptmarket.store.base import EntityStore

# auto_error=False so optional-auth routes can run anonymously
_bearer_scheme = HTTPBearer(auto_error=False)

_authenticator = JWTAuthenticator()


async def get_store(request: Request) -> AsyncIterator[EntityStore]:
    """Yield the entity store for this request from the configured provider."""
    async with request.app.state.store_provider.session() as store:
        yield store


def get_authenticator() -> Authenticator:
    return _authenticator


async def _resolve_user(
    store: EntityStore,
    authenticator: Authenticator,
    token: str,
) -> UserRecord:
    user_id = authenticator.authenticate(token)
    user = await store.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_current_user(
    store: EntityStore = Depends(get_store),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
) -> UserRecord:
    """Resolve the subject from ``Authorization: Bearer <token>``.

    Raises AuthenticationError (401) when the token is missing or invalid,
    or when its subject no longer exists.
    """
    if credentials is None:
        raise AuthenticationError("Access token required")
    return await _resolve_user(store, authenticator, credentials.credentials)


async def get_optional_user(
    store: EntityStore = Depends(get_store),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Optional[UserRecord]:
    """Like get_current_user, but anonymous or bad credentials yield None."""
    if credentials is None:
        return None
    try:
        return await _resolve_user(store, authenticator, credentials.credentials)
    except AuthenticationError:
        return None
