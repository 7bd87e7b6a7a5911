"""Authentication service: password hashing, JWT tokens, user registration/login.

The rest of the core only sees the ``Authenticator`` capability: a bearer
token goes in, a subject user id comes out, or ``AuthenticationError``.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel, Field, field_validator

from promptmarket.config import settings
from promptmarket.errors import AuthenticationError, ConflictError
from promptmarket.schemas import UserPublic, UserRecord
from promptmarket.services.audit_logger import audit
from promptmarket.store.base import EntityStore

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing helpers (bcrypt)
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Hash a plaintext password with bcrypt at the configured cost."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=320)
    password: str = Field(..., min_length=8)
    avatar: Optional[str] = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v.lower().strip()


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def create_access_token(user: UserRecord) -> str:
    """Issue a signed access token whose subject is the user id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "email": user.email,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=_ALGORITHM)


class Authenticator(Protocol):
    def authenticate(self, token: str) -> int:
        """Return the subject user id for *token* or raise AuthenticationError."""
        ...


class JWTAuthenticator:
    """Verifies HS256 tokens issued by ``create_access_token``."""

    def authenticate(self, token: str) -> int:
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[_ALGORITHM],
                audience=settings.JWT_AUDIENCE,
                issuer=settings.JWT_ISSUER,
            )
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token subject")


# ---------------------------------------------------------------------------
# Service functions
# ---------------------------------------------------------------------------


async def register_user(store: EntityStore, request: RegisterRequest) -> AuthResponse:
    """Register a new user. Raises ConflictError if username/email is taken."""
    if await store.get_user_by_username(request.username) is not None:
        raise ConflictError("Username already exists")
    if await store.get_user_by_email(request.email) is not None:
        raise ConflictError("Email already exists")

    user = await store.create_user(
        username=request.username,
        email=request.email,
        password_hash=hash_password(request.password),
        avatar=request.avatar,
    )
    audit.log_registration(user.id, user.username)
    return AuthResponse(
        user=UserPublic.model_validate(user.model_dump()),
        token=create_access_token(user),
    )


async def authenticate_user(
    store: EntityStore, username: str, password: str
) -> UserRecord | None:
    """Authenticate a user by username and password.

    SECURITY: Always performs a password hash even when the user does not exist
    to prevent timing-based user enumeration.
    """
    user = await store.get_user_by_username(username)

    if user is None:
        hash_password(password)
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


async def login_user(store: EntityStore, request: LoginRequest) -> AuthResponse:
    """Check credentials and issue a token. Raises AuthenticationError on failure."""
    user = await authenticate_user(store, request.username, request.password)
    if user is None:
        raise AuthenticationError("Invalid username or password")
    return AuthResponse(
        user=UserPublic.model_validate(user.model_dump()),
        token=create_access_token(user),
    )
