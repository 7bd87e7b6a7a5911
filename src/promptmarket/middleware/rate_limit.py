"""Redis sliding-window rate limiting for the write-heavy endpoints.

Fails open: if Redis is unreachable the request is served unthrottled.
"""

import time
from dataclasses import dataclass
from typing import Literal, Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from promptmarket.errors import AuthenticationError
from promptmarket.services.auth_service import JWTAuthenticator

log = structlog.get_logger()


@dataclass(frozen=True)
class RateLimitRule:
    """``limit`` requests per ``window`` seconds, counted per IP or per user."""

    path: str
    limit: int
    window: int
    key: Literal["ip", "user"] = "user"
    method: str = "POST"
    suffix: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path + (self.suffix or "")

    def matches(self, path: str, method: str) -> bool:
        if method.upper() != self.method:
            return False
        if self.suffix is not None:
            return path.startswith(self.path) and path.rstrip("/").endswith(self.suffix)
        return path == self.path or path == self.path + "/"


# First match wins.
RATE_LIMIT_RULES = [
    RateLimitRule("/api/register", limit=3, window=3600, key="ip"),
    RateLimitRule("/api/login", limit=5, window=900, key="ip"),
    RateLimitRule("/api/cart/checkout", limit=10, window=3600),
    RateLimitRule("/api/favorites", limit=60, window=60),
    RateLimitRule("/api/cart", limit=60, window=60),
    RateLimitRule("/api/prompts", suffix="/reviews", limit=10, window=3600),
]

SKIP_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

_authenticator = JWTAuthenticator()


@dataclass
class RateLimitResult:
    """Holds the outcome of a sliding-window rate limit check."""

    current_count: int
    limit: int
    window: int
    reset_at: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)

    @property
    def exceeded(self) -> bool:
        return self.current_count > self.limit


def find_matching_rule(path: str, method: str) -> Optional[RateLimitRule]:
    return next((rule for rule in RATE_LIMIT_RULES if rule.matches(path, method)), None)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _token_subject(request: Request) -> Optional[str]:
    """User id from a valid bearer token, or None.

    Middleware runs before route dependencies, so the token is verified here
    rather than read back from ``request.state``.
    """
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    try:
        return str(_authenticator.authenticate(token.strip()))
    except AuthenticationError:
        return None


def _identifier(request: Request, rule: RateLimitRule) -> str:
    if rule.key == "user":
        subject = _token_subject(request)
        if subject is not None:
            return f"user:{subject}"
    return f"ip:{_client_ip(request)}"


async def _count_request(redis, redis_key: str, rule: RateLimitRule) -> RateLimitResult:
    """Record this request in the sorted-set window and return the new count."""
    now = time.time()
    member = f"{now:.6f}:{time.monotonic_ns()}"

    pipe = redis.pipeline()
    pipe.zremrangebyscore(redis_key, 0, now - rule.window)
    pipe.zadd(redis_key, {member: now})
    pipe.zcard(redis_key)
    pipe.expire(redis_key, rule.window)
    _, _, count, _ = await pipe.execute()

    return RateLimitResult(
        current_count=count,
        limit=rule.limit,
        window=rule.window,
        reset_at=int(now) + rule.window,
    )


def _set_headers(response: Response, result: RateLimitResult) -> None:
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)
    response.headers["X-RateLimit-Reset"] = str(result.reset_at)


def _too_many_requests(result: RateLimitResult) -> JSONResponse:
    response = JSONResponse(
        status_code=429,
        content={
            "message": "Too many requests. Please try again later.",
            "code": "RATE_LIMITED",
        },
    )
    _set_headers(response, result)
    response.headers["Retry-After"] = str(result.window)
    return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Redis-backed sliding window rate limiter."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        rule = find_matching_rule(request.url.path, request.method)
        redis = getattr(request.app.state, "redis", None)
        if rule is None or redis is None:
            return await call_next(request)

        identifier = _identifier(request, rule)
        try:
            result = await _count_request(redis, f"ratelimit:{rule.name}:{identifier}", rule)
        except Exception as exc:
            log.warning("rate_limit_redis_error", error=str(exc), path=request.url.path)
            return await call_next(request)

        if result.exceeded:
            log.warning(
                "rate_limit_exceeded",
                path=request.url.path,
                identifier=identifier,
                limit=result.limit,
                count=result.current_count,
            )
            return _too_many_requests(result)

        response = await call_next(request)
        _set_headers(response, result)
        return response
