from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Headers applied to every response
_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Cross-Origin-Opener-Policy": "same-origin",
}

# JSON API responses never need to load sub-resources.
_API_CSP = "default-src 'none'; frame-ancestors 'none'"

# Swagger UI pulls its bundle from a CDN.
_DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "frame-ancestors 'none'"
)

_DOCS_PATHS = {"/docs", "/redoc", "/docs/oauth2-redirect"}

_HSTS_VALUE = "max-age=31536000; includeSubDomains"


def _apply_security_headers(response: Response, request: Request) -> None:
    """Set standard security headers on a response."""
    for name, value in _SECURITY_HEADERS.items():
        response.headers[name] = value

    path = request.url.path
    response.headers["Content-Security-Policy"] = (
        _DOCS_CSP if path in _DOCS_PATHS else _API_CSP
    )

    # Per-user data (cart, favorites, purchases) must not be cached by proxies.
    if "authorization" in request.headers:
        response.headers["Cache-Control"] = "no-store"
        response.headers["Vary"] = "Authorization"

    if request.url.scheme == "https":
        response.headers["Strict-Transport-Security"] = _HSTS_VALUE


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to every HTTP response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        _apply_security_headers(response, request)
        return response
