"""Domain error hierarchy for the marketplace core.

Every error carries a stable ``code``, a user-facing ``message`` and the HTTP
status the API layer maps it to.  Services raise these; routers never catch
them (see ``promptmarket.api.error_handlers``).
"""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for all marketplace failures surfaced to callers."""

    code = "MARKETPLACE_ERROR"
    http_status = 500
    default_message = "Marketplace error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"message": self.message, "code": self.code}


class ValidationError(MarketplaceError):
    code = "VALIDATION_ERROR"
    http_status = 400
    default_message = "Invalid data"


class ConflictError(MarketplaceError):
    """Unique user attribute (username/email) already taken."""

    code = "CONFLICT"
    http_status = 400
    default_message = "Already exists"


class DuplicateMembershipError(MarketplaceError):
    """A (user, prompt) pair is already present in a membership set."""

    code = "DUPLICATE_MEMBERSHIP"
    http_status = 400
    default_message = "Already a member"


class NotFoundError(MarketplaceError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Not found"


class AuthenticationError(MarketplaceError):
    code = "AUTHENTICATION_ERROR"
    http_status = 401
    default_message = "Not authenticated"


class PermissionDeniedError(MarketplaceError):
    code = "PERMISSION_DENIED"
    http_status = 403
    default_message = "Not allowed"


class InternalConsistencyError(MarketplaceError):
    """A referential invariant of the entity store does not hold."""

    code = "INTERNAL_CONSISTENCY_ERROR"
    http_status = 500
    default_message = "Internal consistency error"
