"""Structured JSON audit logger for marketplace events.

Emits structured log entries via structlog for membership changes,
checkouts, reviews, and registrations.  Every entry carries an
``audit: true`` flag so production log pipelines can filter on it easily.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog

from promptmarket.schemas import PurchaseRecord

log = structlog.get_logger()


class AuditLogger:
    """Structured audit logger for platform events.

    All methods are synchronous -- they only emit log lines and perform
    no I/O beyond writing to the configured structlog sink.
    """

    # ------------------------------------------------------------------
    # Membership (favorites / cart)
    # ------------------------------------------------------------------

    def log_membership_event(
        self,
        relation: str,
        action: str,
        user_id: int,
        prompt_id: Optional[int] = None,
        count: Optional[int] = None,
    ) -> None:
        """Record an add/remove/clear on a favorites or cart set."""
        log.info(
            "audit_event",
            event_type="membership",
            timestamp=datetime.now(timezone.utc).isoformat(),
            relation=relation,
            action=action,
            user_id=user_id,
            prompt_id=prompt_id,
            count=count,
            audit=True,
        )

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def log_checkout(self, user_id: int, purchases: list[PurchaseRecord]) -> None:
        """Log a cart checkout and the price snapshot of every purchase."""
        log.info(
            "audit_event",
            event_type="checkout",
            timestamp=datetime.now(timezone.utc).isoformat(),
            user_id=user_id,
            purchase_ids=[p.id for p in purchases],
            prompt_ids=[p.prompt_id for p in purchases],
            total=str(sum(p.price for p in purchases)),
            audit=True,
        )

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def log_review(self, review_id: int, prompt_id: int, user_id: int, rating: int) -> None:
        log.info(
            "audit_event",
            event_type="review",
            timestamp=datetime.now(timezone.utc).isoformat(),
            review_id=review_id,
            prompt_id=prompt_id,
            user_id=user_id,
            rating=rating,
            audit=True,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def log_registration(self, user_id: int, username: str) -> None:
        log.info(
            "audit_event",
            event_type="registration",
            timestamp=datetime.now(timezone.utc).isoformat(),
            user_id=user_id,
            username=username,
            audit=True,
        )


audit = AuditLogger()
