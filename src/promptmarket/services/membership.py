"""Favorites and cart: one membership-set component instantiated twice.

Each (user, prompt) pair is either ABSENT or PRESENT.  ``add`` on a PRESENT
pair raises DuplicateMembershipError (it is not idempotent); ``remove`` on an
ABSENT pair raises NotFoundError.  The uniqueness itself is enforced by the
store, so two racing ``add`` calls cannot both succeed.
"""

from __future__ import annotations

import structlog

from promptmarket.errors import NotFoundError
from promptmarket.schemas import MembershipRecord, PromptWithDetails, Relation
from promptmarket.services.audit_logger import audit
from promptmarket.services.enrichment import enrich_many
from promptmarket.store.base import EntityStore

log = structlog.get_logger()


class MembershipSet:
    """At-most-one-per-(user, prompt) relation between users and prompts."""

    def __init__(self, relation: Relation, not_found_message: str) -> None:
        self.relation = relation
        self.not_found_message = not_found_message

    async def add(self, store: EntityStore, user_id: int, prompt_id: int) -> MembershipRecord:
        if await store.get_prompt(prompt_id) is None:
            raise NotFoundError("Prompt not found")
        record = await store.add_membership(self.relation, user_id, prompt_id)
        audit.log_membership_event(self.relation.value, "add", user_id, prompt_id)
        return record

    async def remove(self, store: EntityStore, user_id: int, prompt_id: int) -> None:
        removed = await store.remove_membership(self.relation, user_id, prompt_id)
        if not removed:
            raise NotFoundError(self.not_found_message)
        audit.log_membership_event(self.relation.value, "remove", user_id, prompt_id)

    async def is_member(self, store: EntityStore, user_id: int, prompt_id: int) -> bool:
        return await store.has_membership(self.relation, user_id, prompt_id)

    async def list_for_user(self, store: EntityStore, user_id: int) -> list[PromptWithDetails]:
        """Enriched prompts for every membership, oldest membership first.

        Memberships whose prompt no longer exists are dropped.
        """
        memberships = await store.list_memberships(self.relation, user_id)
        prompts = await store.get_prompts(m.prompt_id for m in memberships)

        dangling = [m.prompt_id for m in memberships if m.prompt_id not in prompts]
        if dangling:
            log.warning(
                "membership_prompt_missing",
                relation=self.relation.value,
                user_id=user_id,
                prompt_ids=dangling,
            )

        resolved = [prompts[m.prompt_id] for m in memberships if m.prompt_id in prompts]
        return await enrich_many(store, resolved)

    async def clear(self, store: EntityStore, user_id: int) -> int:
        """Remove every membership for the user; succeeds on an empty set."""
        count = await store.clear_memberships(self.relation, user_id)
        audit.log_membership_event(self.relation.value, "clear", user_id, count=count)
        return count


favorites = MembershipSet(Relation.FAVORITES, not_found_message="Favorite not found")
cart = MembershipSet(Relation.CART, not_found_message="Item not found in cart")
