"""Quota gate — admit or reject a caller before any paid backend call."""

from __future__ import annotations

import logging

from code_assist_gateway.domain.entities import Admission
from code_assist_gateway.domain.exceptions import (
    CollaboratorUnavailableError,
    QuotaExceededError,
    UnauthorizedError,
)
from code_assist_gateway.domain.ports.profile_store import ProfileStore
from code_assist_gateway.domain.value_objects import DEFAULT_TIER, TierTable

logger = logging.getLogger(__name__)


class QuotaGate:
    """Checks the caller's monthly generation allowance.

    The check and the later increment are two separate collaborator calls,
    so concurrent requests from one user may both pass before either is
    counted.
    """

    def __init__(self, profile_store: ProfileStore, tiers: TierTable) -> None:
        self._store = profile_store
        self._tiers = tiers

    async def admit(self, user_id: str | None) -> Admission:
        """Admit the caller with their tier settings, or raise if they may not proceed."""
        if not user_id:
            raise UnauthorizedError()

        try:
            await self._store.check_reset(user_id)
        except CollaboratorUnavailableError as exc:
            logger.error("Failed to check usage reset for %s: %s", user_id, exc)

        record = await self._store.fetch_user(user_id)
        tier = self._tiers.resolve(record.tier)

        if record.generations >= tier.generations:
            tier_label = record.tier or DEFAULT_TIER
            logger.warning(
                "Quota exhausted for %s (%s tier, %d/%d)",
                user_id,
                tier_label,
                record.generations,
                tier.generations,
            )
            raise QuotaExceededError(tier_label)

        return Admission(user_id=user_id, tier=tier)
