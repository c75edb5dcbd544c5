"""Port: user-profile store — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from code_assist_gateway.domain.entities import UsageRecord


class ProfileStore(Protocol):
    """Abstract contract for the external store that owns usage counters."""

    async def check_reset(self, user_id: str) -> None:
        """Ask the store to reset the monthly counter if a new period began."""
        ...

    async def fetch_user(self, user_id: str) -> UsageRecord:
        """Return the caller's current tier and generation count."""
        ...

    async def increment_generations(self, user_id: str) -> None:
        """Record one more generation for the caller."""
        ...
