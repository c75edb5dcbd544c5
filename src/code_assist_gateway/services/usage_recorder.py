"""Usage recorder — fire-and-forget generation-count increments."""

from __future__ import annotations

import asyncio
import logging

from code_assist_gateway.domain.ports.profile_store import ProfileStore

logger = logging.getLogger(__name__)


class UsageRecorder:
    """Schedules one increment per dispatched generation as a detached task.

    Increments are at-most-once: a failure is logged and never retried, and
    it never reaches the response already in flight.
    """

    def __init__(self, profile_store: ProfileStore) -> None:
        self._store = profile_store
        self._pending: set[asyncio.Task[None]] = set()

    def record(self, user_id: str) -> asyncio.Task[None]:
        """Schedule the increment for *user_id* and return immediately."""
        task = asyncio.create_task(
            self._increment(user_id), name=f"increment-generations:{user_id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _increment(self, user_id: str) -> None:
        try:
            await self._store.increment_generations(user_id)
        except Exception as exc:
            logger.error("Failed to increment generations for %s: %s", user_id, exc)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float = 5.0) -> None:
        """Wait (bounded by *timeout*) for in-flight increments to finish."""
        if not self._pending:
            return
        _, not_done = await asyncio.wait(set(self._pending), timeout=timeout)
        if not_done:
            logger.warning("Abandoning %d pending usage increment(s)", len(not_done))
            for task in not_done:
                task.cancel()
