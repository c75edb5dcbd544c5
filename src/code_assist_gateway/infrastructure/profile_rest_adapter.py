"""User-profile REST adapter — implements the ProfileStore port."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from code_assist_gateway.domain.entities import UsageRecord
from code_assist_gateway.domain.exceptions import CollaboratorUnavailableError

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _parse_timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable lastResetDate %r — ignoring", raw)
        return None


class ProfileRestAdapter:
    """Concrete ProfileStore backed by the profile server's HTTP API."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def check_reset(self, user_id: str) -> None:
        """POST /api/user/check-reset {userId}."""
        await self._request("POST", "/api/user/check-reset", json={"userId": user_id})

    async def fetch_user(self, user_id: str) -> UsageRecord:
        """GET /api/user?id={userId} → UsageRecord."""
        resp = await self._request("GET", "/api/user", params={"id": user_id})
        try:
            data = resp.json()
        except ValueError as exc:
            raise CollaboratorUnavailableError(
                f"Profile store returned invalid JSON for user {user_id}"
            ) from exc

        if not isinstance(data, dict):
            raise CollaboratorUnavailableError(
                f"Profile store returned no record for user {user_id}"
            )

        try:
            generations = int(data.get("generations") or 0)
        except (TypeError, ValueError):
            generations = 0

        return UsageRecord(
            user_id=str(data.get("id") or user_id),
            tier=data.get("tier") or None,
            generations=generations,
            last_reset=_parse_timestamp(data.get("lastResetDate")),
        )

    async def increment_generations(self, user_id: str) -> None:
        """POST /api/user/increment-generations {userId}."""
        await self._request(
            "POST", "/api/user/increment-generations", json={"userId": user_id}
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a profile-store request with error translation."""
        url = f"{self._base_url}{endpoint}"
        try:
            resp = await self._client.request(
                method, url, headers=_JSON_HEADERS, params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise CollaboratorUnavailableError(
                f"Network error calling {url}: {exc}"
            ) from exc

        if resp.is_success:
            return resp

        raise CollaboratorUnavailableError(
            f"Profile store returned HTTP {resp.status_code} for {method} {endpoint}"
        )
