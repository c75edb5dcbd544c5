"""In-memory stand-ins for the gateway's ports."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator, Iterable

from code_assist_gateway.domain.entities import BackendKind, CompletionRequest, UsageRecord
from code_assist_gateway.domain.exceptions import CollaboratorUnavailableError


class FakeProfileStore:
    def __init__(
        self,
        tier: str | None = "FREE",
        generations: int = 0,
        *,
        fail_reset: bool = False,
        fail_increment: bool = False,
    ) -> None:
        self.tier = tier
        self.generations = generations
        self.fail_reset = fail_reset
        self.fail_increment = fail_increment
        self.calls: list[tuple[str, str]] = []

    async def check_reset(self, user_id: str) -> None:
        self.calls.append(("check_reset", user_id))
        if self.fail_reset:
            raise CollaboratorUnavailableError("profile store down")

    async def fetch_user(self, user_id: str) -> UsageRecord:
        self.calls.append(("fetch_user", user_id))
        return UsageRecord(user_id=user_id, tier=self.tier, generations=self.generations)

    async def increment_generations(self, user_id: str) -> None:
        self.calls.append(("increment_generations", user_id))
        if self.fail_increment:
            raise CollaboratorUnavailableError("profile store down")
        self.generations += 1

    @property
    def increments(self) -> int:
        return sum(1 for name, _ in self.calls if name == "increment_generations")


class FakeBackend:
    kind = BackendKind.DIRECT_PROVIDER_API

    def __init__(self, fragments: Iterable[str] = ("Hello", ", ", "world")) -> None:
        self.fragments = list(fragments)
        self.requests: list[CompletionRequest] = []
        self.closed = False

    async def open_stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        self.requests.append(request)
        return agen(self.fragments)

    async def close(self) -> None:
        self.closed = True


class FakeEventStream:
    """Mimics botocore's blocking EventStream."""

    def __init__(self, events: Iterable[dict[str, Any]]) -> None:
        self._events = list(events)
        self.closed = False

    def __iter__(self):
        return iter(self._events)

    def close(self) -> None:
        self.closed = True


class FakeAsyncStream:
    """Mimics anthropic's AsyncStream."""

    def __init__(self, events: Iterable[Any]) -> None:
        self._events = list(events)
        self.closed = False

    async def __aiter__(self):
        for event in self._events:
            yield event

    async def close(self) -> None:
        self.closed = True


async def agen(items: Iterable[Any]) -> AsyncIterator[Any]:
    for item in items:
        yield item


async def collect(stream: AsyncIterator[str]) -> list[str]:
    return [fragment async for fragment in stream]


def bedrock_event(payload: dict[str, Any] | bytes) -> dict[str, Any]:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
    return {"chunk": {"bytes": raw}}
