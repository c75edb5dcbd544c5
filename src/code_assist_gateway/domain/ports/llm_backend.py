"""Port: LLM backend — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from code_assist_gateway.domain.entities import BackendKind, CompletionRequest


class LlmBackend(Protocol):
    """Abstract contract for a streaming large-language model backend."""

    kind: BackendKind

    async def open_stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """Dispatch *request* and return the ordered text-fragment stream.

        Returns once the upstream call is open.  The returned iterator yields
        fragments in arrival order, ends when the backend finishes and raises
        ``UpstreamStreamError`` if the backend aborts mid-stream.  Closing it
        early (``aclose``) releases the upstream stream.
        """
        ...

    async def close(self) -> None:
        """Release underlying client resources."""
        ...
