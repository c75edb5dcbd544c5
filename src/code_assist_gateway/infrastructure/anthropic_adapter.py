"""Anthropic adapter — implements the LlmBackend port over the direct API."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

from anthropic import APIError, AsyncAnthropic, AuthenticationError, RateLimitError

from code_assist_gateway.domain.entities import BackendKind, CompletionRequest
from code_assist_gateway.domain.exceptions import BackendDispatchError
from code_assist_gateway.services.stream_normalizer import (
    classify_anthropic_event,
    iter_fragments,
)

logger = logging.getLogger(__name__)


class AnthropicAdapter:
    """Concrete ``LlmBackend`` backed by the Anthropic messages API."""

    kind = BackendKind.DIRECT_PROVIDER_API

    def __init__(self, api_key: str | None = None, *, client: Any = None) -> None:
        self._client = client if client is not None else AsyncAnthropic(api_key=api_key)

    async def open_stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """Open a streaming ``messages.create`` call and return its fragments."""
        try:
            stream = await self._client.messages.create(
                model=request.model,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
                system=request.system_prompt,
                messages=[
                    {"role": turn.backend_role, "content": turn.content}
                    for turn in request.turns
                ],
                stream=True,
            )

        except AuthenticationError as exc:
            raise BackendDispatchError(
                "Invalid Anthropic API key. "
                "Set a valid key in the ANTHROPIC_API_KEY environment variable."
            ) from exc

        except RateLimitError as exc:
            detail = str(exc)
            logger.error("Anthropic RateLimitError: %s", detail)
            raise BackendDispatchError(
                f"Anthropic rate limit / quota error: {detail}"
            ) from exc

        except APIError as exc:
            raise BackendDispatchError(f"Anthropic call failed: {exc}") from exc

        return iter_fragments(
            stream, classify_anthropic_event, label="Anthropic", close=stream.close
        )

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()
