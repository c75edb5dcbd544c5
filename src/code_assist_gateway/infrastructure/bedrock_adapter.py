"""Bedrock adapter — implements the LlmBackend port over AWS Bedrock runtime."""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, AsyncIterator, Callable, Iterable, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from code_assist_gateway.domain.entities import BackendKind, CompletionRequest
from code_assist_gateway.domain.exceptions import BackendDispatchError
from code_assist_gateway.domain.value_objects import AwsCredentials
from code_assist_gateway.services.stream_normalizer import (
    classify_bedrock_event,
    iter_fragments,
)

logger = logging.getLogger(__name__)

DEFAULT_ANTHROPIC_VERSION = "bedrock-2023-05-31"
DEFAULT_STREAM_WORKERS = 32

T = TypeVar("T")

_EXHAUSTED = object()


async def _aiter_events(
    events: Iterable[dict[str, Any]], executor: Executor
) -> AsyncIterator[dict[str, Any]]:
    """Pull events from botocore's blocking EventStream on *executor*."""
    loop = asyncio.get_running_loop()
    iterator = iter(events)
    while True:
        event = await loop.run_in_executor(executor, next, iterator, _EXHAUSTED)
        if event is _EXHAUSTED:
            return
        yield event


def build_payload(request: CompletionRequest, anthropic_version: str) -> dict[str, Any]:
    """Provider-nested body; the system prompt travels as a leading user turn."""
    return {
        "anthropic_version": anthropic_version,
        "max_tokens": request.max_tokens,
        "temperature": request.temperature,
        "messages": [
            {"role": "user", "content": request.system_prompt},
            *(
                {"role": turn.backend_role, "content": turn.content}
                for turn in request.turns
            ),
        ],
    }


class BedrockAdapter:
    """Concrete ``LlmBackend`` backed by ``invoke_model_with_response_stream``.

    Every call targets the configured model ARN; the tier's model id only
    applies to the direct API.

    botocore only offers a blocking event stream, so each open stream holds
    a worker thread while it waits for the next event.  Those threads come
    from a pool owned by the adapter and capped at *stream_workers*; streams
    beyond the cap queue for a thread instead of starving the event loop's
    default executor.
    """

    kind = BackendKind.REMOTE_MANAGED_RUNTIME

    def __init__(
        self,
        credentials: AwsCredentials,
        *,
        anthropic_version: str = DEFAULT_ANTHROPIC_VERSION,
        stream_workers: int = DEFAULT_STREAM_WORKERS,
        client: Any = None,
    ) -> None:
        if stream_workers < 1:
            raise ValueError("stream_workers must be at least 1")
        self._model_id = credentials.model_arn
        self._anthropic_version = anthropic_version
        self._client = client if client is not None else boto3.client(
            "bedrock-runtime",
            region_name=credentials.region,
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=stream_workers, thread_name_prefix="bedrock-stream"
        )

    async def _run(self, func: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, functools.partial(func, *args, **kwargs)
        )

    async def open_stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """Invoke the model with a streaming response and return its fragments."""
        body = json.dumps(build_payload(request, self._anthropic_version))
        try:
            response = await self._run(
                self._client.invoke_model_with_response_stream,
                modelId=self._model_id,
                contentType="application/json",
                accept="application/json",
                body=body,
            )
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "unknown")
            raise BackendDispatchError(f"Bedrock call failed ({code}): {exc}") from exc
        except BotoCoreError as exc:
            raise BackendDispatchError(f"Bedrock call failed: {exc}") from exc

        event_stream = response.get("body")
        if event_stream is None:
            raise BackendDispatchError("No response body received from Bedrock")

        async def _close() -> None:
            await self._run(event_stream.close)

        return iter_fragments(
            _aiter_events(event_stream, self._executor),
            classify_bedrock_event,
            label="Bedrock",
            close=_close,
        )

    async def close(self) -> None:
        """Release underlying HTTP resources and the stream worker pool."""
        try:
            await self._run(self._client.close)
        finally:
            self._executor.shutdown(wait=False, cancel_futures=True)
