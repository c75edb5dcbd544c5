"""Stream normalisation — one ordered text-fragment stream for both backends.

Each backend speaks its own chunked protocol.  The classifiers below reduce a
raw chunk to a :class:`BackendChunk`; :func:`iter_fragments` then drives any
chunk source through a classifier and yields only the generated text.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator, Awaitable, Callable, Mapping, TypeVar

from code_assist_gateway.domain.entities import (
    IGNORED_CHUNK,
    BackendChunk,
    ChunkKind,
)
from code_assist_gateway.domain.exceptions import UpstreamParseError, UpstreamStreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TEXT_EVENTS = frozenset({"content_block_delta", "message_delta"})


# ── Bedrock (RemoteManagedRuntime) ──────────────────────────────────────────


def classify_bedrock_payload(raw: bytes | str) -> BackendChunk:
    """Classify one decoded ``chunk.bytes`` payload from Bedrock."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        parsed = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise UpstreamParseError(f"Invalid JSON chunk: {exc}") from exc

    if not isinstance(parsed, dict):
        raise UpstreamParseError(f"Unexpected chunk payload: {parsed!r}")

    if parsed.get("type") in _TEXT_EVENTS:
        delta = parsed.get("delta")
        if isinstance(delta, dict) and delta.get("text"):
            return BackendChunk(ChunkKind.TEXT_DELTA, text=str(delta["text"]))
    return IGNORED_CHUNK


def classify_bedrock_event(event: Mapping[str, Any]) -> BackendChunk:
    """Classify one raw event from ``invoke_model_with_response_stream``."""
    chunk = event.get("chunk")
    if chunk is not None:
        payload = chunk.get("bytes") if isinstance(chunk, Mapping) else None
        if not payload:
            return IGNORED_CHUNK
        return classify_bedrock_payload(payload)

    for key, value in event.items():
        if key.endswith("Exception"):
            message = value.get("message") if isinstance(value, Mapping) else value
            return BackendChunk(ChunkKind.ERROR, cause=f"{key}: {message}")
    return IGNORED_CHUNK


# ── Anthropic messages API (DirectProviderAPI) ──────────────────────────────


def classify_anthropic_event(event: Any) -> BackendChunk:
    """Classify one server-sent event from the Anthropic streaming API."""
    kind = getattr(event, "type", None)
    if kind == "content_block_delta":
        delta = getattr(event, "delta", None)
        if getattr(delta, "type", None) == "text_delta":
            return BackendChunk(ChunkKind.TEXT_DELTA, text=getattr(delta, "text", ""))
        return IGNORED_CHUNK
    if kind == "error":
        return BackendChunk(ChunkKind.ERROR, cause=str(getattr(event, "error", "unknown")))
    return IGNORED_CHUNK


# ── Shared consumer ─────────────────────────────────────────────────────────


async def iter_fragments(
    source: AsyncIterable[T],
    classify: Callable[[T], BackendChunk],
    *,
    label: str,
    close: Callable[[], Awaitable[None]] | None = None,
) -> AsyncIterator[str]:
    """Yield text fragments from *source* in arrival order.

    Malformed chunks are logged and skipped.  The stream ends when *source* is
    exhausted; every chunk before that is classified.  A backend error, or any
    exception raised by *source*, ends the stream with
    :class:`UpstreamStreamError`.  Once iteration has begun, *close* runs
    exactly once however the stream ends, including when the consumer stops
    early or is cancelled.
    """
    try:
        async for raw in source:
            try:
                chunk = classify(raw)
            except UpstreamParseError as exc:
                logger.error("Error parsing %s chunk: %s", label, exc)
                continue

            if chunk.kind is ChunkKind.TEXT_DELTA:
                if chunk.text:
                    yield chunk.text
            elif chunk.kind is ChunkKind.ERROR:
                raise UpstreamStreamError(f"{label} stream failed: {chunk.cause}")
    except UpstreamStreamError as exc:
        logger.error("%s streaming error: %s", label, exc)
        raise
    except Exception as exc:
        logger.error("%s streaming error: %s", label, exc)
        raise UpstreamStreamError(f"{label} stream failed: {exc}") from exc
    finally:
        if close is not None:
            try:
                await close()
            except Exception:
                logger.warning("Failed to close %s stream", label, exc_info=True)
