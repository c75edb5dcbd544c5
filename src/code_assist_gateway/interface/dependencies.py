"""FastAPI dependency injection wiring."""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Request

from code_assist_gateway.domain.exceptions import UnauthorizedError
from code_assist_gateway.domain.ports.llm_backend import LlmBackend
from code_assist_gateway.infrastructure.backend_selector import build_backend
from code_assist_gateway.infrastructure.config import Settings, get_settings
from code_assist_gateway.infrastructure.profile_rest_adapter import ProfileRestAdapter
from code_assist_gateway.infrastructure.template_registry import StaticTemplateRegistry
from code_assist_gateway.infrastructure.tiers import TIERS
from code_assist_gateway.services.generate_completion import GenerateCompletionUseCase
from code_assist_gateway.services.quota_gate import QuotaGate
from code_assist_gateway.services.usage_recorder import UsageRecorder

_http_client: httpx.AsyncClient | None = None
_backend: LlmBackend | None = None
_templates: StaticTemplateRegistry | None = None
_usage_recorder: UsageRecorder | None = None


async def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _backend, _templates, _usage_recorder  # noqa: PLW0603

    settings = get_settings()
    _backend = build_backend(settings)
    _templates = StaticTemplateRegistry.from_settings(settings.templates_file)
    _http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.collaborator_timeout_seconds)
    )
    _usage_recorder = UsageRecorder(
        ProfileRestAdapter(client=_http_client, base_url=settings.server_url)
    )


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _backend, _templates, _usage_recorder  # noqa: PLW0603

    if _usage_recorder:
        await _usage_recorder.drain()
        _usage_recorder = None
    if _http_client:
        await _http_client.aclose()
        _http_client = None
    if _backend:
        await _backend.close()
        _backend = None
    _templates = None


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def require_user_id(request: Request) -> str:
    """Identity supplied by the upstream auth layer, or 401."""
    user_id = request.headers.get(_settings().user_id_header, "").strip()
    if not user_id:
        raise UnauthorizedError()
    return user_id


def get_use_case() -> GenerateCompletionUseCase:
    """Build the use case around the process-wide adapters."""
    settings = _settings()

    assert _http_client is not None, "startup() was not called"
    assert _backend is not None, "startup() was not called"
    assert _templates is not None, "startup() was not called"
    assert _usage_recorder is not None, "startup() was not called"

    profile_store = ProfileRestAdapter(client=_http_client, base_url=settings.server_url)

    return GenerateCompletionUseCase(
        quota_gate=QuotaGate(profile_store, TIERS),
        templates=_templates,
        backend=_backend,
        usage_recorder=_usage_recorder,
        temperature=settings.temperature,
    )
