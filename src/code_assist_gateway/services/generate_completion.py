"""Generate-completion use case — the main request pipeline.

This is the single entry point for the business logic.  It depends only on
the ports (:class:`ProfileStore`, :class:`TemplateRegistry` and
:class:`LlmBackend`) and the pure service modules.  The interface layer
injects concrete adapters at runtime.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from code_assist_gateway.domain.entities import CompletionRequest, GenerationRequest
from code_assist_gateway.domain.ports.llm_backend import LlmBackend
from code_assist_gateway.domain.ports.template_registry import TemplateRegistry
from code_assist_gateway.services.prompt_builder import build_system_prompt
from code_assist_gateway.services.quota_gate import QuotaGate
from code_assist_gateway.services.usage_recorder import UsageRecorder

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7


class GenerateCompletionUseCase:
    """Orchestrates gate → prompt → backend dispatch → usage increment.

    Parameters
    ----------
    quota_gate:
        Admits or rejects the caller and resolves their tier.
    templates:
        Source of project template metadata for the prompt.
    backend:
        The process-wide backend chosen at startup.
    usage_recorder:
        Schedules the generation-count increment after dispatch.
    temperature:
        Fixed sampling temperature for every call.
    """

    def __init__(
        self,
        quota_gate: QuotaGate,
        templates: TemplateRegistry,
        backend: LlmBackend,
        usage_recorder: UsageRecorder,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._gate = quota_gate
        self._templates = templates
        self._backend = backend
        self._usage = usage_recorder
        self._temperature = temperature

    async def execute(
        self, user_id: str | None, request: GenerationRequest
    ) -> AsyncIterator[str]:
        """Run the pipeline and return the open fragment stream.

        Raises before any backend call if the caller is unauthenticated or
        out of quota.
        """
        admission = await self._gate.admit(user_id)
        tier = admission.tier

        template = self._templates.get(request.template_type)
        if template is None and request.template_type:
            logger.debug("No template registered for %r", request.template_type)

        completion = CompletionRequest(
            system_prompt=build_system_prompt(request, template),
            turns=request.messages,
            model=tier.anthropic_model,
            max_tokens=tier.max_tokens,
            temperature=self._temperature,
        )

        logger.info(
            "Dispatching %s generation for %s via %s (%s tier)",
            "edit" if request.is_edit_mode else "chat",
            admission.user_id,
            self._backend.kind.value,
            tier.name,
        )
        fragments = await self._backend.open_stream(completion)

        self._usage.record(admission.user_id)
        return fragments
