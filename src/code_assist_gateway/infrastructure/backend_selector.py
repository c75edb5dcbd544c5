"""One-time backend selection from process configuration."""

from __future__ import annotations

import logging

from code_assist_gateway.domain.entities import BackendKind
from code_assist_gateway.domain.exceptions import ConfigurationError
from code_assist_gateway.domain.ports.llm_backend import LlmBackend
from code_assist_gateway.domain.value_objects import AwsCredentials
from code_assist_gateway.infrastructure.anthropic_adapter import AnthropicAdapter
from code_assist_gateway.infrastructure.bedrock_adapter import BedrockAdapter
from code_assist_gateway.infrastructure.config import Settings

logger = logging.getLogger(__name__)


def choose_backend(settings: Settings) -> BackendKind:
    """Bedrock when the full AWS credential quadruple is present, else the direct API."""
    if AwsCredentials.from_settings(settings) is not None:
        return BackendKind.REMOTE_MANAGED_RUNTIME
    return BackendKind.DIRECT_PROVIDER_API


def build_backend(settings: Settings) -> LlmBackend:
    """Construct the process-wide backend handle.  Call once at startup."""
    credentials = AwsCredentials.from_settings(settings)
    if credentials is not None:
        logger.info(
            "Using Bedrock backend (region=%s, model=%s)",
            credentials.region,
            credentials.model_arn,
        )
        return BedrockAdapter(
            credentials,
            anthropic_version=settings.anthropic_version,
            stream_workers=settings.bedrock_stream_workers,
        )

    api_key = (
        settings.anthropic_api_key.get_secret_value()
        if settings.anthropic_api_key
        else ""
    )
    if not api_key:
        raise ConfigurationError(
            "No backend configured. Set ANTHROPIC_API_KEY, or all of "
            "AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_REGION and AWS_ARN."
        )
    logger.info("Using Anthropic direct API backend")
    return AnthropicAdapter(api_key=api_key)
