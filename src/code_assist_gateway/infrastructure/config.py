"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    The four ``aws_*`` fields select the Bedrock backend only when all of
    them are set; otherwise ``anthropic_api_key`` configures the direct API.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    anthropic_api_key: SecretStr | None = None
    aws_access_key_id: SecretStr | None = None
    aws_secret_access_key: SecretStr | None = None
    aws_region: str | None = None
    aws_arn: str | None = None
    anthropic_version: str = "bedrock-2023-05-31"
    bedrock_stream_workers: int = 32
    temperature: float = 0.7
    server_url: str = "http://localhost:4000"
    collaborator_timeout_seconds: float = 10.0
    user_id_header: str = "X-User-Id"
    templates_file: Path | None = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
