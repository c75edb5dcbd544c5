"""Value objects — self-validating domain primitives."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Protocol

from code_assist_gateway.domain.entities import TierSettings

DEFAULT_TIER = "FREE"


class _CredentialSource(Protocol):
    aws_access_key_id: object
    aws_secret_access_key: object
    aws_region: str | None
    aws_arn: str | None


def _plain(value: object) -> str:
    """Unwrap ``SecretStr``-like values and normalise ``None`` to ``""``."""
    if value is None:
        return ""
    getter = getattr(value, "get_secret_value", None)
    raw = getter() if callable(getter) else value
    return str(raw).strip()


@dataclass(frozen=True, slots=True)
class AwsCredentials:
    """The complete Bedrock credential quadruple.

    There is no partial state: :meth:`from_settings` returns ``None``
    unless all four members are present and non-empty.
    """

    access_key_id: str
    secret_access_key: str
    region: str
    model_arn: str

    @classmethod
    def from_settings(cls, settings: _CredentialSource) -> AwsCredentials | None:
        access_key = _plain(settings.aws_access_key_id)
        secret_key = _plain(settings.aws_secret_access_key)
        region = _plain(settings.aws_region)
        arn = _plain(settings.aws_arn)
        if not (access_key and secret_key and region and arn):
            return None
        return cls(
            access_key_id=access_key,
            secret_access_key=secret_key,
            region=region,
            model_arn=arn,
        )


class TierTable:
    """Immutable tier-name → :class:`TierSettings` lookup with a guaranteed default."""

    __slots__ = ("_tiers",)

    def __init__(self, tiers: Mapping[str, TierSettings]) -> None:
        normalised = {name.upper(): settings for name, settings in tiers.items()}
        if DEFAULT_TIER not in normalised:
            raise ValueError(f"Tier table must define a {DEFAULT_TIER} tier.")
        self._tiers: Mapping[str, TierSettings] = MappingProxyType(normalised)

    def resolve(self, name: str | None) -> TierSettings:
        """Return the settings for *name*, falling back to the free tier."""
        if name:
            settings = self._tiers.get(name.upper())
            if settings is not None:
                return settings
        return self._tiers[DEFAULT_TIER]
