"""Built-in tier table."""

from __future__ import annotations

from code_assist_gateway.domain.entities import TierSettings
from code_assist_gateway.domain.value_objects import TierTable

_CLAUDE_SONNET = "claude-3-5-sonnet-20240620"

TIERS = TierTable(
    {
        "FREE": TierSettings(
            name="FREE", generations=1000, max_tokens=1024, anthropic_model=_CLAUDE_SONNET
        ),
        "PRO": TierSettings(
            name="PRO", generations=2500, max_tokens=2048, anthropic_model=_CLAUDE_SONNET
        ),
        "ENTERPRISE": TierSettings(
            name="ENTERPRISE",
            generations=5000,
            max_tokens=4096,
            anthropic_model=_CLAUDE_SONNET,
        ),
    }
)
