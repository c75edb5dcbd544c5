"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base exception for the entire application."""


# ── Access control ──────────────────────────────────────────────────────────


class UnauthorizedError(GatewayError):
    """No caller identity could be resolved (401)."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class QuotaExceededError(GatewayError):
    """The caller's tier has no generations left this month (429)."""

    def __init__(self, tier: str) -> None:
        self.tier = tier
        super().__init__(f"AI generation limit reached for your {tier} tier")


# ── Collaborators ───────────────────────────────────────────────────────────


class CollaboratorUnavailableError(GatewayError):
    """The user-profile store could not be reached or answered with an error."""


# ── Backend errors ──────────────────────────────────────────────────────────


class BackendDispatchError(GatewayError):
    """The backend call could not be opened."""


class UpstreamParseError(GatewayError):
    """A single backend chunk could not be decoded."""


class UpstreamStreamError(GatewayError):
    """The backend aborted the stream after it was opened."""


# ── Startup ─────────────────────────────────────────────────────────────────


class ConfigurationError(GatewayError):
    """The process configuration cannot produce a usable backend."""
