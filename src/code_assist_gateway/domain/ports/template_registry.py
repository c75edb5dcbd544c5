"""Port: project-template registry."""

from __future__ import annotations

from typing import Protocol

from code_assist_gateway.domain.entities import TemplateConfig


class TemplateRegistry(Protocol):
    """Abstract contract for looking up project template metadata."""

    def get(self, template_type: str | None) -> TemplateConfig | None:
        """Return the template for *template_type*, or ``None`` if unknown."""
        ...
