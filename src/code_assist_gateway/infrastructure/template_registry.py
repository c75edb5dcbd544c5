"""Static project-template registry — implements the TemplateRegistry port."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from code_assist_gateway.domain.entities import TemplateConfig
from code_assist_gateway.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES: tuple[TemplateConfig, ...] = (
    TemplateConfig(
        id="reactjs",
        name="React",
        conventions=(
            "Use functional components with hooks",
            "Follow React naming conventions (PascalCase for components)",
            "Keep components small and focused",
            "Use TypeScript for type safety",
        ),
        dependencies={
            "react": "^18.3.1",
            "react-dom": "^18.3.1",
            "tailwindcss": "^3.4.1",
        },
        scripts={
            "dev": "vite",
            "build": "tsc && vite build",
            "preview": "vite preview",
        },
    ),
    TemplateConfig(
        id="vanillajs",
        name="Vanilla JavaScript",
        conventions=(
            "Use ES6+ features",
            "Follow modular design patterns",
            "Use event delegation where appropriate",
            "Keep DOM manipulation efficient",
        ),
        dependencies={"vite": "^5.0.12"},
        scripts={
            "dev": "vite",
            "build": "vite build",
            "preview": "vite preview",
        },
    ),
    TemplateConfig(
        id="nextjs",
        name="NextJS",
        conventions=(
            "Use the app router and server components by default",
            "Place API routes under app/api",
            "Co-locate components with the routes that use them",
            "Use TypeScript for type safety",
        ),
        dependencies={
            "next": "^14.1.0",
            "react": "^18.2.0",
            "react-dom": "18.2.0",
            "tailwindcss": "^3.4.1",
        },
        scripts={
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
    ),
    TemplateConfig(
        id="streamlit",
        name="Streamlit",
        conventions=(
            "Follow PEP 8 style guide",
            "Use Streamlit caching for expensive computations",
            "Keep one page per script under pages/",
            "Declare dependencies in requirements.txt",
        ),
        dependencies={"streamlit": "^1.40.0", "altair": "^5.5.0"},
        scripts={
            "start": "streamlit run main.py",
            "dev": "./venv/bin/streamlit run main.py --server.runOnSave true",
        },
    ),
    TemplateConfig(
        id="php",
        name="PHP",
        conventions=(
            "Follow PSR-12 coding standards",
            "Use modern PHP 8 features",
            "Organize assets in the public directory",
        ),
        dependencies={"vite": "^5.0.0"},
        scripts={
            "dev": "vite",
            "build": "vite build",
            "preview": "vite preview",
        },
    ),
)


def _template_from_json(template_id: str, raw: Mapping[str, Any]) -> TemplateConfig:
    conventions = raw.get("conventions", [])
    if not isinstance(conventions, list):
        raise ConfigurationError(f"Template {template_id!r}: 'conventions' must be a list")
    return TemplateConfig(
        id=template_id,
        name=str(raw.get("name", template_id)),
        conventions=tuple(str(c) for c in conventions),
        dependencies=dict(raw.get("dependencies", {})),
        scripts=dict(raw.get("scripts", {})),
    )


def load_templates_file(path: Path) -> dict[str, TemplateConfig]:
    """Read a JSON mapping of ``id → {name, conventions, dependencies, scripts}``."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read templates file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Templates file {path} must contain a JSON object")

    return {
        template_id: _template_from_json(template_id, raw)
        for template_id, raw in data.items()
        if isinstance(raw, dict)
    }


class StaticTemplateRegistry:
    """In-process ``TemplateRegistry`` over a fixed set of templates."""

    def __init__(self, templates: Mapping[str, TemplateConfig]) -> None:
        self._templates: Mapping[str, TemplateConfig] = MappingProxyType(dict(templates))

    @classmethod
    def from_settings(cls, templates_file: Path | None = None) -> StaticTemplateRegistry:
        """Built-in templates, extended or overridden by *templates_file*."""
        templates = {t.id: t for t in BUILTIN_TEMPLATES}
        if templates_file is not None:
            overrides = load_templates_file(templates_file)
            logger.info("Loaded %d template(s) from %s", len(overrides), templates_file)
            templates.update(overrides)
        return cls(templates)

    def get(self, template_type: str | None) -> TemplateConfig | None:
        if not template_type:
            return None
        return self._templates.get(template_type)
