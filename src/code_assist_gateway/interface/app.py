"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from code_assist_gateway.interface.dependencies import shutdown, startup
from code_assist_gateway.interface.error_handlers import register_error_handlers
from code_assist_gateway.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of shared resources."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="Code Assist Gateway",
        version="1.0.0",
        description=(
            "Checks the caller's generation quota, builds a project-aware "
            "prompt and streams a code-assistance answer from Anthropic or "
            "AWS Bedrock as plain text."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    # ── Health check (liveness) ─────────────────────────────────────────

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
