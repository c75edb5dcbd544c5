"""Global exception handlers — translate domain errors to HTTP responses.

Every failure is returned as ``text/plain`` so callers reading the stream
body can display it verbatim.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from code_assist_gateway.domain.exceptions import (
    BackendDispatchError,
    CollaboratorUnavailableError,
    GatewayError,
    QuotaExceededError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Internal Server Error"

_EXCEPTION_STATUS: list[tuple[type[GatewayError], int]] = [
    (UnauthorizedError, 401),
    (QuotaExceededError, 429),
    (CollaboratorUnavailableError, 500),
    (BackendDispatchError, 500),
    (GatewayError, 500),
]


def _error_text(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message or GENERIC_ERROR, status_code=status_code)


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> PlainTextResponse:
                if status_code >= 500:
                    logger.error("AI generation error: %s: %s", type(exc).__name__, exc)
                else:
                    logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_text(status_code, str(exc))

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> PlainTextResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        logger.warning("Rejected request body: %s", "; ".join(messages))
        return _error_text(500, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception("Unhandled exception")
        return _error_text(500, str(exc))
