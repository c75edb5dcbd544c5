"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from code_assist_gateway.interface.dependencies import get_use_case, require_user_id
from code_assist_gateway.interface.schemas import GenerateRequest
from code_assist_gateway.services.generate_completion import GenerateCompletionUseCase

router = APIRouter()

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post(
    "/api/ai",
    response_class=StreamingResponse,
    responses={
        200: {"description": "Generated text, streamed as it arrives"},
        401: {"description": "No authenticated user"},
        429: {"description": "Generation limit reached for the user's tier"},
        500: {"description": "Backend or collaborator failure"},
    },
)
async def generate(
    body: GenerateRequest,
    user_id: str = Depends(require_user_id),
    use_case: GenerateCompletionUseCase = Depends(get_use_case),
) -> StreamingResponse:
    """Stream a code-assistance answer for the caller's conversation."""
    fragments = await use_case.execute(user_id, body.to_domain())
    return StreamingResponse(
        fragments, media_type=STREAM_MEDIA_TYPE, headers=STREAM_HEADERS
    )
