"""
AI processing API routes.

POST /ai/process runs one multimodal inference, as JSON or as a
server-sent-event stream.
"""

import json
from typing import Any, AsyncIterator, Optional

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from app.agents.multimodal import ImageInput, InferenceRequest, MultimodalAgent
from app.api.deps import get_agent
from app.core.config import settings
from app.core.exceptions import InferenceError, UpstreamRateLimitError
from app.core.llm_clients import CompletionStream
from app.core.model_config import get_model_catalog
from app.core.observability import capture_exception

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

SSE_DONE = "data: [DONE]\n\n"


class ProcessContent(BaseModel):
    text: Optional[str] = None
    images: list[ImageInput] = Field(default_factory=list)
    prompt: str = Field(..., min_length=1)
    context: Optional[dict[str, Any]] = None


class ProcessOptions(BaseModel):
    stream: bool = False


class ProcessRequest(BaseModel):
    """Request body for /ai/process."""
    type: Optional[str] = None  # Informational; the shape is derived from content
    content: ProcessContent
    options: ProcessOptions = Field(default_factory=ProcessOptions)

    class Config:
        json_schema_extra = {
            "example": {
                "content": {
                    "text": "Our product launch went live today.",
                    "images": [{"url": "https://example.com/launch.jpg"}],
                    "prompt": "Write a short announcement for this launch.",
                },
                "options": {"stream": False},
            }
        }


def error_response(error: Exception) -> JSONResponse:
    """Map an inference failure to the public error body."""
    if isinstance(error, UpstreamRateLimitError):
        return JSONResponse(
            status_code=429,
            content={
                "error": "Rate limit exceeded",
                "message": str(error),
                "type": "rate_limit_error",
                "retryAfter": error.retry_after,
            },
        )

    capture_exception(error, {"route": "ai.process"})
    message = (
        str(error)
        if settings.environment == "development"
        else "An error occurred while processing your request"
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": message},
    )


async def sse_events(stream: CompletionStream) -> AsyncIterator[str]:
    """Forward fragments as SSE events and always release the stream."""
    try:
        async for fragment in stream:
            yield f"data: {json.dumps({'content': fragment})}\n\n"
        yield SSE_DONE
    except InferenceError as e:
        logger.error("Inference stream failed", error=str(e), model=stream.model)
        capture_exception(e, {"route": "ai.process", "stream": True})
    finally:
        await stream.aclose()


@router.post("/process")
async def process(
    request: ProcessRequest,
    agent: MultimodalAgent = Depends(get_agent),
):
    """
    Process text, images or both.

    Returns `{success, data: {content, metadata}, rateLimits}`, or an SSE
    stream of `{content}` events ending with `[DONE]` when
    `options.stream` is true.
    """
    inference = InferenceRequest(
        prompt=request.content.prompt,
        text=request.content.text,
        images=request.content.images,
        context=request.content.context,
    )

    try:
        if request.options.stream:
            stream = await agent.stream_process(inference)
            return StreamingResponse(
                sse_events(stream),
                media_type="text/event-stream",
                headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
            )

        result = await agent.process(inference)
    except InferenceError as e:
        logger.error("AI processing error", error=str(e))
        return error_response(e)

    usage = result.metadata.token_usage
    return {
        "success": True,
        "data": {
            "content": result.content,
            "metadata": {
                "model": result.metadata.model,
                "processingTime": result.metadata.processing_time_ms,
                "tokenUsage": usage.model_dump() if usage else None,
            },
        },
        "rateLimits": result.rate_limits.to_response(),
    }


@router.get("/process")
async def process_info() -> dict:
    """Describe the processing endpoint and the models behind it."""
    return {
        "message": "AI Processing API",
        "version": settings.app_version,
        "endpoints": {"POST": f"{settings.api_prefix}/ai/process"},
        "supportedTypes": ["text", "image", "multimodal"],
        "models": get_model_catalog(),
    }
