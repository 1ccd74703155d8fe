"""
Multimodal Agent - Routes text, image and mixed input to the upstream model.

Method: shape-based routing
- Input is classified once (text only / images only / both)
- The shape fixes the model tier, the system persona and the message layout
- Upstream failures propagate unchanged as typed errors
"""

import time
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from app.agents.multimodal.inputs import (
    ImageInput,
    ImageOnly,
    InferenceRequest,
    InputShape,
    Multimodal,
    TextOnly,
    classify,
    select_model_tier,
)
from app.core.config import settings
from app.core.llm_clients import (
    BaseLLMClient,
    CompletionStream,
    LLMMessage,
    RateLimitSnapshot,
    TokenUsage,
)
from app.core.model_config import get_model_id

logger = structlog.get_logger(__name__)


MULTIMODAL_SYSTEM_PROMPT = (
    "You are a helpful AI assistant that can analyze images and text together "
    "to provide comprehensive responses."
)

IMAGE_SYSTEM_PROMPT = (
    "You are a helpful AI assistant specialized in image analysis and description."
)

TEXT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant specialized in text processing and content generation."
)


class InferenceMetadata(BaseModel):
    """Per-call metadata returned alongside the content."""
    model: str
    processing_time_ms: int
    token_usage: Optional[TokenUsage] = None


class InferenceResult(BaseModel):
    """Normalized result of one upstream call."""
    content: str
    rate_limits: RateLimitSnapshot
    metadata: InferenceMetadata


def image_content_part(image: ImageInput) -> Optional[dict[str, Any]]:
    """Content part for one image, or None when it has no source."""
    if image.url:
        return {"type": "image_url", "image_url": {"url": image.url}}
    if image.base64:
        return {
            "type": "image_url",
            "image_url": {"url": f"data:image/jpeg;base64,{image.base64}"},
        }
    return None


def _image_parts(images: tuple[ImageInput, ...]) -> list[dict[str, Any]]:
    parts = []
    for index, image in enumerate(images):
        part = image_content_part(image)
        if part is None:
            logger.debug("Skipping image without url or base64", index=index)
            continue
        parts.append(part)
    return parts


def build_messages(shape: InputShape) -> list[LLMMessage]:
    """System persona plus one user message laid out for the input shape."""
    if isinstance(shape, Multimodal):
        content: list[dict[str, Any]] = [{"type": "text", "text": shape.prompt}]
        content.append({"type": "text", "text": f"Context: {shape.text}"})
        content.extend(_image_parts(shape.images))
        return [
            LLMMessage(role="system", content=MULTIMODAL_SYSTEM_PROMPT),
            LLMMessage(role="user", content=content),
        ]

    if isinstance(shape, ImageOnly):
        content = [{"type": "text", "text": shape.prompt}]
        content.extend(_image_parts(shape.images))
        return [
            LLMMessage(role="system", content=IMAGE_SYSTEM_PROMPT),
            LLMMessage(role="user", content=content),
        ]

    if isinstance(shape, TextOnly):
        user_content = shape.prompt
        if shape.text:
            user_content = f"{shape.prompt}\n\nContext: {shape.text}"
        return [
            LLMMessage(role="system", content=TEXT_SYSTEM_PROMPT),
            LLMMessage(role="user", content=user_content),
        ]

    raise TypeError(f"Unhandled input shape: {type(shape).__name__}")


class MultimodalAgent:
    """
    Inference request router.

    Selects a model for the input shape, builds the chat payload and submits
    it through the injected LLM client.
    """

    name = "multimodal_agent"

    def __init__(
        self,
        llm_client: BaseLLMClient,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.temperature = temperature if temperature is not None else settings.llm_temperature
        self.max_tokens = max_tokens or settings.llm_max_tokens

    def prepare(self, request: InferenceRequest) -> tuple[str, list[LLMMessage]]:
        """Resolve the model id and messages for a request."""
        shape = classify(request)
        model = get_model_id(select_model_tier(shape))
        return model, build_messages(shape)

    async def process(self, request: InferenceRequest) -> InferenceResult:
        """
        Run one non-streaming completion.

        Raises:
            UpstreamRateLimitError: upstream answered 429
            InferenceError: any other upstream failure
        """
        start_time = time.perf_counter()
        model, messages = self.prepare(request)

        logger.info(
            "Processing inference request",
            model=model,
            image_count=len(request.images),
            prompt_length=len(request.prompt),
        )

        response = await self.llm_client.generate(
            messages=messages,
            model=model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        processing_time_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Inference complete",
            model=model,
            processing_time_ms=processing_time_ms,
            total_tokens=response.usage.total if response.usage else None,
        )

        return InferenceResult(
            content=response.content,
            rate_limits=response.rate_limits,
            metadata=InferenceMetadata(
                model=model,
                processing_time_ms=processing_time_ms,
                token_usage=response.usage,
            ),
        )

    async def stream_process(self, request: InferenceRequest) -> CompletionStream:
        """
        Open a streamed completion.

        The caller iterates fragments in order and must close the stream
        (``async with`` or ``aclose``) to release the upstream connection.
        """
        model, messages = self.prepare(request)
        logger.info("Opening inference stream", model=model, image_count=len(request.images))

        return await self.llm_client.stream_generate(
            messages=messages,
            model=model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
