"""
LLM client abstraction for the upstream chat-completion API.
Provides a uniform response shape carrying rate-limit and token-usage metadata.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

import httpx
import openai
import structlog
from openai import AsyncOpenAI
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import InferenceError, UpstreamRateLimitError

logger = structlog.get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: Optional[str], default: Optional[int] = 0) -> Optional[int]:
    """Parse the leading integer of a header value, like JavaScript's parseInt."""
    if not value:
        return default
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else default


class LLMMessage(BaseModel):
    """Message format for LLM conversations."""
    role: str  # "system", "user", "assistant"
    content: Union[str, list[dict[str, Any]]]  # Plain text or ordered content parts


class TokenUsage(BaseModel):
    """Token counts reported by the upstream API."""
    prompt: int
    completion: int
    total: int


class RateLimitSnapshot(BaseModel):
    """Quota figures read from upstream response headers."""
    limit_requests: int = 0
    limit_tokens: int = 0
    remaining_requests: int = 0
    remaining_tokens: int = 0
    reset_requests: str = ""
    reset_tokens: str = ""
    retry_after: Optional[int] = None

    @classmethod
    def from_headers(cls, headers: Any) -> "RateLimitSnapshot":
        """Build a snapshot from a case-insensitive header mapping."""
        return cls(
            limit_requests=_parse_int(headers.get("x-ratelimit-limit-requests")),
            limit_tokens=_parse_int(headers.get("x-ratelimit-limit-tokens")),
            remaining_requests=_parse_int(headers.get("x-ratelimit-remaining-requests")),
            remaining_tokens=_parse_int(headers.get("x-ratelimit-remaining-tokens")),
            reset_requests=headers.get("x-ratelimit-reset-requests") or "",
            reset_tokens=headers.get("x-ratelimit-reset-tokens") or "",
            retry_after=_parse_int(headers.get("retry-after"), default=None),
        )

    def to_response(self) -> dict:
        """Shape used by the public API envelope."""
        return {
            "requests": {
                "limit": self.limit_requests,
                "remaining": self.remaining_requests,
                "reset": self.reset_requests,
            },
            "tokens": {
                "limit": self.limit_tokens,
                "remaining": self.remaining_tokens,
                "reset": self.reset_tokens,
            },
            "retryAfter": self.retry_after,
        }


class LLMResponse(BaseModel):
    """Standardized LLM response."""
    content: str
    model: str
    rate_limits: RateLimitSnapshot
    usage: Optional[TokenUsage] = None


class CompletionStream:
    """
    Async iterator over the content fragments of a streamed completion.

    Fragments are yielded in arrival order. Closing the stream (explicitly,
    through ``async with``, or by exhausting it) releases the upstream
    connection exactly once.
    """

    def __init__(
        self,
        fragments: AsyncIterator[str],
        model: str,
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self._fragments = fragments
        self._on_close = on_close
        self._closed = False
        self.model = model

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "CompletionStream":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        try:
            return await self._fragments.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise

    async def aclose(self) -> None:
        """Release the upstream stream."""
        if self._closed:
            return
        self._closed = True
        try:
            aclose = getattr(self._fragments, "aclose", None)
            if aclose is not None:
                await aclose()
        finally:
            if self._on_close is not None:
                await self._on_close()

    async def __aenter__(self) -> "CompletionStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate completion from messages."""
        pass

    @abstractmethod
    async def stream_generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> CompletionStream:
        """Open a streamed completion from messages."""
        pass

    async def close(self) -> None:
        """Release network resources."""
        pass


def translate_upstream_error(error: openai.APIError) -> InferenceError:
    """Map an SDK error onto the application's typed failures."""
    if isinstance(error, openai.RateLimitError):
        retry_after = _parse_int(error.response.headers.get("retry-after"), default=None)
        message = "Rate limit exceeded."
        if retry_after is not None:
            message = f"{message} Retry after {retry_after} seconds."
        return UpstreamRateLimitError(message, retry_after=retry_after)

    status_code = getattr(error, "status_code", None)
    return InferenceError(f"Agent processing failed: {error.message}", status_code=status_code)


class GroqClient(BaseLLMClient):
    """
    Groq chat-completion client over its OpenAI-compatible API.

    SDK-level retries are disabled: a 429 surfaces immediately as
    UpstreamRateLimitError and retry policy belongs to the caller.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or settings.groq_base_url,
            max_retries=0,
            http_client=http_client,
        )

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate completion using the Groq API."""
        temperature = temperature if temperature is not None else settings.llm_temperature
        max_tokens = max_tokens or settings.llm_max_tokens

        logger.debug("Groq request", model=model, message_count=len(messages))

        try:
            raw = await self.client.chat.completions.with_raw_response.create(
                model=model,
                messages=[m.model_dump() for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
                stream=False,
            )
        except openai.APIError as e:
            raise translate_upstream_error(e) from e

        completion = raw.parse()
        usage = None
        if completion.usage is not None:
            usage = TokenUsage(
                prompt=completion.usage.prompt_tokens,
                completion=completion.usage.completion_tokens,
                total=completion.usage.total_tokens,
            )

        return LLMResponse(
            content=completion.choices[0].message.content or "",
            model=model,
            rate_limits=RateLimitSnapshot.from_headers(raw.headers),
            usage=usage,
        )

    async def stream_generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> CompletionStream:
        """Stream completion using the Groq API."""
        temperature = temperature if temperature is not None else settings.llm_temperature
        max_tokens = max_tokens or settings.llm_max_tokens

        logger.debug("Groq stream request", model=model, message_count=len(messages))

        try:
            stream = await self.client.chat.completions.create(
                model=model,
                messages=[m.model_dump() for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
                stream=True,
            )
        except openai.APIError as e:
            raise translate_upstream_error(e) from e

        async def _fragments() -> AsyncIterator[str]:
            try:
                async for chunk in stream:
                    if chunk.choices and chunk.choices[0].delta.content:
                        yield chunk.choices[0].delta.content
            except openai.APIError as e:
                raise translate_upstream_error(e) from e

        return CompletionStream(_fragments(), model=model, on_close=stream.close)

    async def close(self) -> None:
        await self.client.close()
