"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator, Optional, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.agents.multimodal import MultimodalAgent
from app.api.deps import (
    AuthenticatedUser,
    get_agent,
    get_current_user,
    get_linkedin_service,
    get_profile_service,
    get_repurpose_service,
)
from app.api.main import app
from app.core.database import Database
from app.core.llm_clients import (
    BaseLLMClient,
    CompletionStream,
    LLMMessage,
    LLMResponse,
    RateLimitSnapshot,
    TokenUsage,
)
from app.services import LinkedInService, ProfileService, RepurposeService


class FakeLLMClient(BaseLLMClient):
    """
    In-memory LLM client.

    ``responses`` is consumed one item per generate() call: a string is
    returned as content, an exception is raised. When it runs out,
    ``content`` is returned.
    """

    def __init__(
        self,
        content: str = "Generated content #ai",
        responses: Optional[list[Union[str, Exception]]] = None,
        fragments: Optional[list[str]] = None,
        error: Optional[Exception] = None,
    ):
        self.content = content
        self.responses = list(responses or [])
        self.fragments = fragments if fragments is not None else ["Hello", ", ", "world"]
        self.error = error
        self.calls: list[dict] = []
        self.streams: list[CompletionStream] = []
        self.closed_streams = 0

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        self.calls.append({"messages": messages, "model": model, "stream": False})
        if self.error is not None:
            raise self.error

        content = self.content
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, Exception):
                raise item
            content = item

        return LLMResponse(
            content=content,
            model=model,
            rate_limits=RateLimitSnapshot(
                limit_requests=30,
                limit_tokens=6000,
                remaining_requests=29,
                remaining_tokens=5900,
                reset_requests="2s",
                reset_tokens="1s",
            ),
            usage=TokenUsage(prompt=12, completion=8, total=20),
        )

    async def stream_generate(
        self,
        messages: list[LLMMessage],
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> CompletionStream:
        self.calls.append({"messages": messages, "model": model, "stream": True})
        if self.error is not None:
            raise self.error

        fragments = list(self.fragments)

        async def _fragments():
            for fragment in fragments:
                yield fragment

        async def _on_close():
            self.closed_streams += 1

        stream = CompletionStream(_fragments(), model=model, on_close=_on_close)
        self.streams.append(stream)
        return stream


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def agent(fake_llm: FakeLLMClient) -> MultimodalAgent:
    return MultimodalAgent(fake_llm)


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """SQLite database with all tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def profile_service(database: Database) -> ProfileService:
    return ProfileService(database)


@pytest.fixture
def repurpose_service(agent: MultimodalAgent, database: Database) -> RepurposeService:
    return RepurposeService(agent, database)


def linkedin_handler(request: httpx.Request) -> httpx.Response:
    """Canned LinkedIn API responses."""
    if request.url.path == "/oauth/v2/accessToken":
        return httpx.Response(200, json={"access_token": "li-token", "expires_in": 5184000})
    if request.url.path == "/v2/userinfo":
        if request.headers.get("Authorization") != "Bearer li-token":
            return httpx.Response(401, json={"message": "Invalid access token"})
        return httpx.Response(
            200,
            json={"sub": "abc123", "name": "Ada Lovelace", "email": "ada@example.com"},
        )
    if request.url.path == "/v2/ugcPosts":
        return httpx.Response(201, json={"id": "urn:li:share:1"})
    return httpx.Response(404)


@pytest_asyncio.fixture
async def linkedin_service() -> AsyncGenerator[LinkedInService, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(linkedin_handler)) as http:
        yield LinkedInService(
            client_id="client-id",
            client_secret="client-secret",
            redirect_uri="http://test/api/auth/linkedin/callback",
            http_client=http,
        )


@pytest.fixture
def mock_user() -> AuthenticatedUser:
    """Return mock authenticated user for testing."""
    return AuthenticatedUser(uid="test-user-001", email="test@example.com", name="Test User")


@pytest_asyncio.fixture
async def client(
    agent: MultimodalAgent,
    profile_service: ProfileService,
    repurpose_service: RepurposeService,
    linkedin_service: LinkedInService,
    mock_user: AuthenticatedUser,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with services overridden."""
    app.dependency_overrides[get_agent] = lambda: agent
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_repurpose_service] = lambda: repurpose_service
    app.dependency_overrides[get_linkedin_service] = lambda: linkedin_service
    app.dependency_overrides[get_current_user] = lambda: mock_user

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_repurpose_request() -> dict:
    """Return sample repurpose request."""
    return {
        "text": "We just shipped offline mode for our note-taking app.",
        "platforms": ["twitter", "facebook"],
        "target_audience": "Busy professionals",
    }
