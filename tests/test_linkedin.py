"""
LinkedIn service tests against a mocked HTTP transport.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.core.exceptions import LinkedInAPIError
from app.services import LinkedInService


def test_authorization_url(linkedin_service: LinkedInService):
    url = urlparse(linkedin_service.get_authorization_url(state="xyz"))
    params = parse_qs(url.query)

    assert url.netloc == "www.linkedin.com"
    assert params["scope"] == ["openid profile email"]
    assert params["state"] == ["xyz"]
    assert params["redirect_uri"] == ["http://test/api/auth/linkedin/callback"]


@pytest.mark.asyncio
async def test_missing_credentials_rejected():
    async with httpx.AsyncClient() as http:
        service = LinkedInService("", "", "http://test/callback", http)
        with pytest.raises(LinkedInAPIError):
            service.get_authorization_url()


@pytest.mark.asyncio
async def test_exchange_code_and_profile(linkedin_service: LinkedInService):
    token = await linkedin_service.exchange_code_for_token("auth-code")
    profile = await linkedin_service.get_user_profile(token)

    assert token == "li-token"
    assert profile["sub"] == "abc123"


@pytest.mark.asyncio
async def test_invalid_token_raises(linkedin_service: LinkedInService):
    with pytest.raises(LinkedInAPIError) as exc_info:
        await linkedin_service.get_user_profile("wrong")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_recent_posts_placeholder(linkedin_service: LinkedInService):
    posts = await linkedin_service.get_recent_posts("li-token", limit=5)

    assert len(posts) == 1
    assert posts[0].author_name == "Ada Lovelace"
    assert posts[0].author_id == "abc123"


@pytest.mark.asyncio
async def test_share_post(linkedin_service: LinkedInService):
    result = await linkedin_service.share_post("li-token", "Hello LinkedIn")
    assert result == {"id": "urn:li:share:1"}
