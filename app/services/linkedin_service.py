"""
LinkedIn integration: OAuth, profile, recent posts and sharing.

Access tokens belong to the caller and are passed into each call; the
service itself only holds app credentials and a shared HTTP client.
"""

import secrets
import time
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
import structlog
from pydantic import BaseModel

from app.core.exceptions import LinkedInAPIError

logger = structlog.get_logger(__name__)


AUTHORIZATION_URL = "https://www.linkedin.com/oauth/v2/authorization"
TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
USERINFO_URL = "https://api.linkedin.com/v2/userinfo"
UGC_POSTS_URL = "https://api.linkedin.com/v2/ugcPosts"

SCOPES = ("openid", "profile", "email")

PLACEHOLDER_POST_TEXT = (
    "This is a sample LinkedIn post. In a production environment, this would be fetched "
    "from LinkedIn's API with proper permissions and API access."
)


class LinkedInPost(BaseModel):
    id: str
    text: str
    timestamp: str
    author_name: str
    author_id: str


def _author_name(profile: dict[str, Any]) -> str:
    if profile.get("name"):
        return profile["name"]
    full = " ".join(part for part in (profile.get("given_name"), profile.get("family_name")) if part)
    return full or "LinkedIn User"


class LinkedInService:
    """Thin async client for the LinkedIn REST endpoints used by the app."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.AsyncClient,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.http = http_client

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _require_credentials(self) -> None:
        if not self.configured:
            raise LinkedInAPIError("LinkedIn credentials not found in environment variables")

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """URL the user is redirected to for consent."""
        self._require_credentials()
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": state or secrets.token_urlsafe(8),
            "scope": " ".join(SCOPES),
        }
        return f"{AUTHORIZATION_URL}?{urlencode(params)}"

    async def exchange_code_for_token(self, code: str) -> str:
        """
        Exchange an authorization code for an access token.

        Raises:
            LinkedInAPIError: LinkedIn rejected the code or was unreachable
        """
        self._require_credentials()
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        try:
            response = await self.http.post(TOKEN_URL, data=data)
            response.raise_for_status()
            token = response.json().get("access_token")
        except httpx.HTTPStatusError as e:
            logger.error(
                "LinkedIn token exchange failed",
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise LinkedInAPIError(
                "Failed to exchange authorization code for access token",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("Could not reach LinkedIn", error=str(e))
            raise LinkedInAPIError("Failed to exchange authorization code for access token") from e

        if not token:
            raise LinkedInAPIError("Failed to exchange authorization code for access token")
        return token

    async def get_user_profile(self, access_token: str) -> dict[str, Any]:
        """OpenID userinfo for the token owner."""
        headers = {"Authorization": f"Bearer {access_token}", "cache-control": "no-cache"}
        try:
            response = await self.http.get(USERINFO_URL, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "LinkedIn profile request failed",
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise LinkedInAPIError("Failed to fetch user profile", status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error("Could not reach LinkedIn", error=str(e))
            raise LinkedInAPIError("Failed to fetch user profile") from e
        return response.json()

    async def get_recent_posts(self, access_token: str, limit: int = 10) -> list[LinkedInPost]:
        """
        Recent posts of the token owner.

        Member post reads need partner API access, so this returns a single
        placeholder post attributed to the authenticated member.
        """
        logger.warning("LinkedIn post access requires partner permissions; returning placeholder", limit=limit)
        try:
            profile = await self.get_user_profile(access_token)
        except LinkedInAPIError as e:
            raise LinkedInAPIError("Failed to fetch recent posts from LinkedIn", status_code=e.status_code) from e

        post = LinkedInPost(
            id=f"linkedin-{int(time.time() * 1000)}",
            text=PLACEHOLDER_POST_TEXT,
            timestamp=datetime.now(timezone.utc).isoformat(),
            author_name=_author_name(profile),
            author_id=profile.get("sub") or profile.get("id") or "unknown",
        )
        return [post][:max(limit, 0)]

    async def share_post(self, access_token: str, text: str) -> dict[str, Any]:
        """Publish a text-only UGC post as the token owner."""
        profile = await self.get_user_profile(access_token)
        person_id = profile.get("sub") or profile.get("id")
        share_data = {
            "author": f"urn:li:person:{person_id}",
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": text},
                    "shareMediaCategory": "NONE",
                }
            },
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
        }
        headers = {
            "Authorization": f"Bearer {access_token}",
            "X-Restli-Protocol-Version": "2.0.0",
        }
        try:
            response = await self.http.post(UGC_POSTS_URL, json=share_data, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("LinkedIn share failed", status_code=e.response.status_code, body=e.response.text[:500])
            raise LinkedInAPIError("Failed to share post on LinkedIn", status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error("Could not reach LinkedIn", error=str(e))
            raise LinkedInAPIError("Failed to share post on LinkedIn") from e

        logger.info("Shared post on LinkedIn", author=share_data["author"])
        return response.json() if response.content else {}
