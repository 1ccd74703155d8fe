"""
LinkedIn OAuth, post-retrieval and sharing routes.
"""

import json
from typing import Optional
from urllib.parse import urlencode

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from app.api.deps import get_linkedin_service, get_linkedin_token
from app.core.config import settings
from app.core.exceptions import LinkedInAPIError
from app.services import LinkedInService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["linkedin"])


def _linkedin_http_error(error: LinkedInAPIError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))


@router.get("/auth/linkedin/authorize")
async def authorize(
    linkedin: LinkedInService = Depends(get_linkedin_service),
) -> RedirectResponse:
    """Redirect the user to LinkedIn's consent screen."""
    try:
        url = linkedin.get_authorization_url()
    except LinkedInAPIError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return RedirectResponse(url)


@router.get("/auth/linkedin/callback")
async def callback(
    code: Optional[str] = None,
    error: Optional[str] = None,
    linkedin: LinkedInService = Depends(get_linkedin_service),
) -> RedirectResponse:
    """Exchange the authorization code and hand the token to the dashboard."""
    if error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"LinkedIn authorization failed: {error}",
        )
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Authorization code not provided",
        )

    try:
        access_token = await linkedin.exchange_code_for_token(code)
        profile = await linkedin.get_user_profile(access_token)
    except LinkedInAPIError as e:
        raise _linkedin_http_error(e)

    logger.info("LinkedIn connected", linkedin_id=profile.get("sub"))
    params = urlencode({
        "access_token": access_token,
        "profile": json.dumps(profile),
        "linkedin_connected": "true",
    })
    return RedirectResponse(f"{settings.public_base_url}{settings.dashboard_path}?{params}")


@router.get("/linkedin/posts")
async def linkedin_posts(
    limit: int = Query(default=10, ge=1, le=50),
    access_token: str = Depends(get_linkedin_token),
    linkedin: LinkedInService = Depends(get_linkedin_service),
) -> dict:
    """Recent posts of the connected LinkedIn member."""
    try:
        posts = await linkedin.get_recent_posts(access_token, limit)
    except LinkedInAPIError as e:
        raise _linkedin_http_error(e)

    return {
        "success": True,
        "data": {"posts": [post.model_dump() for post in posts], "count": len(posts)},
    }


@router.get("/pull-linkedin")
async def pull_linkedin(
    limit: int = Query(default=5, ge=1, le=50),
    access_token: str = Depends(get_linkedin_token),
    linkedin: LinkedInService = Depends(get_linkedin_service),
) -> dict:
    """Pull recent LinkedIn posts as repurposing candidates."""
    try:
        posts = await linkedin.get_recent_posts(access_token, limit)
    except LinkedInAPIError as e:
        raise _linkedin_http_error(e)

    if not posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No recent posts found on LinkedIn",
        )

    return {
        "success": True,
        "data": {"posts": [post.model_dump() for post in posts], "count": len(posts)},
    }


class ShareRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=3000)


@router.post("/linkedin/share")
async def share_on_linkedin(
    request: ShareRequest,
    access_token: str = Depends(get_linkedin_token),
    linkedin: LinkedInService = Depends(get_linkedin_service),
) -> dict:
    """Publish a text post on the connected member's LinkedIn feed."""
    try:
        result = await linkedin.share_post(access_token, request.text)
    except LinkedInAPIError as e:
        raise _linkedin_http_error(e)

    return {"success": True, "data": {"id": result.get("id")}}
