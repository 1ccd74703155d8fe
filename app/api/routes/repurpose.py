"""
Content repurposing API routes.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.api.deps import (
    AuthenticatedUser,
    get_current_user,
    get_profile_service,
    get_repurpose_service,
)
from app.core.exceptions import UpstreamRateLimitError
from app.services import ProfileService, RepurposeService
from app.services.repurpose_service import RepurposeRequest, RepurposeResult
from app.utils.prompts import Platform

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["repurpose"])


class SourcePost(BaseModel):
    text: str = Field(..., min_length=10)


class ProcessPostRequest(BaseModel):
    """Request to repurpose and queue a post."""
    post: SourcePost
    platforms: Optional[list[Platform]] = None


@router.post("/repurpose")
async def repurpose(
    request: RepurposeRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
    service: RepurposeService = Depends(get_repurpose_service),
) -> dict:
    """
    Repurpose content for Facebook, Instagram and/or Twitter.

    The caller's style profile personalises the output once onboarding is
    complete.
    """
    logger.info(
        "Repurpose request",
        user_id=user.uid,
        platforms=[platform.value for platform in request.platforms],
        text_length=len(request.text),
    )
    profile = await profiles.get_profile(user.uid)

    try:
        result: RepurposeResult = await service.repurpose(request, profile)
    except UpstreamRateLimitError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e))

    return {"success": True, "data": result.model_dump(mode="json")}


@router.post("/process-post")
async def process_post(
    request: ProcessPostRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: RepurposeService = Depends(get_repurpose_service),
) -> dict:
    """Repurpose a post and queue it for the next Tuesday and Friday slots."""
    logger.info("Process post request", user_id=user.uid)
    try:
        post = await service.process_post(request.post.text, request.platforms)
    except UpstreamRateLimitError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e))

    return {"success": True, "data": post.to_dict()}
