"""
User style-profile API routes.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.agents.multimodal import MultimodalAgent
from app.api.deps import AuthenticatedUser, get_agent, get_current_user, get_profile_service
from app.core.exceptions import (
    FeedbackValidationError,
    InferenceError,
    ProfileNotFoundError,
    StyleAnalysisError,
    UpstreamRateLimitError,
)
from app.core.observability import capture_exception
from app.models.style_profile import ProfileUpdate, StyleProfile
from app.services import ProfileService
from app.services.style_analysis import analyze_writing_style

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/user", tags=["profile"])


class FeedbackRequest(BaseModel):
    """Feedback on one piece of generated content."""
    generated_content: str = ""
    user_edit: Optional[str] = None
    satisfaction: int
    platform: Optional[str] = None
    content_type: Optional[str] = None


class AnalyzeStyleRequest(BaseModel):
    sample_posts: list[str] = Field(default_factory=list)


def _profile_payload(profile: StyleProfile) -> dict:
    return {
        "profile": profile.model_dump(mode="json"),
        "profile_completion": profile.profile_completion,
        "onboarding_completed": profile.onboarding_completed,
    }


@router.get("/profile")
async def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> dict:
    """Fetch the caller's profile, creating a default one on first access."""
    profile = await profiles.get_or_create(user.uid, email=user.email, name=user.name)
    return {"success": True, "data": _profile_payload(profile)}


@router.put("/profile")
async def update_profile(
    update: ProfileUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> dict:
    """Apply a partial profile update; omitted fields are left as they are."""
    profile = await profiles.update_profile(user.uid, update, email=user.email)
    return {
        "success": True,
        "data": _profile_payload(profile),
        "message": "Profile updated successfully",
    }


@router.post("/feedback")
async def record_feedback(
    request: FeedbackRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> dict:
    """
    Record a satisfaction score and optional edit for generated content.

    Edits feed the style learner (hashtag density, formality, formats).
    """
    try:
        profile = await profiles.record_feedback(
            user.uid,
            generated_content=request.generated_content,
            satisfaction=request.satisfaction,
            platform=request.platform,
            content_type=request.content_type,
            user_edit=request.user_edit,
        )
    except FeedbackValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProfileNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "success": True,
        "data": {
            "feedback_recorded": True,
            "style_consistency_score": profile.preferences.style_consistency_score,
            "total_feedbacks": len(profile.preferences.feedback_data),
        },
        "message": "Feedback recorded successfully",
    }


@router.post("/analyze-style")
async def analyze_style(
    request: AnalyzeStyleRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
    agent: MultimodalAgent = Depends(get_agent),
) -> dict:
    """Analyse sample posts with the model and learn the profile from them."""
    if not request.sample_posts:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Sample posts are required for analysis",
        )

    try:
        analysis = await analyze_writing_style(agent, request.sample_posts)
    except UpstreamRateLimitError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e))
    except (StyleAnalysisError, InferenceError) as e:
        logger.error("Style analysis failed", user_id=user.uid, error=str(e))
        capture_exception(e, {"route": "user.analyze_style", "user_id": user.uid})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    profile = await profiles.apply_style_analysis(
        user.uid, request.sample_posts, analysis, email=user.email
    )
    return {
        "success": True,
        "data": {
            "analysis": analysis.model_dump(mode="json"),
            **_profile_payload(profile),
            "recommendations": analysis.recommended_improvements,
        },
        "message": "Style analysis completed successfully",
    }
