"""
Repurpose Service.

Turns one piece of source content into platform-specific posts, and queues
repurposed posts for the next publishing slots.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from app.agents.multimodal import ImageInput, InferenceRequest, MultimodalAgent
from app.core.database import Database
from app.core.exceptions import InferenceError, UpstreamRateLimitError
from app.models.post import PostStatus, RepurposedPost
from app.models.style_profile import StyleProfile
from app.utils.formatters import GeneratedContent, format_platform_post
from app.utils.prompts import Platform, build_system_prompt

logger = structlog.get_logger(__name__)


# Publishing slots in UTC (08:30 and 19:00 West Africa Time)
TUESDAY_SLOT = (1, 7, 30)  # weekday, hour, minute
FRIDAY_SLOT = (4, 18, 0)


class RepurposeRequest(BaseModel):
    """Source content and targeting options."""
    text: str = Field(..., min_length=10)
    images: list[str] = Field(default_factory=list)
    platforms: list[Platform] = Field(default_factory=lambda: list(Platform))
    target_audience: Optional[str] = None
    brand_voice: Optional[str] = None
    additional_context: Optional[str] = None


class RepurposeMetadata(BaseModel):
    generated_at: datetime
    platforms_processed: int
    total_characters: int


class RepurposeResult(BaseModel):
    original: str
    results: list[GeneratedContent]
    metadata: RepurposeMetadata


def build_context_prompt(
    text: str,
    platform: Platform,
    target_audience: Optional[str] = None,
    brand_voice: Optional[str] = None,
) -> str:
    """Per-platform framing of the source content."""
    lines = []
    if target_audience:
        lines.append(f"Target Audience: {target_audience}")
    if brand_voice:
        lines.append(f"Brand Voice: {brand_voice}")
    lines.append(f"Original Content: {text}")
    lines.append(f"Please repurpose this content for {platform.value} following the guidelines provided.")
    return "\n\n".join(lines)


def _next_weekly_slot(now: datetime, weekday: int, hour: int, minute: int) -> datetime:
    days_ahead = (weekday - now.weekday()) % 7
    slot = (now + timedelta(days=days_ahead)).replace(hour=hour, minute=minute, second=0, microsecond=0)
    if now >= slot:
        slot += timedelta(days=7)
    return slot


def next_posting_slots(now: Optional[datetime] = None) -> list[datetime]:
    """
    Next Tuesday 07:30 UTC and next Friday 18:00 UTC after ``now``.

    A slot that is today but already passed rolls over to next week.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return [
        _next_weekly_slot(now, *TUESDAY_SLOT),
        _next_weekly_slot(now, *FRIDAY_SLOT),
    ]


class RepurposeService:
    """Generates platform variants through the multimodal agent."""

    def __init__(self, agent: MultimodalAgent, db: Database):
        self.agent = agent
        self.db = db

    async def generate_for_platform(
        self,
        request: RepurposeRequest,
        platform: Platform,
        profile: Optional[StyleProfile] = None,
    ) -> GeneratedContent:
        """Generate one platform variant; upstream errors propagate."""
        system_prompt = build_system_prompt(platform, request.additional_context, profile)
        context_prompt = build_context_prompt(
            request.text,
            platform,
            target_audience=request.target_audience,
            brand_voice=request.brand_voice,
        )
        inference = InferenceRequest(
            prompt=system_prompt,
            text=request.text,
            images=[ImageInput(url=url) for url in request.images],
            context={"prompt": context_prompt},
        )
        result = await self.agent.process(inference)
        return format_platform_post(platform.value, result.content)

    async def repurpose(
        self,
        request: RepurposeRequest,
        profile: Optional[StyleProfile] = None,
    ) -> RepurposeResult:
        """
        Generate content for every requested platform.

        The profile is only applied once the user is onboarded. A platform
        that fails with a generic inference error is skipped; rate-limit
        errors stop the whole run.

        Raises:
            UpstreamRateLimitError: upstream quota exhausted
        """
        active_profile = profile if profile and profile.onboarding_completed else None
        results: list[GeneratedContent] = []

        for platform in request.platforms:
            try:
                results.append(await self.generate_for_platform(request, platform, active_profile))
            except UpstreamRateLimitError:
                raise
            except InferenceError as e:
                logger.error("Platform generation failed", platform=platform.value, error=str(e))

        logger.info(
            "Repurposed content",
            platforms_requested=len(request.platforms),
            platforms_processed=len(results),
            personalized=active_profile is not None,
        )

        return RepurposeResult(
            original=request.text,
            results=results,
            metadata=RepurposeMetadata(
                generated_at=datetime.now(timezone.utc),
                platforms_processed=len(results),
                total_characters=sum(item.character_count for item in results),
            ),
        )

    async def process_post(
        self,
        text: str,
        platforms: Optional[list[Platform]] = None,
        now: Optional[datetime] = None,
    ) -> RepurposedPost:
        """
        Repurpose a source post and queue it for the next publishing slots.

        Args:
            text: Source post text
            platforms: Target platforms (all when omitted)
            now: Clock override for slot computation

        Returns:
            The persisted queued post
        """
        platforms = platforms or list(Platform)
        result = await self.repurpose(RepurposeRequest(text=text, platforms=platforms))
        slots = next_posting_slots(now)

        post = RepurposedPost(
            id=str(uuid.uuid4()),
            original={"text": text, "timestamp": datetime.now(timezone.utc).isoformat()},
            variants={item.platform: item.content for item in result.results},
            scheduled_at=[slot.isoformat() for slot in slots],
            platforms=[platform.value for platform in platforms],
            status=PostStatus.QUEUED.value,
        )
        async with self.db.session() as session:
            session.add(post)
            await session.commit()

        logger.info("Queued repurposed post", post_id=post.id, scheduled_at=post.scheduled_at)
        return post
