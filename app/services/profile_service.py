"""
Profile Service.

Loads, updates and learns into per-user style profiles. Every
read-modify-write runs inside one transaction holding a row lock on the
profile, so concurrent feedback for the same user is applied in sequence.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Database
from app.core.exceptions import ProfileNotFoundError
from app.models.style_profile import (
    AnalyzedPatterns,
    ProfileUpdate,
    StyleProfile,
    VocabularyLevel,
    apply_profile_update,
)
from app.models.user_style_profile import UserStyleProfile
from app.services import style_engine
from app.services.style_analysis import StyleAnalysis

logger = structlog.get_logger(__name__)


class ProfileService:
    """Persistence and learning for StyleProfile documents."""

    def __init__(self, db: Database):
        self.db = db

    async def _load_for_update(self, session: AsyncSession, user_id: str) -> Optional[UserStyleProfile]:
        stmt = select(UserStyleProfile).where(UserStyleProfile.user_id == user_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _mutate(self, user_id: str, change: Callable[[StyleProfile], None]) -> StyleProfile:
        """Apply ``change`` to the stored profile under a row lock and commit."""
        async with self.db.session() as session:
            row = await self._load_for_update(session, user_id)
            if row is None:
                raise ProfileNotFoundError(user_id)

            profile = row.to_profile()
            change(profile)
            row.store(profile)
            await session.commit()
            return profile

    async def get_profile(self, user_id: str) -> Optional[StyleProfile]:
        """Return the stored profile or None."""
        async with self.db.session() as session:
            row = await session.get(UserStyleProfile, user_id)
            return row.to_profile() if row else None

    async def get_or_create(self, user_id: str, email: str = "", name: str = "") -> StyleProfile:
        """
        Fetch a user's profile, creating a default one on first access.

        Two first requests for the same user may race to insert; the loser
        rolls back and reads the winner's row.

        Args:
            user_id: External (Firebase) user id
            email: Email from the identity token
            name: Display name from the identity token

        Returns:
            StyleProfile with completion recomputed
        """
        try:
            return await self._load_or_insert(user_id, email, name)
        except IntegrityError:
            logger.info("Style profile created concurrently", user_id=user_id)
            return await self._load_or_insert(user_id, email, name)

    async def _load_or_insert(self, user_id: str, email: str, name: str) -> StyleProfile:
        async with self.db.session() as session:
            row = await self._load_for_update(session, user_id)
            if row is None:
                profile = StyleProfile(user_id=user_id, email=email, name=name)
                style_engine.calculate_completion(profile)
                row = UserStyleProfile(user_id=user_id)
                row.store(profile)
                session.add(row)
                await session.commit()
                logger.info("Created style profile", user_id=user_id)
                return profile

            profile = row.to_profile()
            style_engine.calculate_completion(profile)
            row.store(profile)
            await session.commit()
            return profile

    async def update_profile(
        self,
        user_id: str,
        update: ProfileUpdate,
        email: str = "",
    ) -> StyleProfile:
        """Apply a partial update, creating the profile if needed."""
        await self.get_or_create(user_id, email=email)

        def change(profile: StyleProfile) -> None:
            apply_profile_update(profile, update)
            style_engine.calculate_completion(profile)

        profile = await self._mutate(user_id, change)
        logger.info(
            "Updated style profile",
            user_id=user_id,
            profile_completion=profile.profile_completion,
            onboarding_completed=profile.onboarding_completed,
        )
        return profile

    async def record_feedback(
        self,
        user_id: str,
        generated_content: str,
        satisfaction: int,
        platform: Optional[str] = None,
        content_type: Optional[str] = None,
        user_edit: Optional[str] = None,
    ) -> StyleProfile:
        """
        Record feedback for an existing user.

        Raises:
            ProfileNotFoundError: the user has no profile yet
            FeedbackValidationError: invalid content or rating
        """

        def change(profile: StyleProfile) -> None:
            style_engine.record_feedback(
                profile,
                generated_content=generated_content,
                satisfaction=satisfaction,
                platform=platform,
                content_type=content_type,
                user_edit=user_edit,
            )

        profile = await self._mutate(user_id, change)
        logger.info(
            "Recorded feedback",
            user_id=user_id,
            satisfaction=satisfaction,
            style_consistency_score=profile.preferences.style_consistency_score,
            total_feedbacks=len(profile.preferences.feedback_data),
        )
        return profile

    async def apply_style_analysis(
        self,
        user_id: str,
        sample_posts: list[str],
        analysis: StyleAnalysis,
        email: str = "",
    ) -> StyleProfile:
        """Store sample posts and the AI analysis on the profile."""
        await self.get_or_create(user_id, email=email)

        def change(profile: StyleProfile) -> None:
            profile.sample_content.original_posts = list(sample_posts)
            profile.sample_content.analyzed_patterns = AnalyzedPatterns(
                average_length=analysis.average_length,
                common_phrases=analysis.common_phrases,
                sentence_structure=analysis.sentence_structure,
                vocabulary_level=analysis.vocabulary_level or VocabularyLevel.INTERMEDIATE,
                style_notes=analysis.style_notes,
            )

            writing = profile.writing_style
            if analysis.tone:
                writing.tone = analysis.tone
            if analysis.personality:
                writing.personality = analysis.personality
            if analysis.formality_level:
                writing.formality_level = analysis.formality_level
            if analysis.humor_style:
                writing.humor_style = analysis.humor_style

            if analysis.brand_adjectives:
                profile.brand_voice.adjectives = analysis.brand_adjectives
            if analysis.content_themes:
                profile.content_preferences.topics = analysis.content_themes

            profile.preferences.last_analyzed = datetime.now(timezone.utc)
            style_engine.calculate_completion(profile)

        profile = await self._mutate(user_id, change)
        logger.info("Applied style analysis", user_id=user_id, sample_count=len(sample_posts))
        return profile
