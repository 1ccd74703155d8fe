"""
UserStyleProfile model: stores one StyleProfile document per user.

user_id is the Firebase UID. The full profile lives in ``document``;
completion and onboarding are denormalised for querying.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.style_profile import StyleProfile

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class UserStyleProfile(Base):
    """Persisted style profile for a user."""

    __tablename__ = "user_style_profiles"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    document: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    profile_completion: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def to_profile(self) -> StyleProfile:
        """Load the stored document as a typed profile."""
        return StyleProfile.model_validate(self.document)

    def store(self, profile: StyleProfile) -> None:
        """Write a profile back into this row."""
        self.document = profile.model_dump(mode="json")
        self.email = profile.email
        self.profile_completion = profile.profile_completion
        self.onboarding_completed = profile.onboarding_completed

    def __repr__(self) -> str:
        return f"<UserStyleProfile(user_id={self.user_id}, completion={self.profile_completion})>"
