"""
RepurposedPost model: a source post with its generated platform variants
and the time slots it is queued for.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.user_style_profile import JSONDocument


class PostStatus(str, Enum):
    """Queue lifecycle status."""
    QUEUED = "queued"
    POSTED = "posted"
    FAILED = "failed"


class RepurposedPost(Base):
    """Queued repurposed post."""

    __tablename__ = "repurposed_posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    original: Mapped[dict] = mapped_column(JSONDocument, nullable=False)  # {text, timestamp}
    variants: Mapped[dict] = mapped_column(JSONDocument, nullable=False, default=dict)  # {platform: content}
    scheduled_at: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # ISO timestamps
    platforms: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(
        String(20), default=PostStatus.QUEUED.value, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def to_dict(self) -> dict:
        return {
            "post_id": self.id,
            "original": self.original,
            "variants": self.variants,
            "scheduled_at": self.scheduled_at,
            "status": self.status,
            "platforms": self.platforms,
        }

    def __repr__(self) -> str:
        return f"<RepurposedPost(id={self.id}, status={self.status})>"
