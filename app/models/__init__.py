"""Database models and profile documents"""

from app.models.user_style_profile import UserStyleProfile
from app.models.post import PostStatus, RepurposedPost
from app.models.style_profile import ProfileUpdate, StyleProfile

__all__ = [
    "UserStyleProfile",
    "RepurposedPost",
    "PostStatus",
    "StyleProfile",
    "ProfileUpdate",
]
