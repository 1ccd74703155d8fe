"""
StyleProfile document: a user's writing style, brand voice and feedback log.

Stored as a single JSON document per user (see user_style_profile.py) and
read back into these typed sections. Each section is its own model so that
partial updates touch only the fields they name.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Tone(str, Enum):
    """Global or per-platform writing tone."""
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    AUTHORITATIVE = "authoritative"
    CONVERSATIONAL = "conversational"
    HUMOROUS = "humorous"


class Personality(str, Enum):
    ENTHUSIASTIC = "enthusiastic"
    CALM = "calm"
    WITTY = "witty"
    INSPIRING = "inspiring"
    ANALYTICAL = "analytical"
    STORYTELLER = "storyteller"


class FormalityLevel(str, Enum):
    """Ordered from most formal to most casual."""
    VERY_FORMAL = "very-formal"
    FORMAL = "formal"
    SEMI_FORMAL = "semi-formal"
    CASUAL = "casual"
    VERY_CASUAL = "very-casual"


class HumorStyle(str, Enum):
    NONE = "none"
    SUBTLE = "subtle"
    WITTY = "witty"
    PLAYFUL = "playful"
    SARCASTIC = "sarcastic"


class BrandType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"
    NONPROFIT = "nonprofit"
    AGENCY = "agency"


class VocabularyLevel(str, Enum):
    SIMPLE = "simple"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class HashtagStyle(str, Enum):
    """Hashtag density preference."""
    MINIMAL = "minimal"
    MODERATE = "moderate"
    HEAVY = "heavy"


DEFAULT_TONE = Tone.PROFESSIONAL


class WritingStyle(BaseModel):
    tone: Tone = DEFAULT_TONE
    personality: Personality = Personality.CALM
    formality_level: FormalityLevel = FormalityLevel.SEMI_FORMAL
    humor_style: HumorStyle = HumorStyle.SUBTLE


class BrandVoice(BaseModel):
    adjectives: list[str] = Field(default_factory=list)  # ["innovative", "trustworthy"]
    values: list[str] = Field(default_factory=list)  # ["sustainability", "transparency"]
    target_audience: str = ""
    industry: str = ""
    brand_type: BrandType = BrandType.PERSONAL


class ContentPreferences(BaseModel):
    topics: list[str] = Field(default_factory=list)
    content_pillars: list[str] = Field(default_factory=list)
    preferred_formats: list[str] = Field(default_factory=list)  # ["tips", "stories", "questions"]
    avoid_topics: list[str] = Field(default_factory=list)


class PlatformStyle(BaseModel):
    """Per-platform override of the global style."""
    tone: Optional[str] = None
    style: Optional[str] = None
    hashtag_style: Optional[HashtagStyle] = None


def _default_platform_styles() -> dict[str, PlatformStyle]:
    return {
        "linkedin": PlatformStyle(hashtag_style=HashtagStyle.MODERATE),
        "twitter": PlatformStyle(hashtag_style=HashtagStyle.MODERATE),
        "instagram": PlatformStyle(hashtag_style=HashtagStyle.HEAVY),
        "facebook": PlatformStyle(hashtag_style=HashtagStyle.MINIMAL),
    }


class AnalyzedPatterns(BaseModel):
    """Patterns derived by the AI style analysis of sample posts."""
    average_length: Optional[int] = None
    common_phrases: list[str] = Field(default_factory=list)
    sentence_structure: str = ""
    vocabulary_level: Optional[VocabularyLevel] = None
    style_notes: str = ""


class SampleContent(BaseModel):
    original_posts: list[str] = Field(default_factory=list)
    analyzed_patterns: AnalyzedPatterns = Field(default_factory=AnalyzedPatterns)


class FeedbackEntry(BaseModel):
    generated_content: str
    user_edit: str = ""
    satisfaction: int = Field(..., ge=1, le=5)
    platform: str = "unknown"
    content_type: str = "post"
    timestamp: datetime


class Preferences(BaseModel):
    """Learning state: feedback log and derived consistency score."""
    feedback_data: list[FeedbackEntry] = Field(default_factory=list)
    style_consistency_score: int = 0
    last_analyzed: Optional[datetime] = None


class StyleProfile(BaseModel):
    """Complete per-user style profile document."""
    user_id: str
    email: str = ""
    name: str = ""

    profile_completion: int = 0
    onboarding_completed: bool = False

    writing_style: WritingStyle = Field(default_factory=WritingStyle)
    brand_voice: BrandVoice = Field(default_factory=BrandVoice)
    content_preferences: ContentPreferences = Field(default_factory=ContentPreferences)
    platform_styles: dict[str, PlatformStyle] = Field(default_factory=_default_platform_styles)
    sample_content: SampleContent = Field(default_factory=SampleContent)
    preferences: Preferences = Field(default_factory=Preferences)

    def platform_style(self, platform: str) -> PlatformStyle:
        """Return the platform override, creating an empty one if missing."""
        if platform not in self.platform_styles:
            self.platform_styles[platform] = PlatformStyle()
        return self.platform_styles[platform]


# =============================================================================
# PARTIAL UPDATES
# =============================================================================
# Every field is optional; only fields present in the request are applied.


class WritingStyleUpdate(BaseModel):
    tone: Optional[Tone] = None
    personality: Optional[Personality] = None
    formality_level: Optional[FormalityLevel] = None
    humor_style: Optional[HumorStyle] = None


class BrandVoiceUpdate(BaseModel):
    adjectives: Optional[list[str]] = None
    values: Optional[list[str]] = None
    target_audience: Optional[str] = None
    industry: Optional[str] = None
    brand_type: Optional[BrandType] = None


class ContentPreferencesUpdate(BaseModel):
    topics: Optional[list[str]] = None
    content_pillars: Optional[list[str]] = None
    preferred_formats: Optional[list[str]] = None
    avoid_topics: Optional[list[str]] = None


class PlatformStyleUpdate(BaseModel):
    tone: Optional[str] = None
    style: Optional[str] = None
    hashtag_style: Optional[HashtagStyle] = None


class SampleContentUpdate(BaseModel):
    original_posts: Optional[list[str]] = None


class ProfileUpdate(BaseModel):
    """Partial profile update submitted by the user."""
    name: Optional[str] = None
    writing_style: Optional[WritingStyleUpdate] = None
    brand_voice: Optional[BrandVoiceUpdate] = None
    content_preferences: Optional[ContentPreferencesUpdate] = None
    platform_styles: Optional[dict[str, PlatformStyleUpdate]] = None
    sample_content: Optional[SampleContentUpdate] = None


def _merge(section: BaseModel, patch: BaseModel) -> BaseModel:
    """
    Copy of ``section`` with the fields explicitly set in ``patch``.

    An explicit null resets the field to its default; omitted fields keep
    their current value.
    """
    if not patch.model_fields_set:
        return section

    fields = type(section).model_fields
    changes = {}
    for name in patch.model_fields_set:
        value = getattr(patch, name)
        if value is None:
            value = fields[name].get_default(call_default_factory=True)
        changes[name] = value
    return section.model_validate({**section.model_dump(), **changes})


def apply_profile_update(profile: StyleProfile, update: ProfileUpdate) -> StyleProfile:
    """Apply a partial update field by field; sibling fields are untouched."""
    if "name" in update.model_fields_set:
        profile.name = update.name or ""
    if update.writing_style is not None:
        profile.writing_style = _merge(profile.writing_style, update.writing_style)
    if update.brand_voice is not None:
        profile.brand_voice = _merge(profile.brand_voice, update.brand_voice)
    if update.content_preferences is not None:
        profile.content_preferences = _merge(profile.content_preferences, update.content_preferences)
    if update.platform_styles is not None:
        for platform, patch in update.platform_styles.items():
            profile.platform_styles[platform] = _merge(profile.platform_style(platform), patch)
    if update.sample_content is not None:
        profile.sample_content = _merge(profile.sample_content, update.sample_content)
    return profile
