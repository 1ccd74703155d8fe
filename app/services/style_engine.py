"""
Adaptive Style-Preference Engine.

Updates a StyleProfile from two signals:
- explicit feedback (satisfaction score + optional hand edit)
- the edit-diff heuristic comparing generated text with the user's edit

Everything here is pure and synchronous; persistence is the caller's job
(see ProfileService).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog

from app.core.exceptions import FeedbackValidationError
from app.models.style_profile import (
    DEFAULT_TONE,
    FeedbackEntry,
    FormalityLevel,
    HashtagStyle,
    StyleProfile,
)

logger = structlog.get_logger(__name__)


FEEDBACK_LOG_LIMIT = 50
CONSISTENCY_WINDOW = 10
ONBOARDING_THRESHOLD = 80

CASUAL_WORDS = ("hey", "awesome", "cool", "super", "really", "totally", "wow")
FORMAL_WORDS = ("therefore", "furthermore", "however", "consequently", "accordingly")

# Only these three levels are moved by edits; the extremes are user-set.
ADAPTIVE_FORMALITY_SCALE = (
    FormalityLevel.FORMAL,
    FormalityLevel.SEMI_FORMAL,
    FormalityLevel.CASUAL,
)

COMPLETION_WEIGHTS = {
    "name": 10,
    "industry": 15,
    "target_audience": 15,
    "tone": 15,
    "topics": 15,
    "adjectives": 10,
    "sample_posts": 20,
}


class FormalityChange(str, Enum):
    MORE_CASUAL = "more_casual"
    MORE_FORMAL = "more_formal"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class EditSignals:
    """Differences between generated content and the user's edit."""
    hashtag_delta: int
    formality_change: FormalityChange
    question_delta: int


def _count_words(text: str, words: tuple[str, ...]) -> int:
    # Each listed word counts once, matched as a substring.
    lowered = text.lower()
    return sum(1 for word in words if word in lowered)


def detect_formality_change(original: str, edited: str) -> FormalityChange:
    """Classify the edit as more casual, more formal or neither."""
    casual_delta = _count_words(edited, CASUAL_WORDS) - _count_words(original, CASUAL_WORDS)
    formal_delta = _count_words(edited, FORMAL_WORDS) - _count_words(original, FORMAL_WORDS)

    if casual_delta > formal_delta:
        return FormalityChange.MORE_CASUAL
    if formal_delta > casual_delta:
        return FormalityChange.MORE_FORMAL
    return FormalityChange.NO_CHANGE


def analyze_edit(original: str, edited: str) -> EditSignals:
    """Compute edit signals from two strings."""
    return EditSignals(
        hashtag_delta=edited.count("#") - original.count("#"),
        formality_change=detect_formality_change(original, edited),
        question_delta=edited.count("?") - original.count("?"),
    )


def step_formality(level: FormalityLevel, change: FormalityChange) -> FormalityLevel:
    """Move one notch along the adaptive scale; ends and extremes stay put."""
    if change is FormalityChange.NO_CHANGE or level not in ADAPTIVE_FORMALITY_SCALE:
        return level

    index = ADAPTIVE_FORMALITY_SCALE.index(level)
    if change is FormalityChange.MORE_CASUAL:
        index = min(index + 1, len(ADAPTIVE_FORMALITY_SCALE) - 1)
    else:
        index = max(index - 1, 0)
    return ADAPTIVE_FORMALITY_SCALE[index]


def apply_edit_signals(profile: StyleProfile, signals: EditSignals, platform: str) -> StyleProfile:
    """Mutate platform and global style fields from edit signals."""
    platform_style = profile.platform_style(platform)
    if signals.hashtag_delta > 2:
        platform_style.hashtag_style = HashtagStyle.HEAVY
    elif signals.hashtag_delta < -1:
        platform_style.hashtag_style = HashtagStyle.MINIMAL

    profile.writing_style.formality_level = step_formality(
        profile.writing_style.formality_level, signals.formality_change
    )

    formats = profile.content_preferences.preferred_formats
    if signals.question_delta > 0 and "questions" not in formats:
        formats.append("questions")

    return profile


def record_feedback(
    profile: StyleProfile,
    generated_content: str,
    satisfaction: int,
    platform: Optional[str] = None,
    content_type: Optional[str] = None,
    user_edit: Optional[str] = None,
    now: Optional[datetime] = None,
) -> StyleProfile:
    """
    Append a feedback entry and re-derive learned preferences.

    Args:
        profile: Profile to update in place
        generated_content: Text the model produced
        satisfaction: Rating from 1 to 5
        platform: Platform the content targeted
        content_type: Kind of content ("post" when omitted)
        user_edit: The user's edited version, if any
        now: Timestamp override

    Returns:
        The same profile, updated

    Raises:
        FeedbackValidationError: empty content or rating outside 1-5
    """
    if not generated_content:
        raise FeedbackValidationError("Generated content and satisfaction rating are required")
    if isinstance(satisfaction, bool) or not isinstance(satisfaction, int) or not 1 <= satisfaction <= 5:
        raise FeedbackValidationError("Satisfaction must be an integer between 1 and 5")

    platform = platform or "unknown"
    entry = FeedbackEntry(
        generated_content=generated_content,
        user_edit=user_edit or "",
        satisfaction=satisfaction,
        platform=platform,
        content_type=content_type or "post",
        timestamp=now or datetime.now(timezone.utc),
    )

    preferences = profile.preferences
    preferences.feedback_data.append(entry)
    if len(preferences.feedback_data) > FEEDBACK_LOG_LIMIT:
        preferences.feedback_data = preferences.feedback_data[-FEEDBACK_LOG_LIMIT:]

    recent = preferences.feedback_data[-CONSISTENCY_WINDOW:]
    average = sum(item.satisfaction for item in recent) / len(recent)
    # Round half up
    preferences.style_consistency_score = int(average * 20 + 0.5)

    if user_edit and user_edit != generated_content:
        signals = analyze_edit(generated_content, user_edit)
        apply_edit_signals(profile, signals, platform)
        logger.debug(
            "Applied edit signals",
            user_id=profile.user_id,
            platform=platform,
            hashtag_delta=signals.hashtag_delta,
            formality_change=signals.formality_change.value,
        )

    return profile


def calculate_completion(profile: StyleProfile) -> int:
    """
    Score how complete a profile is (0-100) and flag onboarding at 80.

    The onboarding flag is only ever set here, never cleared.
    """
    checks = {
        "name": bool(profile.name),
        "industry": bool(profile.brand_voice.industry),
        "target_audience": bool(profile.brand_voice.target_audience),
        "tone": profile.writing_style.tone != DEFAULT_TONE,
        "topics": bool(profile.content_preferences.topics),
        "adjectives": bool(profile.brand_voice.adjectives),
        "sample_posts": bool(profile.sample_content.original_posts),
    }
    completion = sum(COMPLETION_WEIGHTS[key] for key, present in checks.items() if present)

    profile.profile_completion = completion
    if completion >= ONBOARDING_THRESHOLD:
        profile.onboarding_completed = True
    return completion
