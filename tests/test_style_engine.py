"""
Style-preference engine tests.
"""

import pytest

from app.core.exceptions import FeedbackValidationError
from app.models.style_profile import (
    FormalityLevel,
    HashtagStyle,
    StyleProfile,
    Tone,
)
from app.services.style_engine import (
    FEEDBACK_LOG_LIMIT,
    FormalityChange,
    analyze_edit,
    calculate_completion,
    detect_formality_change,
    record_feedback,
    step_formality,
)


@pytest.fixture
def profile() -> StyleProfile:
    return StyleProfile(user_id="u1")


# ==================== Feedback log ====================


def test_feedback_log_is_bounded_fifo(profile: StyleProfile):
    for index in range(FEEDBACK_LOG_LIMIT + 7):
        record_feedback(profile, f"post {index}", satisfaction=3)

    log = profile.preferences.feedback_data
    assert len(log) == FEEDBACK_LOG_LIMIT
    assert log[0].generated_content == "post 7"
    assert log[-1].generated_content == f"post {FEEDBACK_LOG_LIMIT + 6}"


def test_consistency_uses_last_ten_entries(profile: StyleProfile):
    record_feedback(profile, "first", satisfaction=1)
    for _ in range(10):
        record_feedback(profile, "good", satisfaction=5)

    assert len(profile.preferences.feedback_data) == 11
    assert profile.preferences.style_consistency_score == 100


def test_consistency_score_rounds_mean(profile: StyleProfile):
    record_feedback(profile, "a", satisfaction=4)
    record_feedback(profile, "b", satisfaction=3)
    assert profile.preferences.style_consistency_score == 70


def test_consistency_score_rounds_half_up(profile: StyleProfile):
    # mean 4.125 scales to 82.5
    for satisfaction in [5, 5, 5, 5, 5, 4, 2, 2]:
        record_feedback(profile, "post", satisfaction=satisfaction)
    assert profile.preferences.style_consistency_score == 83


def test_feedback_defaults(profile: StyleProfile):
    record_feedback(profile, "content", satisfaction=4)
    entry = profile.preferences.feedback_data[0]
    assert entry.platform == "unknown"
    assert entry.content_type == "post"
    assert entry.user_edit == ""


@pytest.mark.parametrize("satisfaction", [0, 6, -1])
def test_feedback_rejects_out_of_range_rating(profile: StyleProfile, satisfaction: int):
    with pytest.raises(FeedbackValidationError):
        record_feedback(profile, "content", satisfaction=satisfaction)
    assert profile.preferences.feedback_data == []


def test_feedback_rejects_empty_content(profile: StyleProfile):
    with pytest.raises(FeedbackValidationError):
        record_feedback(profile, "", satisfaction=3)


# ==================== Edit-diff heuristic ====================


def test_added_hashtags_set_heavy(profile: StyleProfile):
    record_feedback(
        profile,
        "Great news!",
        satisfaction=4,
        platform="twitter",
        user_edit="Great news! #ai #tech #launch",
    )
    assert profile.platform_styles["twitter"].hashtag_style == HashtagStyle.HEAVY


def test_removed_hashtags_set_minimal(profile: StyleProfile):
    record_feedback(
        profile,
        "Launch #one #two #three",
        satisfaction=4,
        platform="instagram",
        user_edit="Launch #one",
    )
    assert profile.platform_styles["instagram"].hashtag_style == HashtagStyle.MINIMAL


def test_small_hashtag_change_keeps_preference(profile: StyleProfile):
    record_feedback(profile, "Hi", satisfaction=4, platform="twitter", user_edit="Hi #a #b")
    assert profile.platform_styles["twitter"].hashtag_style == HashtagStyle.MODERATE


def test_edit_on_new_platform_creates_entry(profile: StyleProfile):
    record_feedback(profile, "Hi", satisfaction=4, platform="threads", user_edit="Hi #a #b #c")
    assert profile.platform_styles["threads"].hashtag_style == HashtagStyle.HEAVY


def test_identical_edit_is_ignored(profile: StyleProfile):
    text = "Hey, this is awesome? #a #b #c"
    record_feedback(profile, "x", satisfaction=3)
    before = profile.model_copy(deep=True)
    record_feedback(profile, text, satisfaction=3, platform="twitter", user_edit=text)

    assert profile.platform_styles == before.platform_styles
    assert profile.writing_style == before.writing_style


def test_detect_formality_change():
    assert detect_formality_change("We launched.", "Hey, we launched, awesome!") == FormalityChange.MORE_CASUAL
    assert detect_formality_change("We launched.", "However, we launched; therefore...") == FormalityChange.MORE_FORMAL
    assert detect_formality_change("Hey there", "Hey you") == FormalityChange.NO_CHANGE


def test_casual_words_counted_once_each():
    # Repeating a word does not increase its count
    assert detect_formality_change("Hey", "Hey hey hey") == FormalityChange.NO_CHANGE


def test_formality_stepping_toward_casual(profile: StyleProfile):
    profile.writing_style.formality_level = FormalityLevel.FORMAL

    for expected in (FormalityLevel.SEMI_FORMAL, FormalityLevel.CASUAL, FormalityLevel.CASUAL):
        record_feedback(profile, "We launched.", satisfaction=4, user_edit="Hey, we launched!")
        assert profile.writing_style.formality_level == expected


def test_formality_stepping_toward_formal():
    assert step_formality(FormalityLevel.CASUAL, FormalityChange.MORE_FORMAL) == FormalityLevel.SEMI_FORMAL
    assert step_formality(FormalityLevel.SEMI_FORMAL, FormalityChange.MORE_FORMAL) == FormalityLevel.FORMAL
    assert step_formality(FormalityLevel.FORMAL, FormalityChange.MORE_FORMAL) == FormalityLevel.FORMAL


def test_formality_extremes_untouched():
    assert step_formality(FormalityLevel.VERY_FORMAL, FormalityChange.MORE_CASUAL) == FormalityLevel.VERY_FORMAL
    assert step_formality(FormalityLevel.VERY_CASUAL, FormalityChange.MORE_FORMAL) == FormalityLevel.VERY_CASUAL


def test_added_question_adds_format_once(profile: StyleProfile):
    for _ in range(2):
        record_feedback(profile, "We launched.", satisfaction=4, user_edit="We launched. What do you think?")
    assert profile.content_preferences.preferred_formats == ["questions"]


def test_analyze_edit_signals():
    signals = analyze_edit("Short post", "Short post with more? #tag")
    assert signals.hashtag_delta == 1
    assert signals.question_delta == 1
    assert signals.formality_change == FormalityChange.NO_CHANGE


# ==================== Completion ====================


def test_completion_name_only(profile: StyleProfile):
    profile.name = "Ada"
    assert calculate_completion(profile) == 10
    assert profile.onboarding_completed is False


def test_completion_full_profile(profile: StyleProfile):
    profile.name = "Ada"
    profile.brand_voice.industry = "Software"
    profile.brand_voice.target_audience = "Developers"
    profile.writing_style.tone = Tone.CASUAL
    profile.content_preferences.topics = ["devtools"]
    profile.brand_voice.adjectives = ["bold"]
    profile.sample_content.original_posts = ["My first post"]

    assert calculate_completion(profile) == 100
    assert profile.profile_completion == 100
    assert profile.onboarding_completed is True


def test_default_tone_scores_nothing(profile: StyleProfile):
    assert calculate_completion(profile) == 0


def test_onboarding_does_not_regress(profile: StyleProfile):
    profile.onboarding_completed = True
    profile.name = "Ada"

    assert calculate_completion(profile) == 10
    assert profile.onboarding_completed is True
