"""
Platform prompt template tests.
"""

import pytest

from app.core.exceptions import UnknownPlatformError
from app.models.style_profile import (
    BrandVoice,
    ContentPreferences,
    HashtagStyle,
    PlatformStyle,
    StyleProfile,
    Tone,
    WritingStyle,
)
from app.utils.prompts import (
    PLATFORM_INSTRUCTIONS,
    Platform,
    build_system_prompt,
    get_platform_instruction,
)


@pytest.fixture
def profile() -> StyleProfile:
    return StyleProfile(
        user_id="u1",
        name="Ada",
        writing_style=WritingStyle(tone=Tone.FRIENDLY),
        brand_voice=BrandVoice(
            adjectives=["bold", "clear"],
            values=["craft"],
            industry="Software",
            target_audience="Developers",
        ),
        content_preferences=ContentPreferences(topics=["devtools"], avoid_topics=["politics"]),
        platform_styles={"twitter": PlatformStyle(tone="witty", hashtag_style=HashtagStyle.MINIMAL)},
    )


@pytest.mark.parametrize("platform", list(Platform))
def test_prompt_is_deterministic(platform: Platform, profile: StyleProfile):
    first = build_system_prompt(platform, "Launch week", profile)
    second = build_system_prompt(platform, "Launch week", profile)
    assert first == second


def test_prompt_sections_in_order():
    prompt = build_system_prompt(Platform.TWITTER)
    instruction = PLATFORM_INSTRUCTIONS[Platform.TWITTER]

    assert prompt.startswith(instruction.base_prompt)
    positions = [
        prompt.index("PLATFORM CONSTRAINTS:"),
        prompt.index("TONE GUIDELINES:"),
        prompt.index("FORMAT GUIDELINES:"),
        prompt.index("ENGAGEMENT OPTIMIZATION:"),
        prompt.index("Now transform the provided content"),
    ]
    assert positions == sorted(positions)
    assert "- Maximum character limit: 280" in prompt
    assert "- Recommended hashtag count: 2" in prompt
    assert "USER PROFILE" not in prompt
    assert "Additional Context" not in prompt


def test_instagram_disallows_links():
    prompt = build_system_prompt("instagram")
    assert "- Links supported: No" in prompt
    assert "- Maximum character limit: 2200" in prompt


def test_profile_section_uses_platform_overrides(profile: StyleProfile):
    prompt = build_system_prompt(Platform.TWITTER, profile=profile)

    assert "USER PROFILE & BRAND VOICE:" in prompt
    assert "- Writing Tone: witty (override platform default)" in prompt
    assert "- Hashtag Preference: minimal" in prompt
    assert "- Brand Adjectives: bold, clear" in prompt
    assert "- Topics to Avoid: politics" in prompt
    assert "IMPORTANT: Prioritize the user's profile preferences" in prompt


def test_profile_section_falls_back_to_global_tone(profile: StyleProfile):
    prompt = build_system_prompt(Platform.FACEBOOK, profile=profile)

    assert "- Writing Tone: friendly (override platform default)" in prompt
    assert "- Hashtag Preference: moderate" in prompt  # no facebook override


def test_additional_context_precedes_closing_instruction():
    prompt = build_system_prompt(Platform.FACEBOOK, "Audience is mostly parents")
    assert prompt.index("Additional Context: Audience is mostly parents") < prompt.index("Now transform")


def test_unknown_platform_raises():
    with pytest.raises(UnknownPlatformError, match="No instructions found for platform: myspace"):
        build_system_prompt("myspace")

    with pytest.raises(ValueError):
        get_platform_instruction("linkedin")
