"""
Platform prompt templates.

Each supported platform has a fixed instruction set (persona, constraints,
tone, format and engagement guidance). build_system_prompt() renders it,
optionally followed by the user's style profile and free-text context.
Rendering is a pure function of its arguments.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from app.core.exceptions import UnknownPlatformError
from app.models.style_profile import HashtagStyle, StyleProfile


class Platform(str, Enum):
    """Platforms content can be repurposed for."""
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    TWITTER = "twitter"


@dataclass(frozen=True)
class PlatformConstraints:
    max_length: int
    supports_hashtags: bool
    supports_images: bool
    supports_video: bool
    supports_links: bool
    recommended_hashtag_count: int


@dataclass(frozen=True)
class PlatformInstruction:
    platform: Platform
    base_prompt: str
    constraints: PlatformConstraints
    tone_guidelines: tuple[str, ...]
    format_guidelines: tuple[str, ...]
    engagement_tips: tuple[str, ...]


PLATFORM_CONSTRAINTS: dict[Platform, PlatformConstraints] = {
    Platform.FACEBOOK: PlatformConstraints(
        max_length=8000,
        supports_hashtags=True,
        supports_images=True,
        supports_video=True,
        supports_links=True,
        recommended_hashtag_count=3,
    ),
    Platform.INSTAGRAM: PlatformConstraints(
        max_length=2200,
        supports_hashtags=True,
        supports_images=True,
        supports_video=True,
        supports_links=False,
        recommended_hashtag_count=8,
    ),
    Platform.TWITTER: PlatformConstraints(
        max_length=280,
        supports_hashtags=True,
        supports_images=True,
        supports_video=True,
        supports_links=True,
        recommended_hashtag_count=2,
    ),
}


PLATFORM_INSTRUCTIONS: dict[Platform, PlatformInstruction] = {
    Platform.FACEBOOK: PlatformInstruction(
        platform=Platform.FACEBOOK,
        base_prompt=(
            "You are an expert Facebook content creator. Transform the provided content into "
            "engaging Facebook posts that encourage meaningful conversations and community "
            "engagement. Focus on storytelling, personal connection, and providing value to "
            "the audience."
        ),
        constraints=PLATFORM_CONSTRAINTS[Platform.FACEBOOK],
        tone_guidelines=(
            "Use a conversational and friendly tone",
            "Write in first or second person to create connection",
            "Include personal anecdotes or relatable experiences when relevant",
            "Encourage discussion with open-ended questions",
            "Be authentic and genuine in your messaging",
        ),
        format_guidelines=(
            "Start with a compelling hook in the first sentence",
            "Use paragraph breaks for easy reading (mobile-friendly)",
            "Include emojis sparingly for emphasis and emotion",
            "Add 1-3 relevant hashtags at the end",
            "Include a clear call-to-action when appropriate",
            "Keep most important information in the first 2-3 lines",
        ),
        engagement_tips=(
            "Ask questions to encourage comments",
            "Share behind-the-scenes content or processes",
            "Use storytelling to make content memorable",
            "Reference current events or trending topics when relevant",
            "Include user-generated content opportunities",
            "Share valuable tips, insights, or educational content",
        ),
    ),
    Platform.INSTAGRAM: PlatformInstruction(
        platform=Platform.INSTAGRAM,
        base_prompt=(
            "You are a skilled Instagram content strategist. Adapt the provided content for "
            "Instagram's visual-first, discovery-focused platform. Create posts that are "
            "aesthetically appealing, highly discoverable, and optimized for engagement within "
            "Instagram's algorithm."
        ),
        constraints=PLATFORM_CONSTRAINTS[Platform.INSTAGRAM],
        tone_guidelines=(
            "Use an inspiring and aspirational tone",
            "Write with energy and enthusiasm",
            "Be authentic and relatable to your target audience",
            "Use inclusive language that welcomes all followers",
            "Balance professional expertise with personal touch",
        ),
        format_guidelines=(
            "Create scroll-stopping opening lines",
            "Use strategic line breaks and spacing for visual appeal",
            "Include relevant emojis throughout the text",
            "Add 5-8 strategic hashtags mixed within the caption",
            "End with a strong call-to-action",
            "Use bullet points or numbered lists for easy consumption",
            "Keep captions concise but informative",
        ),
        engagement_tips=(
            "Include trending and niche hashtags for discoverability",
            "Ask followers to share in comments or stories",
            "Create shareable quotes or tips",
            "Reference Instagram features (Reels, Stories, IGTV)",
            "Encourage saves by providing valuable information",
            "Use location tags when relevant",
            "Tag relevant accounts and collaborators",
        ),
    ),
    Platform.TWITTER: PlatformInstruction(
        platform=Platform.TWITTER,
        base_prompt=(
            "You are an expert Twitter content creator specializing in concise, impactful "
            "messaging. Transform the provided content into compelling tweets that spark "
            "conversation, provide quick value, and encourage engagement within Twitter's "
            "fast-paced environment."
        ),
        constraints=PLATFORM_CONSTRAINTS[Platform.TWITTER],
        tone_guidelines=(
            "Be direct and to the point",
            "Use a confident and authoritative voice",
            "Inject personality and wit when appropriate",
            "Stay current with trends and cultural moments",
            "Balance professionalism with approachability",
        ),
        format_guidelines=(
            "Lead with the most important information",
            "Use strategic capitalization for emphasis",
            "Include 1-2 relevant hashtags naturally within the text",
            "Use emojis sparingly for clarity and emotion",
            "Keep threads coherent if content requires multiple tweets",
            "End with clear next steps or calls-to-action",
        ),
        engagement_tips=(
            "Ask thought-provoking questions",
            "Share quick tips or insights",
            "Comment on trending topics in your niche",
            "Use polls and Twitter features for interaction",
            "Retweet and engage with community content",
            "Share real-time updates and behind-the-scenes content",
            "Participate in relevant Twitter chats and conversations",
        ),
    ),
}


def get_platform_instruction(platform: Union[Platform, str]) -> PlatformInstruction:
    """
    Look up the instruction set for a platform.

    Raises:
        UnknownPlatformError: platform is not one of the supported values
    """
    try:
        key = Platform(platform)
    except ValueError:
        raise UnknownPlatformError(str(platform)) from None
    return PLATFORM_INSTRUCTIONS[key]


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _bullets(items: tuple[str, ...]) -> str:
    return "\n".join(f"- {item}" for item in items)


def build_profile_section(platform: Platform, profile: StyleProfile) -> str:
    """Render the profile block that overrides platform defaults."""
    platform_style = profile.platform_styles.get(platform.value)
    tone = (platform_style.tone if platform_style and platform_style.tone else None) or profile.writing_style.tone.value
    hashtag_style = (
        platform_style.hashtag_style if platform_style and platform_style.hashtag_style else HashtagStyle.MODERATE
    )

    writing = profile.writing_style
    brand = profile.brand_voice
    prefs = profile.content_preferences
    patterns = profile.sample_content.analyzed_patterns
    vocabulary = patterns.vocabulary_level.value if patterns.vocabulary_level else "not specified"

    lines = [
        "USER PROFILE & BRAND VOICE:",
        f"- Writing Tone: {tone} (override platform default)",
        f"- Personality: {writing.personality.value}",
        f"- Formality Level: {writing.formality_level.value}",
        f"- Humor Style: {writing.humor_style.value}",
        f"- Brand Type: {brand.brand_type.value}",
        f"- Industry: {brand.industry}",
        f"- Target Audience: {brand.target_audience}",
        f"- Brand Adjectives: {', '.join(brand.adjectives)}",
        f"- Core Values: {', '.join(brand.values)}",
        f"- Vocabulary Level: {vocabulary}",
        f"- Hashtag Preference: {hashtag_style.value}",
        "",
        "CONTENT PREFERENCES:",
        f"- Preferred Topics: {', '.join(prefs.topics)}",
        f"- Content Pillars: {', '.join(prefs.content_pillars)}",
        f"- Preferred Formats: {', '.join(prefs.preferred_formats)}",
        f"- Topics to Avoid: {', '.join(prefs.avoid_topics)}",
        "",
        "WRITING STYLE PATTERNS:",
        f"- Common Phrases: {', '.join(patterns.common_phrases)}",
        f"- Sentence Structure: {patterns.sentence_structure}",
        f"- Style Notes: {patterns.style_notes}",
        "",
        "IMPORTANT: Prioritize the user's profile preferences over platform defaults. "
        "Maintain their unique voice and style while adapting to platform requirements.",
    ]
    return "\n".join(lines)


def build_system_prompt(
    platform: Union[Platform, str],
    additional_context: Optional[str] = None,
    profile: Optional[StyleProfile] = None,
) -> str:
    """
    Build the complete system instruction for one platform.

    Args:
        platform: Target platform
        additional_context: Free text appended after everything else
        profile: User style profile; its preferences take priority

    Returns:
        Deterministic instruction string

    Raises:
        UnknownPlatformError: platform is not supported
    """
    instruction = get_platform_instruction(platform)
    constraints = instruction.constraints

    sections = [
        instruction.base_prompt,
        "\n".join([
            "PLATFORM CONSTRAINTS:",
            f"- Maximum character limit: {constraints.max_length}",
            f"- Hashtags supported: {_yes_no(constraints.supports_hashtags)}",
            f"- Recommended hashtag count: {constraints.recommended_hashtag_count}",
            f"- Images supported: {_yes_no(constraints.supports_images)}",
            f"- Video supported: {_yes_no(constraints.supports_video)}",
            f"- Links supported: {_yes_no(constraints.supports_links)}",
        ]),
        f"TONE GUIDELINES:\n{_bullets(instruction.tone_guidelines)}",
        f"FORMAT GUIDELINES:\n{_bullets(instruction.format_guidelines)}",
        f"ENGAGEMENT OPTIMIZATION:\n{_bullets(instruction.engagement_tips)}",
    ]

    if profile is not None:
        sections.append(build_profile_section(instruction.platform, profile))

    if additional_context:
        sections.append(f"Additional Context: {additional_context}")

    sections.append(
        "Now transform the provided content according to these guidelines while maintaining "
        "the core message and value proposition. If user profile is provided, ensure the content "
        "matches their unique voice, tone, and style preferences."
    )
    return "\n\n".join(sections)
