"""
Output formatting utilities for generated content.
"""

import re
from typing import Literal

from pydantic import BaseModel

HASHTAG_PATTERN = re.compile(r"#\w+")
CODE_FENCE_START = re.compile(r"^```(?:json)?\s*")
CODE_FENCE_END = re.compile(r"\s*```$")

ENGAGEMENT_LENGTH_THRESHOLD = 100


class GeneratedContent(BaseModel):
    """Generated content for one platform with derived metadata."""
    platform: str
    content: str
    hashtags: list[str]
    character_count: int
    estimated_engagement: Literal["high", "medium"]
    suggestions: list[str]


def extract_hashtags(content: str) -> list[str]:
    """Hashtags in order of appearance, including the leading #."""
    return HASHTAG_PATTERN.findall(content)


def estimate_engagement(content: str, hashtags: list[str]) -> Literal["high", "medium"]:
    if len(content) > ENGAGEMENT_LENGTH_THRESHOLD and hashtags:
        return "high"
    return "medium"


def posting_suggestions(platform: str) -> list[str]:
    volume = "more" if platform == "instagram" else "relevant"
    return [
        f"Consider adding {volume} hashtags",
        "Engage with your audience by asking questions",
        "Share at optimal times for your audience",
    ]


def format_platform_post(platform: str, content: str) -> GeneratedContent:
    """
    Wrap model output for a platform with hashtags and engagement metadata.

    Args:
        platform: Target platform
        content: Raw generated text

    Returns:
        Formatted post with metadata
    """
    hashtags = extract_hashtags(content)
    return GeneratedContent(
        platform=platform,
        content=content,
        hashtags=hashtags,
        character_count=len(content),
        estimated_engagement=estimate_engagement(content, hashtags),
        suggestions=posting_suggestions(platform),
    )


def clean_json_response(text: str) -> str:
    """Strip markdown code fences and stray backticks around a JSON payload."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = CODE_FENCE_END.sub("", CODE_FENCE_START.sub("", cleaned))
    return cleaned.strip("`").strip()
