"""
Writing-style analysis of a user's sample posts.

The model is asked for a strict JSON document; values outside the profile
enumerations are dropped rather than rejected.
"""

import json
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.agents.multimodal import InferenceRequest, MultimodalAgent
from app.core.exceptions import StyleAnalysisError
from app.models.style_profile import (
    FormalityLevel,
    HumorStyle,
    Personality,
    Tone,
    VocabularyLevel,
)
from app.utils.formatters import clean_json_response

logger = structlog.get_logger(__name__)


ANALYST_SYSTEM_PROMPT = (
    "You are an expert content strategist and writing style analyst. Analyze social media "
    "posts to identify unique writing patterns, voice, and style characteristics. You must "
    "respond with ONLY valid JSON, no markdown formatting, no code blocks, no other text."
)

ANALYSIS_SCHEMA = """{
  "tone": "professional|casual|friendly|authoritative|conversational|humorous",
  "personality": "enthusiastic|calm|witty|inspiring|analytical|storyteller",
  "formalityLevel": "very-formal|formal|semi-formal|casual|very-casual",
  "humorStyle": "none|subtle|witty|playful|sarcastic",
  "vocabularyLevel": "simple|intermediate|advanced|expert",
  "averageLength": 150,
  "commonPhrases": ["example phrase"],
  "sentenceStructure": "description of typical sentence patterns",
  "contentThemes": ["theme1", "theme2"],
  "styleNotes": "additional observations about writing style",
  "brandAdjectives": ["adjective1", "adjective2"],
  "recommendedImprovements": ["suggestion1", "suggestion2"]
}"""


STYLE_ENUMS: dict[str, type[Enum]] = {
    "tone": Tone,
    "personality": Personality,
    "formality_level": FormalityLevel,
    "humor_style": HumorStyle,
    "vocabulary_level": VocabularyLevel,
}


class StyleAnalysis(BaseModel):
    """Parsed analysis returned by the model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tone: Optional[Tone] = None
    personality: Optional[Personality] = None
    formality_level: Optional[FormalityLevel] = None
    humor_style: Optional[HumorStyle] = None
    vocabulary_level: Optional[VocabularyLevel] = None
    average_length: Optional[int] = None
    common_phrases: list[str] = Field(default_factory=list)
    sentence_structure: str = ""
    content_themes: list[str] = Field(default_factory=list)
    style_notes: str = ""
    brand_adjectives: list[str] = Field(default_factory=list)
    recommended_improvements: list[str] = Field(default_factory=list)

    @field_validator("tone", "personality", "formality_level", "humor_style", "vocabulary_level", mode="before")
    @classmethod
    def drop_unknown_values(cls, v, info):
        """Map values outside the enumeration to None."""
        if v is None:
            return None
        enum_type = STYLE_ENUMS[info.field_name]
        try:
            return enum_type(str(v).strip().lower())
        except ValueError:
            logger.debug("Ignoring unknown style value", field=info.field_name, value=v)
            return None

    @field_validator("average_length", mode="before")
    @classmethod
    def coerce_length(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return int(v)
        return None

    @field_validator("sentence_structure", "style_notes", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return v if isinstance(v, str) else ""


def build_analysis_prompt(sample_posts: list[str]) -> str:
    """Instruction asking for the JSON analysis of the given posts."""
    numbered = "".join(f"\n{index}. {post}" for index, post in enumerate(sample_posts, start=1))
    return (
        "Analyze the following social media posts to identify the author's writing style, "
        "tone, and patterns. \n\n"
        "Return ONLY a valid JSON object with this exact structure "
        "(NO markdown, NO code blocks, NO backticks):\n\n"
        f"{ANALYSIS_SCHEMA}\n\n"
        f"Posts to analyze:\n{numbered}\n\n"
        "IMPORTANT: Return ONLY the JSON object starting with { and ending with }. "
        "Do not use markdown formatting, code blocks, or backticks."
    )


def parse_analysis(raw: str) -> StyleAnalysis:
    """
    Parse model output into a StyleAnalysis.

    Raises:
        StyleAnalysisError: output is empty or not a JSON object
    """
    if not raw or not raw.strip():
        raise StyleAnalysisError("Failed to get analysis from AI")

    cleaned = clean_json_response(raw)
    try:
        data = json.loads(cleaned)
        if not isinstance(data, dict):
            raise StyleAnalysisError("Failed to parse AI analysis")
        return StyleAnalysis.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Unparsable style analysis", error=str(e), response_preview=raw[:200])
        raise StyleAnalysisError("Failed to parse AI analysis") from e


async def analyze_writing_style(agent: MultimodalAgent, sample_posts: list[str]) -> StyleAnalysis:
    """
    Ask the model to analyse sample posts.

    Args:
        agent: Inference router
        sample_posts: Non-empty list of the user's posts

    Returns:
        Parsed StyleAnalysis

    Raises:
        StyleAnalysisError: no posts given or unusable model output
        InferenceError: upstream failure
    """
    if not sample_posts:
        raise StyleAnalysisError("Sample posts are required for analysis")

    request = InferenceRequest(
        prompt=build_analysis_prompt(sample_posts),
        text=ANALYST_SYSTEM_PROMPT,
    )
    result = await agent.process(request)
    analysis = parse_analysis(result.content)

    logger.info(
        "Style analysis complete",
        sample_count=len(sample_posts),
        model=result.metadata.model,
        tone=analysis.tone.value if analysis.tone else None,
    )
    return analysis
