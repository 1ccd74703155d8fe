"""
Writing-style analysis tests.
"""

import json

import pytest

from app.agents.multimodal import MultimodalAgent
from app.core.exceptions import StyleAnalysisError
from app.models.style_profile import FormalityLevel, Tone
from app.services.style_analysis import (
    ANALYST_SYSTEM_PROMPT,
    analyze_writing_style,
    build_analysis_prompt,
    parse_analysis,
)

from tests.conftest import FakeLLMClient

ANALYSIS = {
    "tone": "casual",
    "personality": "witty",
    "formalityLevel": "semi-formal",
    "humorStyle": "playful",
    "vocabularyLevel": "advanced",
    "averageLength": 180.4,
    "commonPhrases": ["here's the thing"],
    "sentenceStructure": "Short punchy sentences",
    "contentThemes": ["product", "design"],
    "styleNotes": "Uses rhetorical questions",
    "brandAdjectives": ["playful", "smart"],
    "recommendedImprovements": ["Add calls to action"],
}


def test_parse_fenced_json():
    analysis = parse_analysis(f"```json\n{json.dumps(ANALYSIS)}\n```")

    assert analysis.tone == Tone.CASUAL
    assert analysis.formality_level == FormalityLevel.SEMI_FORMAL
    assert analysis.average_length == 180
    assert analysis.content_themes == ["product", "design"]
    assert analysis.recommended_improvements == ["Add calls to action"]


def test_unknown_enum_values_are_dropped():
    analysis = parse_analysis(json.dumps({"tone": "sarcastic-ish", "humorStyle": "Witty"}))
    assert analysis.tone is None
    assert analysis.humor_style.value == "witty"


@pytest.mark.parametrize("raw", ["", "   ", "not json", "[1, 2]"])
def test_unusable_output_raises(raw: str):
    with pytest.raises(StyleAnalysisError):
        parse_analysis(raw)


def test_prompt_numbers_posts():
    prompt = build_analysis_prompt(["First post", "Second post"])
    assert "\n1. First post" in prompt
    assert "\n2. Second post" in prompt


@pytest.mark.asyncio
async def test_analyze_writing_style_sends_analyst_persona_as_context():
    client = FakeLLMClient(content=json.dumps(ANALYSIS))
    agent = MultimodalAgent(client)

    analysis = await analyze_writing_style(agent, ["Post A"])

    assert analysis.personality.value == "witty"
    user_message = client.calls[0]["messages"][1].content
    assert user_message.endswith(f"Context: {ANALYST_SYSTEM_PROMPT}")


@pytest.mark.asyncio
async def test_analyze_requires_posts(agent: MultimodalAgent):
    with pytest.raises(StyleAnalysisError):
        await analyze_writing_style(agent, [])
