"""Multimodal inference router"""

from app.agents.multimodal.agent import (
    InferenceMetadata,
    InferenceResult,
    MultimodalAgent,
    build_messages,
)
from app.agents.multimodal.inputs import (
    ImageInput,
    ImageOnly,
    InferenceRequest,
    Multimodal,
    TextOnly,
    classify,
    select_model_tier,
)

__all__ = [
    "MultimodalAgent",
    "InferenceRequest",
    "InferenceResult",
    "InferenceMetadata",
    "ImageInput",
    "TextOnly",
    "ImageOnly",
    "Multimodal",
    "classify",
    "select_model_tier",
    "build_messages",
]
