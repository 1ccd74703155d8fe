"""
Model Configuration for Input-Shape Routing.

Maps each model tier to the configured upstream model identifier.
Which tier a request uses is decided by the multimodal agent from the
shape of its input (text only, images only, or both).

Example usage:
    from app.core.model_config import ModelTier, get_model_id

    model = get_model_id(ModelTier.VISION_SINGLE)
    # Returns: "meta-llama/llama-4-scout-17b-16e-instruct"
"""

from enum import Enum

from app.core.config import settings


class ModelTier(str, Enum):
    """Model tiers the router can select."""
    FAST_TEXT = "fast_text"
    POWERFUL_TEXT = "powerful_text"
    VISION_SINGLE = "vision_single"
    VISION_MULTIMODAL = "vision_multimodal"


# Text-only prompts longer than this use the powerful text model
POWERFUL_TEXT_THRESHOLD = 1000


def get_model_id(tier: ModelTier) -> str:
    """Resolve a tier to its upstream model identifier."""
    model_ids = {
        ModelTier.FAST_TEXT: settings.model_fast_text,
        ModelTier.POWERFUL_TEXT: settings.model_powerful_text,
        ModelTier.VISION_SINGLE: settings.model_vision_single,
        ModelTier.VISION_MULTIMODAL: settings.model_vision_multimodal,
    }
    return model_ids[tier]


def get_model_catalog() -> dict:
    """All models the backend knows about, grouped for display."""
    return {
        "text": {
            "fast": settings.model_fast_text,
            "powerful": settings.model_powerful_text,
            "reasoning": settings.model_reasoning_text,
        },
        "vision": {
            "scout": settings.model_vision_single,
            "maverick": settings.model_vision_multimodal,
        },
        "compound": settings.model_compound,
    }
