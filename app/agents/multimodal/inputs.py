"""
Inference request envelope and its input shapes.

A request is classified once, at the boundary, into exactly one of
TextOnly, ImageOnly or Multimodal. Model selection and message
construction dispatch on that shape.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from app.core.model_config import POWERFUL_TEXT_THRESHOLD, ModelTier


class ImageInput(BaseModel):
    """
    One image: a remote URL or an inline base64 payload.

    An entry with neither is accepted and later skipped when messages are
    built; an entry with both uses the URL.
    """
    url: Optional[str] = None
    base64: Optional[str] = None
    description: Optional[str] = None


class InferenceRequest(BaseModel):
    """Heterogeneous input for one upstream call."""
    prompt: str = Field(..., min_length=1)
    text: Optional[str] = None
    images: list[ImageInput] = Field(default_factory=list)
    context: Optional[dict[str, Any]] = None  # Opaque; kept for caller audit/logging


@dataclass(frozen=True)
class TextOnly:
    prompt: str
    text: Optional[str] = None


@dataclass(frozen=True)
class ImageOnly:
    prompt: str
    images: tuple[ImageInput, ...]


@dataclass(frozen=True)
class Multimodal:
    prompt: str
    text: str
    images: tuple[ImageInput, ...]


InputShape = Union[TextOnly, ImageOnly, Multimodal]


def classify(request: InferenceRequest) -> InputShape:
    """Decide the input shape from which optional fields are populated."""
    has_images = bool(request.images)
    has_text = bool(request.text)

    if has_images and has_text:
        return Multimodal(prompt=request.prompt, text=request.text, images=tuple(request.images))
    if has_images:
        return ImageOnly(prompt=request.prompt, images=tuple(request.images))
    return TextOnly(prompt=request.prompt, text=request.text or None)


def select_model_tier(shape: InputShape) -> ModelTier:
    """Pure model-tier choice for an input shape."""
    if isinstance(shape, Multimodal):
        return ModelTier.VISION_MULTIMODAL
    if isinstance(shape, ImageOnly):
        return ModelTier.VISION_SINGLE
    if isinstance(shape, TextOnly):
        if len(shape.prompt) > POWERFUL_TEXT_THRESHOLD:
            return ModelTier.POWERFUL_TEXT
        return ModelTier.FAST_TEXT
    raise TypeError(f"Unhandled input shape: {type(shape).__name__}")
