"""
Agents for the repurposing backend.

The multimodal agent is the single entry point to the upstream model:
every feature (API passthrough, repurposing, style analysis) builds an
InferenceRequest and hands it to MultimodalAgent.
"""

from app.agents.multimodal import InferenceRequest, MultimodalAgent

__all__ = ["MultimodalAgent", "InferenceRequest"]
