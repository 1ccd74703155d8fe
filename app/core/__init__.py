"""Core infrastructure modules"""

from app.core.config import settings
from app.core.database import Base, Database
from app.core.llm_clients import BaseLLMClient, GroqClient

__all__ = ["settings", "Base", "Database", "BaseLLMClient", "GroqClient"]
