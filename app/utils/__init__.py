"""Utility functions and helpers"""

from app.utils.formatters import (
    GeneratedContent,
    clean_json_response,
    extract_hashtags,
    format_platform_post,
)
from app.utils.prompts import Platform, build_system_prompt, get_platform_instruction

__all__ = [
    "GeneratedContent",
    "clean_json_response",
    "extract_hashtags",
    "format_platform_post",
    "Platform",
    "build_system_prompt",
    "get_platform_instruction",
]
