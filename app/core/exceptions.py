"""
Exception hierarchy for the repurposing backend.

Core components raise these and never swallow them; the API layer maps
them to HTTP responses.

Hierarchy:
    Exception
    +-- RepurposeError
        +-- InferenceError
        |   +-- UpstreamRateLimitError
        +-- UnknownPlatformError (ValueError)
        +-- FeedbackValidationError (ValueError)
        +-- StyleAnalysisError
        +-- ProfileNotFoundError
        +-- AuthenticationError
        +-- LinkedInAPIError
"""

from typing import Optional


class RepurposeError(Exception):
    """Base exception for all application errors."""

    pass


# =============================================================================
# UPSTREAM INFERENCE
# =============================================================================


class InferenceError(RepurposeError):
    """Raised when the upstream inference API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamRateLimitError(InferenceError):
    """Raised when the upstream API answers HTTP 429 (quota exceeded)."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


# =============================================================================
# DOMAIN
# =============================================================================


class UnknownPlatformError(RepurposeError, ValueError):
    """Raised when a platform outside the supported set is requested."""

    def __init__(self, platform: str):
        super().__init__(f"No instructions found for platform: {platform}")
        self.platform = platform


class FeedbackValidationError(RepurposeError, ValueError):
    """Raised when a feedback submission is malformed."""

    pass


class StyleAnalysisError(RepurposeError):
    """Raised when the writing-style analysis cannot be produced or parsed."""

    pass


class ProfileNotFoundError(RepurposeError):
    """Raised when no style profile exists for a user."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


# =============================================================================
# INTEGRATIONS
# =============================================================================


class AuthenticationError(RepurposeError):
    """Raised when a bearer token cannot be verified."""

    pass


class LinkedInAPIError(RepurposeError):
    """Raised when a LinkedIn API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
