"""
Services layer for the repurposing backend.
Contains business logic for profiles, style learning, repurposing and LinkedIn.
"""

from app.services.linkedin_service import LinkedInService
from app.services.profile_service import ProfileService
from app.services.repurpose_service import RepurposeService

__all__ = [
    "ProfileService",
    "RepurposeService",
    "LinkedInService",
]
