"""API Route modules"""

from app.api.routes.ai import router as ai_router
from app.api.routes.linkedin import router as linkedin_router
from app.api.routes.profile import router as profile_router
from app.api.routes.repurpose import router as repurpose_router

__all__ = [
    "ai_router",
    "profile_router",
    "repurpose_router",
    "linkedin_router",
]
