"""
FastAPI application main entry point.
"""

from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.agents.multimodal import MultimodalAgent
from app.api.routes import (
    ai_router,
    linkedin_router,
    profile_router,
    repurpose_router,
)
from app.core.config import settings
from app.core.database import Database
from app.core.firebase_auth import initialize_firebase
from app.core.llm_clients import GroqClient
from app.core.observability import configure_logging, init_sentry
from app.services import LinkedInService, ProfileService, RepurposeService

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds every shared collaborator once, exposes it on ``app.state`` and
    releases it on shutdown.
    """
    # Startup
    configure_logging()
    logger.info("Starting Repurpose Backend", environment=settings.environment)

    init_sentry()
    initialize_firebase()

    llm_client = GroqClient(api_key=settings.groq_api_key, base_url=settings.groq_base_url)
    http_client = httpx.AsyncClient(timeout=30.0)
    database = Database(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.debug,
    )
    if settings.environment == "development":
        await database.create_all()

    agent = MultimodalAgent(llm_client)
    app.state.agent = agent
    app.state.database = database
    app.state.profile_service = ProfileService(database)
    app.state.repurpose_service = RepurposeService(agent, database)
    app.state.linkedin_service = LinkedInService(
        client_id=settings.linkedin_client_id,
        client_secret=settings.linkedin_client_secret,
        redirect_uri=settings.linkedin_redirect_uri,
        http_client=http_client,
    )
    logger.info("Services initialized")

    yield

    # Shutdown
    logger.info("Shutting down Repurpose Backend")
    try:
        await llm_client.close()
    finally:
        try:
            await http_client.aclose()
        finally:
            await database.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Social content repurposing backend

    - Multimodal AI processing (text, images, or both)
    - Platform-specific repurposing for Facebook, Instagram and Twitter
    - Per-user style profiles that learn from feedback and edits
    - LinkedIn connection for pulling source posts and sharing
    """,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(ai_router, prefix=settings.api_prefix)
app.include_router(profile_router, prefix=settings.api_prefix)
app.include_router(repurpose_router, prefix=settings.api_prefix)
app.include_router(linkedin_router, prefix=settings.api_prefix)


# Health check endpoint
@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


# Root endpoint
@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "endpoints": {
            "ai": f"{settings.api_prefix}/ai/process",
            "profile": f"{settings.api_prefix}/user/profile",
            "feedback": f"{settings.api_prefix}/user/feedback",
            "analyze_style": f"{settings.api_prefix}/user/analyze-style",
            "repurpose": f"{settings.api_prefix}/repurpose",
            "process_post": f"{settings.api_prefix}/process-post",
            "linkedin_authorize": f"{settings.api_prefix}/auth/linkedin/authorize",
            "linkedin_posts": f"{settings.api_prefix}/linkedin/posts",
            "linkedin_share": f"{settings.api_prefix}/linkedin/share",
        },
    }
