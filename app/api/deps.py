"""
FastAPI dependencies for authentication and shared services.

Services are built once in the application lifespan and read here from
``request.app.state``.
"""

from typing import Optional

from fastapi import Header, HTTPException, Request, status
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from app.agents.multimodal import MultimodalAgent
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.firebase_auth import verify_id_token
from app.core.observability import set_user_context
from app.services import LinkedInService, ProfileService, RepurposeService


class AuthenticatedUser(BaseModel):
    """Identity taken from a verified Firebase ID token."""
    uid: str
    email: str = ""
    name: str = ""


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        scheme, token = authorization.split()
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )
    if scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication scheme",
        )
    return token


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> AuthenticatedUser:
    """
    Verify the Firebase ID token in the Authorization header.

    With ``skip_auth`` enabled every request runs as the dev user.
    """
    if settings.skip_auth:
        return AuthenticatedUser(uid=settings.dev_user_id, email="dev@localhost", name="Dev User")

    token = _bearer_token(authorization)
    try:
        # firebase_admin verification is blocking (certificate fetch)
        decoded = await run_in_threadpool(verify_id_token, token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = AuthenticatedUser(
        uid=decoded["uid"],
        email=decoded.get("email") or "",
        name=decoded.get("name") or "",
    )
    set_user_context(user.uid, user.email or None)
    return user


def get_agent(request: Request) -> MultimodalAgent:
    return request.app.state.agent


def get_profile_service(request: Request) -> ProfileService:
    return request.app.state.profile_service


def get_repurpose_service(request: Request) -> RepurposeService:
    return request.app.state.repurpose_service


def get_linkedin_service(request: Request) -> LinkedInService:
    return request.app.state.linkedin_service


def get_linkedin_token(
    access_token: Optional[str] = None,
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> str:
    """LinkedIn access token from the query string or a Bearer header."""
    token = access_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization[len("bearer "):].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="LinkedIn access token required",
        )
    return token
