"""
Firebase Admin utilities for verifying client ID tokens.
"""

from typing import Optional

import firebase_admin
import structlog
from firebase_admin import auth, credentials

from app.core.config import settings
from app.core.exceptions import AuthenticationError

logger = structlog.get_logger(__name__)


def initialize_firebase() -> Optional[firebase_admin.App]:
    """Initialize the Firebase Admin SDK from service-account settings."""
    try:
        app = firebase_admin.get_app()
        logger.info("Firebase already initialized")
        return app
    except ValueError:
        # Not initialized yet
        pass

    if not (
        settings.firebase_project_id
        and settings.firebase_client_email
        and settings.firebase_private_key
    ):
        logger.warning("Firebase credentials not configured")
        return None

    cred = credentials.Certificate({
        "type": "service_account",
        "project_id": settings.firebase_project_id,
        "client_email": settings.firebase_client_email,
        "private_key": settings.firebase_private_key.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    })
    app = firebase_admin.initialize_app(cred)
    logger.info("Firebase initialized successfully", project_id=settings.firebase_project_id)
    return app


def verify_id_token(token: str) -> dict:
    """
    Verify a Firebase ID token and return its decoded claims.

    Raises:
        AuthenticationError: token invalid, expired, or not the allowed account
    """
    try:
        decoded = auth.verify_id_token(token)
    except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
        logger.info("Firebase token rejected", error=str(e))
        raise AuthenticationError("Invalid token") from e

    if settings.firebase_allowed_uid and decoded.get("uid") != settings.firebase_allowed_uid:
        logger.warning("Token for non-allowed account", uid=decoded.get("uid"))
        raise AuthenticationError("Unauthorized")

    return decoded
