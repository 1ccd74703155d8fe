"""
Observability and monitoring integrations.
structlog for logging, Sentry for error tracking.
"""

import logging
import sys
from typing import Optional

import structlog

from app.core.config import settings

logger = structlog.get_logger(__name__)

_sentry_initialized = False


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def init_sentry() -> None:
    """Initialize Sentry error tracking."""
    global _sentry_initialized

    if _sentry_initialized or not settings.sentry_dsn:
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                SqlalchemyIntegration(),
            ],
            # Don't send PII
            send_default_pii=False,
        )

        _sentry_initialized = True
        logger.info(
            "Sentry initialized",
            environment=settings.sentry_environment,
            sample_rate=settings.sentry_traces_sample_rate,
        )
    except Exception as e:
        logger.error("Failed to initialize Sentry", error=str(e))


def capture_exception(error: Exception, context: Optional[dict] = None) -> None:
    """
    Report an exception to Sentry.

    Args:
        error: The exception to capture
        context: Route and request details attached as the "request" context
    """
    if not settings.sentry_dsn:
        return

    import sentry_sdk

    with sentry_sdk.new_scope() as scope:
        if context:
            scope.set_context("request", context)
        scope.set_tag("error_type", type(error).__name__)
        sentry_sdk.capture_exception(error)


def set_user_context(user_id: str, email: Optional[str] = None) -> None:
    """Attach the authenticated user to subsequent Sentry events."""
    if not settings.sentry_dsn:
        return

    import sentry_sdk

    sentry_sdk.set_user({"id": user_id, "email": email})
