# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: TRANSCACHE_SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   Call init_sentry() at startup (the CLIs do this). Error-level log records
#   (engine failures, disk cache I/O errors) are then reported as events.
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from transcache.config import Settings, get_settings

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings | None = None) -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    settings = settings or get_settings()

    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],
        # Article text stays out of reports
        send_default_pii=False,
        max_request_body_size="never",
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


def capture_exception(error: Exception, **context) -> str | None:
    """
    Capture an exception to Sentry.

    Returns the event ID if captured, None otherwise.
    """
    if not sentry_sdk.get_client().is_active():
        logger.error("Error (Sentry disabled)", exc_info=error)
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)


def set_tag(key: str, value: str) -> None:
    """Add a tag for filtering in Sentry."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_tag(key, value)
