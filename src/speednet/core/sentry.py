"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from speednet.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False

# Signup rows carry participant contact details
_SENSITIVE_KEYS = ("email", "participant", "contact", "join_url", "sql")


def init_sentry() -> None:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if SENTRY_DSN is set and looks like a real DSN, so local
    development and CI run without Sentry. Repeated calls are no-ops.

    Configuration:
    - Performance monitoring disabled
    - No default PII; participant contact data is scrubbed in before_send
    - Logging integration disabled to avoid duplication with structlog
    """
    global _sentry_initialized

    if _sentry_initialized:
        return

    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return

    sentry_dsn_stripped = sentry_dsn.strip()
    if not sentry_dsn_stripped.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be invalid or placeholder, error tracking disabled",
            dsn_preview=sentry_dsn_stripped[:20] + "..." if len(sentry_dsn_stripped) > 20 else sentry_dsn_stripped,
        )
        return

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn_stripped,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=_filter_sensitive_data,
        )

        _sentry_initialized = True
        logger.info(
            "sentry.initialized", message="Sentry error tracking enabled", environment=environment
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Drop extra entries and breadcrumbs that mention participant contact data or SQL."""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    if environment in {"test", "testing"}:
        return event

    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {
            key: value
            for key, value in extra.items()
            if not any(marker in str(key).lower() for marker in _SENSITIVE_KEYS)
        }

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        values = breadcrumbs.get("values")
        if isinstance(values, list):
            breadcrumbs["values"] = [
                crumb for crumb in values if "sql" not in str(crumb.get("message", "")).lower()
            ]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [
            crumb
            for crumb in breadcrumbs
            if "sql" not in str(crumb.get("message", "") if isinstance(crumb, dict) else crumb).lower()
        ]

    return event
