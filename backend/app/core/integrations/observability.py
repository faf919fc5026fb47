"""
Observability hooks.
Exceptions and job summaries are currently reported through structured logs.
"""

from typing import Any, Dict, Optional
from fastapi import Request
import logging

from app.core.config import settings

logger = logging.getLogger(__name__)


def setup_observability() -> None:
    """Announce the observability target for this process."""
    logger.info(
        "Setting up observability",
        extra={
            "otel_endpoint": settings.OTEL_EXPORTER_OTLP_ENDPOINT,
            "service_name": settings.OTEL_SERVICE_NAME,
            "environment": settings.OTEL_ENVIRONMENT,
        },
    )


def record_exception(exc: Exception, request: Optional[Request] = None) -> None:
    """
    Record an exception in the observability backend.

    Args:
        exc: The exception that occurred
        request: The request being served, if any (scheduled jobs pass None)
    """
    logger.error(
        f"Exception recorded: {type(exc).__name__}",
        extra={
            "exception_message": str(exc),
            "path": request.url.path if request is not None else None,
        },
    )


def record_job_run(job_name: str, summary: Dict[str, Any]) -> None:
    """Record the outcome of a scheduled batch job."""
    logger.info(
        f"Job run finished: {job_name}",
        extra={"job": job_name, "summary": summary},
    )
