"""docbridge observability module - structured logging.

User-facing diagnostics are written by :mod:`docbridge.reporting`; every
diagnostic is mirrored to a structlog logger so build systems can collect the
same events as machine-readable records.

Usage:
    from docbridge.observability import get_logger

    logger = get_logger(__name__)
    logger.info("service_resolved", service=service_name)
"""

from __future__ import annotations

from docbridge.observability.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "init_observability",
]

_OBSERVABILITY_INITIALIZED = False


def init_observability(level: str | None = None, json_output: bool | None = None) -> None:
    """Initialize logging for the process (idempotent).

    This is intentionally *not* executed on import so `docbridge` can be used as a
    library (or imported by the application it inspects) without mutating global
    logging configuration.
    """
    global _OBSERVABILITY_INITIALIZED
    if _OBSERVABILITY_INITIALIZED:
        return

    from docbridge.config import settings

    configure_logging(
        level=level or settings.log_level,
        json_output=settings.log_json if json_output is None else json_output,
    )
    _OBSERVABILITY_INITIALIZED = True
