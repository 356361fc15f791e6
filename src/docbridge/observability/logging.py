from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, MutableMapping

import structlog

invocation_id_var: ContextVar[str] = ContextVar("invocation_id", default="")


def _add_invocation_id(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    invocation_id = invocation_id_var.get("")
    if invocation_id:
        event_dict["invocation_id"] = invocation_id
    return event_dict


def configure_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """Configure structlog with contextvar support.

    Logs go to stderr so they never mix with anything a command prints on stdout.
    """

    timestamper = structlog.processors.TimeStamper(fmt="iso")
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            timestamper,
            _add_invocation_id,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING), stream=sys.stderr)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a configured structlog logger."""

    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


def get_invocation_id() -> str:
    """Return the current invocation ID from contextvars."""

    return invocation_id_var.get("")


logger = get_logger("docbridge")
