"""Diagnostic sinks.

The pipeline only needs somewhere to send Information, Warning and Error lines
(plus optional verbose chatter). The console reporter renders them with Rich and
mirrors each one to structlog.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from docbridge.observability.logging import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    """Diagnostic severities."""

    VERBOSE = "verbose"
    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"


class Reporter(Protocol):
    def verbose(self, message: str) -> None: ...

    def information(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


_PREFIXES = {
    Severity.VERBOSE: "verbose:",
    Severity.INFORMATION: "info:",
    Severity.WARNING: "warn:",
    Severity.ERROR: "error:",
}

_STYLES = {
    Severity.VERBOSE: "grey62",
    Severity.INFORMATION: "",
    Severity.WARNING: "yellow",
    Severity.ERROR: "bold red",
}


class ConsoleReporter:
    """Write diagnostics to stderr through a Rich console."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        verbose: bool = False,
        no_color: bool = False,
        prefix_output: bool = False,
    ) -> None:
        self.console = console or Console(stderr=True, no_color=no_color, highlight=False)
        self.is_verbose = verbose
        self.prefix_output = prefix_output

    def _write(self, severity: Severity, message: str) -> None:
        text = escape(message)
        if self.prefix_output:
            text = f"{_PREFIXES[severity]} {text}"
        style = _STYLES[severity]
        if style:
            text = f"[{style}]{text}[/{style}]"
        self.console.print(text, soft_wrap=True)

    def verbose(self, message: str) -> None:
        logger.debug("diagnostic", severity=Severity.VERBOSE.value, message=message)
        if self.is_verbose:
            self._write(Severity.VERBOSE, message)

    def information(self, message: str) -> None:
        logger.info("diagnostic", severity=Severity.INFORMATION.value, message=message)
        self._write(Severity.INFORMATION, message)

    def warning(self, message: str) -> None:
        logger.warning("diagnostic", severity=Severity.WARNING.value, message=message)
        self._write(Severity.WARNING, message)

    def error(self, message: str) -> None:
        logger.error("diagnostic", severity=Severity.ERROR.value, message=message)
        self._write(Severity.ERROR, message)


class RecordingReporter:
    """Collect diagnostics in memory, for embedding callers and tests."""

    def __init__(self) -> None:
        self.records: list[tuple[Severity, str]] = []

    def verbose(self, message: str) -> None:
        self.records.append((Severity.VERBOSE, message))

    def information(self, message: str) -> None:
        self.records.append((Severity.INFORMATION, message))

    def warning(self, message: str) -> None:
        self.records.append((Severity.WARNING, message))

    def error(self, message: str) -> None:
        self.records.append((Severity.ERROR, message))

    def messages(self, severity: Severity) -> list[str]:
        return [message for level, message in self.records if level == severity]

    @property
    def warnings(self) -> list[str]:
        return self.messages(Severity.WARNING)

    @property
    def errors(self) -> list[str]:
        return self.messages(Severity.ERROR)


__all__ = ["ConsoleReporter", "RecordingReporter", "Reporter", "Severity"]
