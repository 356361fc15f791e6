"""Inputs for a single document extraction run."""

from __future__ import annotations

from dataclasses import dataclass, field

from docbridge.config.settings import (
    DEFAULT_INVOCATION_TIMEOUT_SECONDS,
    FALLBACK_DOCUMENT_NAME,
    FALLBACK_METHOD,
    FALLBACK_SERVICE,
)


@dataclass(frozen=True)
class FailurePolicy:
    """How failures after the container was built map to exit codes.

    The default keeps soft failures at exit 0 so a build that re-runs the tool
    keeps using a previously generated document.
    """

    escalate_soft_failures: bool = False


@dataclass(frozen=True)
class InvocationContext:
    """Immutable description of what to load, call and where to write."""

    assembly_name: str
    assembly_path: str
    output: str
    document_name: str | None = None
    method: str | None = None
    service: str | None = None
    timeout_seconds: float = DEFAULT_INVOCATION_TIMEOUT_SECONDS
    policy: FailurePolicy = field(default_factory=FailurePolicy)

    def resolved_document_name(self) -> str:
        return self.document_name or FALLBACK_DOCUMENT_NAME

    def resolved_method(self) -> str:
        return self.method or FALLBACK_METHOD

    def resolved_service(self) -> str:
        return self.service or FALLBACK_SERVICE


__all__ = ["FailurePolicy", "InvocationContext"]
