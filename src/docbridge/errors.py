"""Exception taxonomy for the document extraction pipeline.

Stage functions raise these; :mod:`docbridge.orchestrator` converts them into
diagnostics and exit codes. Nothing here escapes ``process()``.
"""

from __future__ import annotations

import builtins


def format_exception(exc: BaseException) -> str:
    """Render ``exc`` as ``<fully.qualified.Type>: <message>``."""
    exc_type = type(exc)
    if exc_type.__module__ == builtins.__name__:
        type_name = exc_type.__qualname__
    else:
        type_name = f"{exc_type.__module__}.{exc_type.__qualname__}"
    return f"{type_name}: {exc}"


class DocBridgeError(Exception):
    """Base class for every error raised by docbridge itself."""


class LoadError(DocBridgeError):
    """The target module could not be located or imported."""

    def __init__(self, assembly_name: str, cause: BaseException) -> None:
        super().__init__(f"Unable to load '{assembly_name}'. {format_exception(cause)}")
        self.assembly_name = assembly_name
        self.cause = cause


class MissingEntryPoint(DocBridgeError):
    """The target module exposes no ``main`` callable."""

    def __init__(self, assembly_path: str) -> None:
        super().__init__(assembly_path)
        self.assembly_path = assembly_path


class InvalidBootstrapSignature(DocBridgeError):
    """A bootstrap method exists but does not have the expected shape."""

    def __init__(self, method_name: str, assembly_path: str, reason: str) -> None:
        super().__init__(reason)
        self.method_name = method_name
        self.assembly_path = assembly_path
        self.reason = reason


class BootstrapInvocationFailure(DocBridgeError):
    """A bootstrap method raised while building the host."""

    def __init__(self, method_name: str, cause: BaseException) -> None:
        super().__init__(format_exception(cause))
        self.method_name = method_name
        self.cause = cause


class ServiceTypeNotFound(DocBridgeError):
    pass


class MethodNotFound(DocBridgeError):
    pass


class ServiceInstanceNotFound(DocBridgeError):
    pass


class InvocationFailure(DocBridgeError):
    """The generator ran but reported (or raised) a failure."""


class InvocationTimeout(InvocationFailure, TimeoutError):
    """An awaitable generator result did not complete within the deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"The operation did not complete within {timeout_seconds:g} seconds.")
        self.timeout_seconds = timeout_seconds


__all__ = [
    "BootstrapInvocationFailure",
    "DocBridgeError",
    "InvalidBootstrapSignature",
    "InvocationFailure",
    "InvocationTimeout",
    "LoadError",
    "MethodNotFound",
    "MissingEntryPoint",
    "ServiceInstanceNotFound",
    "ServiceTypeNotFound",
    "format_exception",
]
