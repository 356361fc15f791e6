"""Resolve the document-generation method on a service type.

The method must accept ``(writer, document_name)``: a writable text stream and
a string. It may return nothing, a bool, or an awaitable producing either.
"""

from __future__ import annotations

import asyncio
import collections.abc
import concurrent.futures
import inspect
import io
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

from docbridge import messages
from docbridge.errors import MethodNotFound
from docbridge.locator import qualified_name
from docbridge.observability.logging import get_logger

logger = get_logger(__name__)

ASYNC_SUFFIX = "_async"

_AWAITABLE_ORIGINS = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
    asyncio.Task,
    concurrent.futures.Future,
)


class ReturnShape(str, Enum):
    NONE = "none"
    BOOL = "bool"
    AWAITABLE_BOOL = "awaitable[bool]"
    AWAITABLE_NONE = "awaitable[none]"
    # No return annotation: the invoker decides from the returned value.
    UNDECLARED = "undeclared"


@dataclass(frozen=True)
class ResolvedMethod:
    """A generator method that matched the expected signature.

    ``shape`` is the declared return annotation and only decides whether a
    candidate matches. Annotations are not enforced at call time, so the
    invoker normalizes whatever value the call actually produces.
    """

    service_type: type
    name: str
    shape: ReturnShape

    @property
    def service_name(self) -> str:
        return qualified_name(self.service_type)


def candidate_names(method_name: str) -> tuple[str, ...]:
    """Names to try, in order."""
    if method_name.endswith(ASYNC_SUFFIX):
        return (method_name,)
    return (method_name, method_name + ASYNC_SUFFIX)


def _is_text_writer(annotation: Any) -> bool:
    if annotation in (typing.TextIO, typing.IO):
        return True
    if typing.get_origin(annotation) is typing.IO:
        return typing.get_args(annotation) == (str,)
    return isinstance(annotation, type) and issubclass(annotation, io.TextIOBase)


def _shape_of(annotation: Any, is_coroutine: bool) -> ReturnShape | None:
    if annotation is inspect.Signature.empty:
        return ReturnShape.UNDECLARED

    awaited = is_coroutine
    if not is_coroutine:
        origin = typing.get_origin(annotation) or annotation
        if isinstance(origin, type) and issubclass(origin, _AWAITABLE_ORIGINS):
            args = typing.get_args(annotation)
            annotation = args[-1] if args else Any
            awaited = True

    if annotation is Any and awaited:
        return ReturnShape.AWAITABLE_NONE
    if annotation is None or annotation is type(None):
        return ReturnShape.AWAITABLE_NONE if awaited else ReturnShape.NONE
    if annotation is bool:
        return ReturnShape.AWAITABLE_BOOL if awaited else ReturnShape.BOOL
    return None


def _match(service_type: type, name: str) -> ResolvedMethod | None:
    raw = inspect.getattr_static(service_type, name, None)
    if isinstance(raw, staticmethod):
        func, bound_params = raw.__func__, 0
    elif isinstance(raw, classmethod):
        func, bound_params = raw.__func__, 1
    elif inspect.isfunction(raw):
        func, bound_params = raw, 1
    else:
        return None

    try:
        signature = inspect.signature(func, eval_str=True)
    except Exception as exc:
        # An annotation that cannot be evaluated disqualifies the candidate.
        logger.debug("method_signature_unreadable", method=name, error=str(exc))
        return None

    params = list(signature.parameters.values())[bound_params:]
    if len(params) != 2 or any(
        p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
        for p in params
    ):
        return None

    writer, document = params
    if writer.annotation is not inspect.Parameter.empty and not _is_text_writer(writer.annotation):
        return None
    if document.annotation is not inspect.Parameter.empty and document.annotation is not str:
        return None

    shape = _shape_of(signature.return_annotation, inspect.iscoroutinefunction(func))
    if shape is None:
        return None
    return ResolvedMethod(service_type=service_type, name=name, shape=shape)


def resolve_method(service_type: type, method_name: str) -> ResolvedMethod | None:
    """Return the first candidate with the expected signature, or None."""
    for name in candidate_names(method_name):
        resolved = _match(service_type, name)
        if resolved is not None:
            logger.debug("method_resolved", method=name, shape=resolved.shape.value)
            return resolved
    return None


def require_method(service_type: type, method_name: str) -> ResolvedMethod:
    """Like :func:`resolve_method` but raise :class:`MethodNotFound`."""
    resolved = resolve_method(service_type, method_name)
    if resolved is not None:
        return resolved

    names = candidate_names(method_name)
    service_name = qualified_name(service_type)
    if len(names) == 1:
        raise MethodNotFound(messages.format_method_not_found(names[0], service_name))
    raise MethodNotFound(messages.format_methods_not_found(names[0], names[1], service_name))


__all__ = [
    "ASYNC_SUFFIX",
    "ResolvedMethod",
    "ReturnShape",
    "candidate_names",
    "require_method",
    "resolve_method",
]
