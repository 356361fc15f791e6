"""Build the application's service container from its entry-point owner.

Two conventions are recognised, in priority order:

1. ``build_web_host(args: list[str]) -> WebHost``; the container is ``host.services``.
2. ``create_web_host_builder(args: list[str]) -> WebHostBuilder``; the container is
   ``builder.build().services``.

The first convention that is *present* decides: a malformed ``build_web_host``
is an error even when ``create_web_host_builder`` would have worked.
"""

from __future__ import annotations

import collections.abc
import inspect
import typing
from types import ModuleType
from typing import Any, Callable

from docbridge import messages
from docbridge.entrypoint import EntryPointOwner
from docbridge.errors import BootstrapInvocationFailure, InvalidBootstrapSignature, format_exception
from docbridge.hosting import ServiceProvider, WebHost, WebHostBuilder
from docbridge.observability.logging import get_logger
from docbridge.reporting import Reporter

logger = get_logger(__name__)

LEGACY_METHOD = "build_web_host"
BUILDER_METHOD = "create_web_host_builder"

_MISSING = object()


def _is_string_list(annotation: Any) -> bool:
    if annotation is list:
        return True
    origin = typing.get_origin(annotation)
    return origin in (list, collections.abc.Sequence) and typing.get_args(annotation) == (str,)


def _lookup(owner: EntryPointOwner, name: str) -> tuple[Any, bool]:
    """Return ``(callable_or_marker, is_static)`` for ``owner.name``."""
    if isinstance(owner, ModuleType):
        value = owner.__dict__.get(name, _MISSING)
        return value, value is not _MISSING and inspect.isroutine(value)

    raw = inspect.getattr_static(owner, name, _MISSING)
    if raw is _MISSING:
        return _MISSING, False
    return getattr(owner, name), isinstance(raw, (staticmethod, classmethod))


def _check_signature(func: Any, is_static: bool, expected_return: type) -> str | None:
    """Return why ``func`` does not match, or None when it does."""
    if not callable(func):
        return "It is not callable."
    if not is_static:
        return "It must be a module-level function, staticmethod or classmethod."
    try:
        signature = inspect.signature(func, eval_str=True)
    except Exception as exc:
        return f"Its signature could not be inspected ({format_exception(exc)})."

    params = list(signature.parameters.values())
    if len(params) != 1 or params[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        return "It must take exactly one positional parameter (the argument list)."

    annotation = params[0].annotation
    if annotation is not inspect.Parameter.empty and not _is_string_list(annotation):
        return f"Its parameter must be annotated as list[str], not {annotation!r}."

    returns = signature.return_annotation
    if returns is not inspect.Signature.empty and not (
        isinstance(returns, type) and issubclass(returns, expected_return)
    ):
        return f"Its return type must be a {expected_return.__name__}, not {returns!r}."
    return None


def _build(
    name: str,
    func: Any,
    is_static: bool,
    expected_return: type,
    assembly_path: str,
    extract: Callable[[Any], Any],
) -> Any:
    reason = _check_signature(func, is_static, expected_return)
    if reason is not None:
        raise InvalidBootstrapSignature(name, assembly_path, reason)

    logger.debug("bootstrap_invoking", method=name)
    try:
        return extract(func([]))
    except (Exception, SystemExit) as exc:
        raise BootstrapInvocationFailure(name, exc) from exc


def get_services(
    owner: EntryPointOwner,
    assembly_path: str,
    assembly_name: str,
    reporter: Reporter,
) -> ServiceProvider | None:
    """Return the application's container, or None after reporting why not."""
    conventions: tuple[tuple[str, type, Callable[[Any], Any]], ...] = (
        (LEGACY_METHOD, WebHost, lambda host: host.services),
        (BUILDER_METHOD, WebHostBuilder, lambda builder: builder.build().services),
    )

    for name, expected_return, extract in conventions:
        func, is_static = _lookup(owner, name)
        if func is _MISSING:
            continue

        reporter.verbose(messages.format_using_method(name))
        try:
            services = _build(
                name, func, is_static, expected_return, assembly_path, extract
            )
        except InvalidBootstrapSignature as exc:
            reporter.error(messages.format_invalid_signature(exc.method_name, assembly_path, exc.reason))
            return None
        except BootstrapInvocationFailure as exc:
            reporter.error(messages.format_bootstrap_threw(exc.method_name, str(exc)))
            return None

        if services is None:
            reporter.error(messages.format_no_container(name))
        return services

    logger.debug("bootstrap_not_found", module=assembly_name)
    reporter.error(messages.format_no_bootstrap(assembly_path, (LEGACY_METHOD, BUILDER_METHOD)))
    return None


__all__ = ["BUILDER_METHOD", "LEGACY_METHOD", "get_services"]
