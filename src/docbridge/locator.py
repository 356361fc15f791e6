"""Find a class by fully-qualified name among every imported module.

Importing the target application usually imports many other modules, and any of
them may define the document-generation service, so the whole of
``sys.modules`` is scanned in import order.
"""

from __future__ import annotations

import sys
from types import ModuleType
from typing import Iterable

from docbridge import messages
from docbridge.errors import ServiceTypeNotFound, format_exception
from docbridge.observability.logging import get_logger

logger = get_logger(__name__)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _find_in_module(module: ModuleType, type_name: str) -> type | None:
    prefix = f"{module.__name__}."
    if not type_name.startswith(prefix):
        return None

    target: object = module
    for part in type_name[len(prefix):].split("."):
        try:
            target = getattr(target, part, None)
        except Exception as exc:
            # Lazy module attributes (PEP 562 __getattr__) may fail arbitrarily.
            logger.debug("type_lookup_failed", module=module.__name__, error=format_exception(exc))
            return None
        if target is None:
            return None

    # Re-exports do not count: the class must be defined under this name.
    if isinstance(target, type) and qualified_name(target) == type_name:
        return target
    return None


def find_service_type(type_name: str, modules: Iterable[ModuleType] | None = None) -> type | None:
    """Return the first class named ``type_name``, or None."""
    if modules is None:
        # Snapshot: attribute access may import more modules while we iterate.
        modules = list(sys.modules.values())

    for module in modules:
        if not isinstance(module, ModuleType):
            continue
        found = _find_in_module(module, type_name)
        if found is not None:
            return found
    return None


def get_service_type(type_name: str, modules: Iterable[ModuleType] | None = None) -> type:
    """Like :func:`find_service_type` but raise :class:`ServiceTypeNotFound`."""
    found = find_service_type(type_name, modules)
    if found is None:
        raise ServiceTypeNotFound(messages.format_service_type_not_found(type_name))
    return found


__all__ = ["find_service_type", "get_service_type", "qualified_name"]
