"""Locate the program entry point of a loaded module.

The entry point is only used to find where bootstrap functions live; it is
never called.
"""

from __future__ import annotations

import inspect
import sys
from types import ModuleType
from typing import Union

from docbridge.errors import MissingEntryPoint

ENTRY_POINT_NAME = "main"

EntryPointOwner = Union[type, ModuleType]


def _walk(root: object, dotted: str) -> object | None:
    target: object | None = root
    for part in dotted.split("."):
        target = getattr(target, part, None)
        if target is None:
            return None
    return target


def resolve_entry_point_owner(module: ModuleType, assembly_path: str | None = None) -> EntryPointOwner:
    """Return the class or module that declares ``module.main``.

    ``main = Program.main`` resolves to ``Program``; a plain function resolves to
    the module that defines it, which may differ from ``module`` when ``main``
    is re-exported.
    """
    entry = getattr(module, ENTRY_POINT_NAME, None)
    if entry is None or not callable(entry):
        raise MissingEntryPoint(assembly_path or module.__name__)

    # classmethod accessed through its class
    if inspect.ismethod(entry) and isinstance(entry.__self__, type):
        return entry.__self__

    if not inspect.isroutine(entry):
        # callable objects (e.g. CLI command instances) belong to the module exposing them
        return module

    func = getattr(entry, "__func__", entry)
    defining = sys.modules.get(getattr(func, "__module__", None) or "", module)
    qualname = getattr(func, "__qualname__", "")
    if "." in qualname and "<locals>" not in qualname:
        owner = _walk(defining, qualname.rsplit(".", 1)[0])
        if isinstance(owner, type):
            return owner
    return defining


def describe_owner(owner: EntryPointOwner) -> str:
    if isinstance(owner, ModuleType):
        return owner.__name__
    return f"{owner.__module__}.{owner.__qualname__}"


__all__ = ["ENTRY_POINT_NAME", "EntryPointOwner", "describe_owner", "resolve_entry_point_owner"]
