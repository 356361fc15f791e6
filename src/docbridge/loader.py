"""Import the target application into the current process."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from docbridge.errors import LoadError
from docbridge.observability.logging import get_logger

logger = get_logger(__name__)


def _up(path: Path, levels: int) -> Path:
    for _ in range(levels):
        path = path.parent
    return path


def _import_root(assembly_name: str, path: Path) -> Path:
    """Directory that has to be on ``sys.path`` for ``assembly_name`` to import from ``path``.

    ``path`` may be the module file, a package directory anywhere along the
    dotted name (``src/myapp`` for ``myapp.main``) or a plain source directory.
    """
    segments = assembly_name.split(".")
    if path.is_dir():
        if not (path / "__init__.py").is_file():
            return path
        # Deepest segment whose trailing path components spell the dotted prefix.
        for index in reversed(range(len(segments))):
            prefix = segments[: index + 1]
            if list(path.parts[-len(prefix):]) == prefix:
                return _up(path.parent, index)
        return path
    if path.name == "__init__.py":
        return _up(path.parent.parent, len(segments) - 1)
    return _up(path.parent, len(segments) - 1)


def _load_from_file(assembly_name: str, path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(assembly_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[assembly_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(assembly_name, None)
        raise
    return module


def load_assembly(assembly_name: str, assembly_path: str | Path | None = None) -> ModuleType:
    """Import ``assembly_name``, making ``assembly_path`` importable first.

    A path that does not exist is ignored; it then only names the module in diagnostics.

    A ``.py`` file whose stem does not match the module name is executed
    directly under ``assembly_name``.
    """
    if not assembly_name:
        raise LoadError(assembly_name, ValueError("Module name is empty"))

    try:
        path = Path(assembly_path).resolve() if assembly_path else None
        if path is not None and path.exists():
            last_segment = assembly_name.rsplit(".", 1)[-1]
            if (
                path.is_file()
                and path.suffix == ".py"
                and path.stem not in {last_segment, "__init__"}
                and assembly_name not in sys.modules
            ):
                logger.debug("loading_from_file", module=assembly_name, path=str(path))
                return _load_from_file(assembly_name, path)

            root = str(_import_root(assembly_name, path))
            if root not in sys.path:
                sys.path.insert(0, root)
                logger.debug("sys_path_prepended", path=root)

        module = importlib.import_module(assembly_name)
    except (Exception, SystemExit) as exc:
        # sys.exit() at import time is a load failure.
        raise LoadError(assembly_name, exc) from exc

    logger.debug("module_loaded", module=assembly_name, file=getattr(module, "__file__", None))
    return module


__all__ = ["load_assembly"]
