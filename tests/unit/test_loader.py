"""Unit tests for module loading."""

from __future__ import annotations

import sys

import pytest

from docbridge.errors import LoadError
from docbridge.loader import load_assembly


def test_loads_module_already_on_sys_path(make_app) -> None:
    name = make_app("ANSWER = 42\n")

    module = load_assembly(name)

    assert module.ANSWER == 42
    assert sys.modules[name] is module


def test_package_directory_is_made_importable(tmp_path, monkeypatch) -> None:
    package = tmp_path / "src" / "docbridge_pkgapp"
    package.mkdir(parents=True)
    (package / "__init__.py").write_text("")
    (package / "server.py").write_text("NAME = 'server'\n")
    monkeypatch.setattr(sys, "path", list(sys.path))

    try:
        module = load_assembly("docbridge_pkgapp.server", tmp_path / "src" / "docbridge_pkgapp" / "server.py")
        assert module.NAME == "server"
        assert str((tmp_path / "src").resolve()) in sys.path
    finally:
        sys.modules.pop("docbridge_pkgapp.server", None)
        sys.modules.pop("docbridge_pkgapp", None)


def test_source_directory_is_used_as_import_root(tmp_path, monkeypatch) -> None:
    (tmp_path / "docbridge_rootapp.py").write_text("ROOT = True\n")
    monkeypatch.setattr(sys, "path", list(sys.path))

    try:
        module = load_assembly("docbridge_rootapp", tmp_path)
        assert module.ROOT is True
        assert sys.path[0] == str(tmp_path.resolve())
    finally:
        sys.modules.pop("docbridge_rootapp", None)


def test_script_with_other_stem_is_loaded_under_requested_name(tmp_path) -> None:
    script = tmp_path / "app.py"
    script.write_text("KIND = 'script'\n")

    try:
        module = load_assembly("docbridge_scriptapp", script)
        assert module.KIND == "script"
        assert sys.modules["docbridge_scriptapp"] is module
    finally:
        sys.modules.pop("docbridge_scriptapp", None)


def test_script_failing_on_import_is_not_left_in_sys_modules(tmp_path) -> None:
    script = tmp_path / "broken_script.py"
    script.write_text("raise RuntimeError('boom')\n")

    with pytest.raises(LoadError) as excinfo:
        load_assembly("docbridge_brokenscript", script)

    assert "docbridge_brokenscript" not in sys.modules
    assert "RuntimeError: boom" in str(excinfo.value)


def test_missing_module_raises_load_error() -> None:
    with pytest.raises(LoadError) as excinfo:
        load_assembly("docbridge_definitely_missing")

    assert excinfo.value.assembly_name == "docbridge_definitely_missing"
    assert isinstance(excinfo.value.cause, ModuleNotFoundError)


def test_syntax_error_raises_load_error(make_app) -> None:
    name = make_app("def broken(:\n")

    with pytest.raises(LoadError) as excinfo:
        load_assembly(name)

    assert isinstance(excinfo.value.cause, SyntaxError)


def test_empty_name_raises_load_error() -> None:
    with pytest.raises(LoadError):
        load_assembly("")


def test_module_calling_sys_exit_raises_load_error(make_app) -> None:
    name = make_app("import sys\n\nsys.exit(5)\n")

    with pytest.raises(LoadError) as excinfo:
        load_assembly(name)

    assert isinstance(excinfo.value.cause, SystemExit)
    assert name not in sys.modules


def test_parent_package_directory_resolves_to_source_root(tmp_path, monkeypatch) -> None:
    package = tmp_path / "src" / "docbridge_nestedapp"
    (package / "api").mkdir(parents=True)
    (package / "__init__.py").write_text("")
    (package / "api" / "__init__.py").write_text("")
    (package / "api" / "server.py").write_text("NAME = 'nested'\n")
    monkeypatch.setattr(sys, "path", list(sys.path))

    try:
        module = load_assembly("docbridge_nestedapp.api.server", package)
        assert module.NAME == "nested"
        assert sys.path[0] == str((tmp_path / "src").resolve())
    finally:
        for module_name in ("docbridge_nestedapp.api.server", "docbridge_nestedapp.api", "docbridge_nestedapp"):
            sys.modules.pop(module_name, None)
