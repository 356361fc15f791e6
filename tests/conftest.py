"""Pytest configuration and shared fixtures."""

import importlib
import os
import sys
import textwrap
import uuid
from pathlib import Path

import httpx
import pytest

# Ensure source tree is importable without editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from docbridge.config import reset_settings_cache  # noqa: E402
from docbridge.context import InvocationContext  # noqa: E402
from docbridge.reporting import RecordingReporter  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers and environment for tests."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")

    # These MUST override any developer shell/.env values to keep the test run deterministic.
    for key in list(os.environ):
        if key.startswith("DOCBRIDGE_"):
            del os.environ[key]
    os.environ["DOCBRIDGE_LOG_LEVEL"] = "WARNING"


@pytest.fixture(autouse=True)
def block_external_http(monkeypatch):
    """Document extraction must never touch the network.

    Allowlist only the ASGI test hosts used with FastAPI's TestClient.
    """

    allowed_hosts = {"test", "testserver", "localhost", "127.0.0.1"}

    async def _async_guard(self, method, url, *args, **kwargs):  # type: ignore[no-untyped-def]
        u = httpx.URL(url) if not isinstance(url, httpx.URL) else url
        if u.scheme in {"http", "https"} and (u.host or "") not in allowed_hosts:
            raise RuntimeError(f"External HTTP blocked in tests: {u!s}")
        return await _orig_async_request(self, method, url, *args, **kwargs)

    def _sync_guard(self, method, url, *args, **kwargs):  # type: ignore[no-untyped-def]
        u = httpx.URL(url) if not isinstance(url, httpx.URL) else url
        if u.scheme in {"http", "https"} and (u.host or "") not in allowed_hosts:
            raise RuntimeError(f"External HTTP blocked in tests: {u!s}")
        return _orig_sync_request(self, method, url, *args, **kwargs)

    _orig_async_request = httpx.AsyncClient.request
    _orig_sync_request = httpx.Client.request
    monkeypatch.setattr(httpx.AsyncClient, "request", _async_guard, raising=True)
    monkeypatch.setattr(httpx.Client, "request", _sync_guard, raising=True)

    yield


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; tests that set env vars need a clean cache."""
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def make_app(tmp_path, monkeypatch):
    """Write a throwaway application module and return its importable name."""

    created: list[str] = []
    monkeypatch.syspath_prepend(str(tmp_path))

    def _make(source: str, *, name: str | None = None) -> str:
        module_name = name or f"docbridge_testapp_{uuid.uuid4().hex[:8]}"
        (tmp_path / f"{module_name}.py").write_text(textwrap.dedent(source), encoding="utf-8")
        importlib.invalidate_caches()
        created.append(module_name)
        return module_name

    yield _make

    for module_name in created:
        sys.modules.pop(module_name, None)


@pytest.fixture
def make_context(tmp_path):
    """Build an InvocationContext writing to ``tmp_path / "openapi.json"``."""

    def _make(module_name: str, **overrides) -> InvocationContext:
        values = {
            "assembly_name": module_name,
            "assembly_path": str(tmp_path / f"{module_name}.py"),
            "output": str(tmp_path / "openapi.json"),
        }
        values.update(overrides)
        return InvocationContext(**values)

    return _make


# A minimal well-behaved application; tests append their own service classes.
HOSTED_APP = '''
from docbridge.hosting import Host, HostBuilder


class DocumentService:
    def generate(self, writer, document_name: str) -> bool:
        writer.write(f"document {document_name}\\n")
        return True


def main() -> None:
    raise SystemExit("not meant to run")


# Tests append classes here; they are registered when the host is built.
EXTRA_SERVICES = []


def _configure(services):
    services.add_singleton(DocumentService, DocumentService())
    for service_type in EXTRA_SERVICES:
        services.add_singleton(service_type, factory=lambda _provider, cls=service_type: cls())


def build_web_host(args: list[str]) -> Host:
    return HostBuilder().configure_services(_configure).build()
'''


@pytest.fixture
def hosted_app_source() -> str:
    return HOSTED_APP
