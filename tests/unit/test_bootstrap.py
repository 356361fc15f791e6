"""Unit tests for building the service container."""

from __future__ import annotations

import importlib

import pytest

from docbridge.bootstrap import get_services
from docbridge.hosting import DefaultServiceProvider


def _owner(make_app, source: str):
    return importlib.import_module(make_app(source))


def test_legacy_convention_returns_host_services(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        from docbridge.hosting import Host, ServiceCollection

        def build_web_host(args: list[str]) -> Host:
            assert args == []
            return Host(ServiceCollection().add_singleton(str, "registered").build_service_provider())
        """,
    )

    services = get_services(owner, "app.py", "app", reporter)

    assert isinstance(services, DefaultServiceProvider)
    assert services.get_service(str) == "registered"
    assert reporter.errors == []


def test_builder_convention_builds_then_returns_services(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        from docbridge.hosting import HostBuilder

        def create_web_host_builder(args: list[str]) -> HostBuilder:
            return HostBuilder().configure_services(lambda s: s.add_singleton(int, 7))
        """,
    )

    services = get_services(owner, "app.py", "app", reporter)

    assert services is not None
    assert services.get_service(int) == 7


def test_legacy_convention_has_priority(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        from docbridge.hosting import Host, HostBuilder, ServiceCollection

        def build_web_host(args):
            return Host(ServiceCollection().add_singleton(str, "legacy").build_service_provider())

        def create_web_host_builder(args):
            raise AssertionError("must not be called")
        """,
    )

    services = get_services(owner, "app.py", "app", reporter)

    assert services is not None
    assert services.get_service(str) == "legacy"


def test_duck_typed_host_without_annotations(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        class Container:
            def get_service(self, service_type):
                return service_type.__name__

        class MyHost:
            services = Container()

        def build_web_host(args):
            return MyHost()
        """,
    )

    services = get_services(owner, "app.py", "app", reporter)

    assert services is not None
    assert services.get_service(dict) == "dict"


def test_static_and_class_methods_on_entry_point_class(make_app, reporter) -> None:
    module = _owner(
        make_app,
        """
        from docbridge.hosting import HostBuilder, WebHostBuilder

        class Program:
            @staticmethod
            def main():
                pass

            @classmethod
            def create_web_host_builder(cls, args: list[str]) -> WebHostBuilder:
                return HostBuilder().configure_services(lambda s: s.add_singleton(str, cls.__name__))
        """,
    )

    services = get_services(module.Program, "app.py", "app", reporter)

    assert services is not None
    assert services.get_service(str) == "Program"


@pytest.mark.parametrize(
    "definition, reason",
    [
        ("def build_web_host(args, extra):\n    pass\n", "exactly one positional parameter"),
        ("def build_web_host(*args):\n    pass\n", "exactly one positional parameter"),
        ("def build_web_host(args: str):\n    pass\n", "annotated as list[str]"),
        ("def build_web_host(args: list[str]) -> int:\n    pass\n", "return type must be a WebHost"),
        ("build_web_host = 'nope'\n", "not callable"),
    ],
)
def test_legacy_signature_mismatch_yields_no_container(make_app, reporter, definition: str, reason: str) -> None:
    owner = _owner(make_app, definition)

    assert get_services(owner, "app.py", "app", reporter) is None
    assert len(reporter.errors) == 1
    assert reporter.errors[0].startswith("build_web_host method found in app.py does not have expected signature.")
    assert reason in reporter.errors[0]


def test_instance_method_on_entry_point_class_is_rejected(make_app, reporter) -> None:
    module = _owner(
        make_app,
        """
        class Program:
            def build_web_host(self, args):
                raise AssertionError("must not be called")
        """,
    )

    assert get_services(module.Program, "app.py", "app", reporter) is None
    assert "staticmethod or classmethod" in reporter.errors[0]


def test_builder_signature_mismatch_yields_no_container(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        from docbridge.hosting import Host

        def create_web_host_builder(args: list[str]) -> Host:
            pass
        """,
    )

    assert get_services(owner, "app.py", "app", reporter) is None
    assert reporter.errors[0].startswith("create_web_host_builder method found in app.py")


def test_bootstrap_exception_is_reported(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        class ConfigurationMissing(Exception):
            pass

        def build_web_host(args):
            raise ConfigurationMissing("DATABASE_URL is not set")
        """,
    )

    assert get_services(owner, "app.py", "app", reporter) is None
    assert reporter.errors == [
        f"build_web_host method threw: {owner.__name__}.ConfigurationMissing: DATABASE_URL is not set"
    ]


def test_builtin_exception_is_reported_without_module(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        from docbridge.hosting import HostBuilder

        def create_web_host_builder(args):
            raise ValueError("bad port")
        """,
    )

    assert get_services(owner, "app.py", "app", reporter) is None
    assert reporter.errors == ["create_web_host_builder method threw: ValueError: bad port"]


def test_no_bootstrap_method(make_app, reporter) -> None:
    owner = _owner(make_app, "def main():\n    pass\n")

    assert get_services(owner, "app.py", "app", reporter) is None
    assert "neither 'build_web_host' nor 'create_web_host_builder'" in reporter.errors[0]


def test_host_without_services_is_reported(make_app, reporter) -> None:
    owner = _owner(
        make_app,
        """
        class EmptyHost:
            services = None

        def build_web_host(args):
            return EmptyHost()
        """,
    )

    assert get_services(owner, "app.py", "app", reporter) is None
    assert reporter.errors == ["build_web_host method did not provide a service container."]
