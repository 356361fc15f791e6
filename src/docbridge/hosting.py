"""Hosting contracts for applications that expose an API document.

docbridge never requires an application to import this module: the bootstrap
and lookup steps match these shapes structurally, the same way
``collections.abc`` recognises iterables. Applications without a container of
their own can use :class:`ServiceCollection` and :class:`HostBuilder`.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _check_members(cls: type, *names: str) -> Any:
    """Return True when every name is defined (or annotated) somewhere in the MRO."""
    for name in names:
        for base in cls.__mro__:
            if name in base.__dict__:
                if base.__dict__[name] is None:
                    return NotImplemented
                break
            if name in inspect.get_annotations(base):
                break
        else:
            return NotImplemented
    return True


class ServiceProvider(ABC):
    """A container from which service instances are requested by type."""

    @abstractmethod
    def get_service(self, service_type: type[T]) -> T | None:
        """Return the registered instance for ``service_type`` or None."""

    @classmethod
    def __subclasshook__(cls, C: type) -> Any:
        if cls is ServiceProvider:
            return _check_members(C, "get_service")
        return NotImplemented


class WebHost(ABC):
    """A built host exposing its service container as ``services``."""

    @property
    @abstractmethod
    def services(self) -> ServiceProvider: ...

    @classmethod
    def __subclasshook__(cls, C: type) -> Any:
        if cls is WebHost:
            return _check_members(C, "services")
        return NotImplemented


class WebHostBuilder(ABC):
    """Something whose ``build()`` returns a :class:`WebHost`."""

    @abstractmethod
    def build(self) -> WebHost: ...

    @classmethod
    def __subclasshook__(cls, C: type) -> Any:
        if cls is WebHostBuilder:
            return _check_members(C, "build")
        return NotImplemented


Factory = Callable[[ServiceProvider], Any]


class ServiceCollection:
    """Singleton registrations keyed by type."""

    def __init__(self) -> None:
        self._factories: dict[type, Factory] = {}

    def add_singleton(
        self,
        service_type: type,
        instance: Any = None,
        *,
        factory: Factory | None = None,
    ) -> "ServiceCollection":
        if (instance is None) == (factory is None):
            raise ValueError("Provide exactly one of 'instance' or 'factory'")
        if factory is None:
            self._factories[service_type] = lambda _provider: instance
        else:
            self._factories[service_type] = factory
        return self

    def __contains__(self, service_type: object) -> bool:
        return service_type in self._factories

    def build_service_provider(self) -> "DefaultServiceProvider":
        return DefaultServiceProvider(dict(self._factories))


class DefaultServiceProvider(ServiceProvider):
    """Resolve registrations lazily; each factory runs at most once."""

    def __init__(self, factories: dict[type, Factory]) -> None:
        self._factories = factories
        self._instances: dict[type, Any] = {}

    def get_service(self, service_type: type[T]) -> T | None:
        if service_type in self._instances:
            return self._instances[service_type]
        factory = self._factories.get(service_type)
        if factory is None:
            return None
        instance = factory(self)
        self._instances[service_type] = instance
        return instance


class Host(WebHost):
    def __init__(self, services: ServiceProvider) -> None:
        self._services = services

    @property
    def services(self) -> ServiceProvider:
        return self._services


class HostBuilder(WebHostBuilder):
    """Collect ``configure_services`` callbacks and build a :class:`Host`."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[[ServiceCollection], None]] = []

    def configure_services(self, callback: Callable[[ServiceCollection], None]) -> "HostBuilder":
        self._callbacks.append(callback)
        return self

    def build(self) -> Host:
        collection = ServiceCollection()
        for callback in self._callbacks:
            callback(collection)
        return Host(collection.build_service_provider())


__all__ = [
    "DefaultServiceProvider",
    "Host",
    "HostBuilder",
    "ServiceCollection",
    "ServiceProvider",
    "WebHost",
    "WebHostBuilder",
]
