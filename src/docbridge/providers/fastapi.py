"""OpenAPI document provider for FastAPI applications.

This is the service docbridge looks for when no ``--service`` is given.
Register it in the application's container:

    def build_web_host(args: list[str]) -> Host:
        return (
            HostBuilder()
            .configure_services(lambda services: add_openapi_document_provider(services, app))
            .build()
        )
"""

from __future__ import annotations

import json
from typing import Mapping, TextIO

from fastapi import FastAPI

from docbridge.config.settings import FALLBACK_DOCUMENT_NAME
from docbridge.hosting import ServiceCollection
from docbridge.observability.logging import get_logger

logger = get_logger(__name__)


class OpenApiDocumentProvider:
    """Serialize ``app.openapi()`` for each registered document name."""

    def __init__(self, documents: Mapping[str, FastAPI], *, sort_keys: bool = False) -> None:
        self._documents = dict(documents)
        self._sort_keys = sort_keys

    def get_document_names(self) -> list[str]:
        return sorted(self._documents)

    async def generate_async(self, writer: TextIO, document_name: str) -> bool:
        app = self._documents.get(document_name)
        if app is None:
            logger.warning(
                "openapi_document_unknown",
                document=document_name,
                known=self.get_document_names(),
            )
            return False

        schema = app.openapi()
        writer.write(json.dumps(schema, indent=2, sort_keys=self._sort_keys, ensure_ascii=False))
        writer.write("\n")
        return True


def add_openapi_document_provider(
    services: ServiceCollection,
    app: FastAPI,
    document_name: str = FALLBACK_DOCUMENT_NAME,
    *,
    sort_keys: bool = False,
) -> ServiceCollection:
    return services.add_singleton(
        OpenApiDocumentProvider,
        OpenApiDocumentProvider({document_name: app}, sort_keys=sort_keys),
    )


__all__ = ["OpenApiDocumentProvider", "add_openapi_document_provider"]
