"""docbridge command-line interface.

Commands live in submodules under `docbridge.cli.*` and register themselves on
the root group.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

import click

from docbridge.observability import init_observability

# Reported when running from a source checkout without installed metadata.
SOURCE_VERSION = "0+source"


def get_app_version() -> str:
    try:
        return version("docbridge")
    except PackageNotFoundError:
        return SOURCE_VERSION


@click.group()
@click.version_option(version=get_app_version(), prog_name="docbridge")
def cli() -> None:
    """docbridge - write a Python application's API document without starting a server."""
    init_observability()


def _register_commands() -> None:
    from docbridge.cli import config, get_document

    config.register(cli)
    get_document.register(cli)


_register_commands()


if __name__ == "__main__":
    cli()
