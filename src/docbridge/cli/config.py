"""Configuration CLI commands."""

from __future__ import annotations

import click
from rich.table import Table

from docbridge.cli.ui import console
from docbridge.config import settings


@click.group()
def config() -> None:
    """Inspect configuration."""


@config.command("show")
def config_show() -> None:
    """Show the effective settings (environment and .env applied)."""
    table = Table(title="docbridge Configuration", show_lines=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Default document", settings.document_name)
    table.add_row("Default method", settings.method)
    table.add_row("Default service", settings.service)
    table.add_row("Invocation timeout (s)", f"{settings.invocation_timeout_seconds:g}")
    table.add_row("Escalate soft failures", str(settings.escalate_soft_failures))
    table.add_row("Log level", settings.log_level)
    table.add_row("JSON logs", str(settings.log_json))

    console.print(table)


def register(cli: click.Group) -> None:
    cli.add_command(config)
