"""`get-document` command: load an application and write its API document."""

from __future__ import annotations

import click

from docbridge.config import settings
from docbridge.context import FailurePolicy, InvocationContext
from docbridge.orchestrator import process
from docbridge.reporting import ConsoleReporter


@click.command("get-document")
@click.option(
    "--assembly",
    "assembly_name",
    required=True,
    help="Importable module of the application (e.g. 'myapp.main').",
)
@click.option(
    "--assembly-path",
    default=None,
    type=click.Path(exists=True),
    help="File or source directory of the module; made importable before loading.",
)
@click.option(
    "--output",
    required=True,
    type=click.Path(dir_okay=False, writable=True),
    help="File the document is written to (created or truncated).",
)
@click.option("--document", "document_name", default=None, help="Document name passed to the generator.")
@click.option("--method", default=None, help="Generator method name.")
@click.option("--service", default=None, help="Fully qualified type name of the generator service.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for an asynchronous generator.",
)
@click.option(
    "--escalate-soft-failures/--no-escalate-soft-failures",
    default=None,
    help="Exit 4 instead of 0 on warnings raised after the container was built.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show verbose output.")
@click.option("--no-color", is_flag=True, help="Don't colorize output.")
@click.option("--prefix-output", is_flag=True, help="Prefix output with severity.")
@click.pass_context
def get_document(
    ctx: click.Context,
    assembly_name: str,
    assembly_path: str | None,
    output: str,
    document_name: str | None,
    method: str | None,
    service: str | None,
    timeout: float | None,
    escalate_soft_failures: bool | None,
    verbose: bool,
    no_color: bool,
    prefix_output: bool,
) -> None:
    """Write the API document produced by the application's generator service."""
    escalate = (
        settings.escalate_soft_failures if escalate_soft_failures is None else escalate_soft_failures
    )
    context = InvocationContext(
        assembly_name=assembly_name,
        assembly_path=assembly_path or assembly_name,
        output=output,
        document_name=document_name or settings.document_name,
        method=method or settings.method,
        service=service or settings.service,
        timeout_seconds=timeout if timeout is not None else settings.invocation_timeout_seconds,
        policy=FailurePolicy(escalate_soft_failures=escalate),
    )
    reporter = ConsoleReporter(verbose=verbose, no_color=no_color, prefix_output=prefix_output)
    ctx.exit(process(context, reporter))


def register(cli: click.Group) -> None:
    cli.add_command(get_document)
