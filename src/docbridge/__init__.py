"""docbridge - extract API documents from Python applications in-process.

Typical embedding use:

    from docbridge import InvocationContext, process
    from docbridge.reporting import ConsoleReporter

    exit_code = process(
        InvocationContext(assembly_name="myapp.main", assembly_path="src", output="openapi.json"),
        ConsoleReporter(),
    )
"""

from __future__ import annotations

from docbridge.context import FailurePolicy, InvocationContext
from docbridge.orchestrator import ExitCode, Outcome, process, run, try_process

__all__ = [
    "ExitCode",
    "FailurePolicy",
    "InvocationContext",
    "Outcome",
    "process",
    "run",
    "try_process",
]
