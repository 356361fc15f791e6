"""Sequence the extraction pipeline and map outcomes to exit codes.

    Start -> Loaded -> EntryPointFound -> ContainerBuilt
          -> ServiceResolved -> MethodResolved -> Invoked -> Done

Failures before ``ContainerBuilt`` are fatal and end the run with a dedicated
exit code. Failures after it are soft: they are reported as warnings and, under
the default :class:`~docbridge.context.FailurePolicy`, the run still exits 0 so
that builds relying on a previously generated document keep working.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum, IntEnum

from docbridge import messages
from docbridge.bootstrap import get_services
from docbridge.context import InvocationContext
from docbridge.entrypoint import describe_owner, resolve_entry_point_owner
from docbridge.errors import (
    LoadError,
    MethodNotFound,
    MissingEntryPoint,
    ServiceTypeNotFound,
    format_exception,
)
from docbridge.hosting import ServiceProvider
from docbridge.invoker import invoke
from docbridge.loader import load_assembly
from docbridge.locator import get_service_type
from docbridge.methods import ASYNC_SUFFIX, require_method
from docbridge.observability.logging import get_logger, invocation_id_var
from docbridge.reporting import Reporter

logger = get_logger(__name__)


class ExitCode(IntEnum):
    OK = 0
    LOAD_FAILED = 1
    MISSING_ENTRY_POINT = 2
    NO_CONTAINER = 3
    # Reserved: only used when FailurePolicy.escalate_soft_failures is enabled.
    SOFT_FAILURE = 4


class Stage(str, Enum):
    START = "start"
    LOADED = "loaded"
    ENTRY_POINT_FOUND = "entry_point_found"
    CONTAINER_BUILT = "container_built"
    SERVICE_RESOLVED = "service_resolved"
    METHOD_RESOLVED = "method_resolved"
    INVOKED = "invoked"
    DONE = "done"


class OutcomeSeverity(str, Enum):
    OK = "ok"
    SOFT_FAILURE = "soft_failure"
    FATAL_LOAD_FAILED = "fatal_load_failed"
    FATAL_MISSING_ENTRY_POINT = "fatal_missing_entry_point"
    FATAL_NO_CONTAINER = "fatal_no_container"


@dataclass(frozen=True)
class Outcome:
    success: bool
    severity: OutcomeSeverity
    stage: Stage

    @property
    def is_fatal(self) -> bool:
        return self.severity in (
            OutcomeSeverity.FATAL_LOAD_FAILED,
            OutcomeSeverity.FATAL_MISSING_ENTRY_POINT,
            OutcomeSeverity.FATAL_NO_CONTAINER,
        )


def exit_code_for(outcome: Outcome, context: InvocationContext) -> ExitCode:
    if outcome.severity is OutcomeSeverity.FATAL_LOAD_FAILED:
        return ExitCode.LOAD_FAILED
    if outcome.severity is OutcomeSeverity.FATAL_MISSING_ENTRY_POINT:
        return ExitCode.MISSING_ENTRY_POINT
    if outcome.severity is OutcomeSeverity.FATAL_NO_CONTAINER:
        return ExitCode.NO_CONTAINER
    if outcome.severity is OutcomeSeverity.SOFT_FAILURE and context.policy.escalate_soft_failures:
        return ExitCode.SOFT_FAILURE
    return ExitCode.OK


class _WarningTracker:
    """Forward diagnostics and remember whether any warning was issued."""

    def __init__(self, inner: Reporter) -> None:
        self.inner = inner
        self.warned = False

    def verbose(self, message: str) -> None:
        self.inner.verbose(message)

    def information(self, message: str) -> None:
        self.inner.information(message)

    def warning(self, message: str) -> None:
        self.warned = True
        self.inner.warning(message)

    def error(self, message: str) -> None:
        self.inner.error(message)


def _advance(stage: Stage) -> Stage:
    logger.debug("stage", stage=stage.value)
    return stage


def try_process(context: InvocationContext, services: ServiceProvider, reporter: Reporter) -> bool:
    """Resolve and run the generator against an already built container.

    Returns True for success and for the lenient soft failures (service type or
    method not found); False when the generator failed or raised.
    """
    try:
        return _run_generator(context, services, reporter)[0]
    except Exception as exc:
        logger.warning("unexpected_failure", stage=Stage.CONTAINER_BUILT.value, error=format_exception(exc))
        reporter.warning(format_exception(exc))
        return False


# Where an unclassified exception ends the run, by the last stage reached.
_FATAL_BEFORE_CONTAINER = {
    Stage.START: OutcomeSeverity.FATAL_LOAD_FAILED,
    Stage.LOADED: OutcomeSeverity.FATAL_MISSING_ENTRY_POINT,
    Stage.ENTRY_POINT_FOUND: OutcomeSeverity.FATAL_NO_CONTAINER,
}


def _unexpected(exc: Exception, stage: Stage, reporter: Reporter) -> Outcome:
    """Report an exception no stage classified.

    Before the container exists it is an Error with that stage's fatal exit
    code; afterwards it is a soft failure like any other generator problem.
    """
    detail = format_exception(exc)
    logger.warning("unexpected_failure", stage=stage.value, error=detail)
    fatal = _FATAL_BEFORE_CONTAINER.get(stage)
    if fatal is not None:
        reporter.error(detail)
        return Outcome(False, fatal, stage)
    reporter.warning(detail)
    return Outcome(False, OutcomeSeverity.SOFT_FAILURE, stage)


def _run_generator(
    context: InvocationContext, services: ServiceProvider, reporter: Reporter
) -> tuple[bool, Stage]:
    document_name = context.resolved_document_name()
    method_name = context.resolved_method()
    service_name = context.resolved_service()

    reporter.information(messages.format_using_document(document_name))
    reporter.information(messages.format_using_service(service_name))
    if method_name.endswith(ASYNC_SUFFIX):
        reporter.information(messages.format_using_method(method_name))
    else:
        reporter.information(messages.format_using_methods(method_name, method_name + ASYNC_SUFFIX))

    stage = Stage.CONTAINER_BUILT
    try:
        service_type = get_service_type(service_name)
        stage = _advance(Stage.SERVICE_RESOLVED)
        resolved = require_method(service_type, method_name)
        stage = _advance(Stage.METHOD_RESOLVED)
    except (ServiceTypeNotFound, MethodNotFound) as exc:
        reporter.warning(str(exc))
        return True, stage

    success = invoke(resolved, services, context, reporter)
    return success, _advance(Stage.INVOKED)


def run(context: InvocationContext, reporter: Reporter) -> Outcome:
    """Run every stage and describe how it ended; never raises."""
    token = invocation_id_var.set(uuid.uuid4().hex[:12])
    stage = Stage.START
    try:
        stage = _advance(Stage.START)
        try:
            module = load_assembly(context.assembly_name, context.assembly_path)
        except LoadError as exc:
            reporter.error(messages.format_load_failed(exc.assembly_name, format_exception(exc.cause)))
            return Outcome(False, OutcomeSeverity.FATAL_LOAD_FAILED, stage)
        stage = _advance(Stage.LOADED)

        try:
            owner = resolve_entry_point_owner(module, context.assembly_path)
        except MissingEntryPoint as exc:
            reporter.error(messages.format_missing_entry_point(exc.assembly_path))
            return Outcome(False, OutcomeSeverity.FATAL_MISSING_ENTRY_POINT, stage)
        stage = _advance(Stage.ENTRY_POINT_FOUND)
        reporter.verbose(messages.format_entry_point_owner(describe_owner(owner)))

        services = get_services(owner, context.assembly_path, context.assembly_name, reporter)
        if services is None:
            return Outcome(False, OutcomeSeverity.FATAL_NO_CONTAINER, stage)
        stage = _advance(Stage.CONTAINER_BUILT)

        tracker = _WarningTracker(reporter)
        success, stage = _run_generator(context, services, tracker)
        _advance(Stage.DONE)
        soft = tracker.warned or not success
        return Outcome(
            success,
            OutcomeSeverity.SOFT_FAILURE if soft else OutcomeSeverity.OK,
            stage,
        )
    except Exception as exc:
        return _unexpected(exc, stage, reporter)
    finally:
        invocation_id_var.reset(token)


def process(context: InvocationContext, reporter: Reporter) -> int:
    """Run the pipeline and return the process exit code."""
    outcome = run(context, reporter)
    code = exit_code_for(outcome, context)
    logger.info(
        "document_extraction_finished",
        success=outcome.success,
        severity=outcome.severity.value,
        stage=outcome.stage.value,
        exit_code=int(code),
    )
    return int(code)


__all__ = [
    "ExitCode",
    "Outcome",
    "OutcomeSeverity",
    "Stage",
    "exit_code_for",
    "process",
    "run",
    "try_process",
]
