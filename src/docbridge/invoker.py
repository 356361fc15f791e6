"""Call the resolved generator and normalize what it returns.

| Returned value                  | success                       |
|---------------------------------|-------------------------------|
| ``None``                        | ``True``                      |
| ``bool``                        | the value                     |
| awaitable producing ``bool``    | the value, after a bounded wait |
| awaitable producing anything else | ``True``, after a bounded wait |

Awaitables are driven on a private event loop in a daemon thread so a
generator that never yields cannot hang the caller. On timeout the task is
cancelled; work that ignores cancellation keeps running unobserved until the
process exits.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import threading
from typing import Any, Awaitable

from docbridge import messages
from docbridge.context import InvocationContext
from docbridge.errors import InvocationFailure, InvocationTimeout, ServiceInstanceNotFound, format_exception
from docbridge.hosting import ServiceProvider
from docbridge.methods import ResolvedMethod
from docbridge.observability.logging import get_logger
from docbridge.reporting import Reporter
from docbridge.writer import open_output

logger = get_logger(__name__)


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _request_cancel(loop: asyncio.AbstractEventLoop, task: asyncio.Task[Any]) -> None:
    try:
        loop.call_soon_threadsafe(task.cancel)
    except RuntimeError:
        # The loop closed between the join timeout and this call.
        logger.debug("cancel_skipped_loop_closed")


def wait_bounded(result: Any, timeout_seconds: float) -> Any:
    """Wait at most ``timeout_seconds`` for ``result`` and return its value.

    Raises :class:`InvocationTimeout` when the deadline passes.
    """
    if isinstance(result, concurrent.futures.Future):
        try:
            return result.result(timeout=timeout_seconds)
        except concurrent.futures.TimeoutError as exc:
            result.cancel()
            raise InvocationTimeout(timeout_seconds) from exc

    loop = asyncio.new_event_loop()
    task = loop.create_task(_await(result))

    def run_in_thread() -> None:
        asyncio.set_event_loop(loop)
        try:
            # asyncio.wait never raises the task's exception; it is read from the task below.
            loop.run_until_complete(asyncio.wait([task]))
        finally:
            loop.close()

    thread = threading.Thread(target=run_in_thread, name="docbridge-generator", daemon=True)
    thread.start()
    thread.join(timeout_seconds)

    if thread.is_alive():
        logger.warning("generator_timed_out", timeout_seconds=timeout_seconds)
        _request_cancel(loop, task)
        raise InvocationTimeout(timeout_seconds)

    if task.cancelled():
        raise InvocationFailure("The operation was cancelled.")
    return task.result()


def normalize_result(result: Any, timeout_seconds: float) -> bool:
    if result is None:
        return True
    if isinstance(result, bool):
        return result
    if inspect.isawaitable(result) or isinstance(result, concurrent.futures.Future):
        value = wait_bounded(result, timeout_seconds)
        if isinstance(value, bool):
            return value
        return True

    logger.debug("generator_result_ignored", result_type=type(result).__name__)
    return True


def get_service_instance(services: ServiceProvider, service_type: type, service_name: str) -> Any:
    instance = services.get_service(service_type)
    if instance is None:
        raise ServiceInstanceNotFound(messages.format_service_not_found(service_name))
    return instance


def invoke(
    resolved: ResolvedMethod,
    services: ServiceProvider,
    context: InvocationContext,
    reporter: Reporter,
) -> bool:
    """Run the generator against ``context.output``; never raises."""
    service_name = resolved.service_name
    document_name = context.resolved_document_name()

    try:
        service = get_service_instance(services, resolved.service_type, service_name)
        method = getattr(service, resolved.name)

        reporter.verbose(messages.format_writing_document(document_name, context.output))
        with open_output(context.output) as writer:
            result = method(writer, document_name)
            success = normalize_result(result, context.timeout_seconds)
    except ServiceInstanceNotFound as exc:
        reporter.warning(str(exc))
        return True
    except Exception as exc:
        reporter.warning(format_exception(exc))
        return False

    if not success:
        reporter.warning(
            messages.format_method_invocation_failed(resolved.name, service_name, document_name)
        )
    return success


__all__ = ["get_service_instance", "invoke", "normalize_result", "wait_bounded"]
