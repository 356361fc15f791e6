"""Human-readable diagnostic texts.

Kept in one place so the pipeline modules only decide *what* happened.
"""

from __future__ import annotations


def format_load_failed(assembly_name: str, detail: str) -> str:
    return f"Unable to load module '{assembly_name}'. {detail}"


def format_missing_entry_point(assembly_path: str) -> str:
    return f"Module '{assembly_path}' does not contain an entry point ('main' callable)."


def format_invalid_signature(method_name: str, assembly_path: str, reason: str) -> str:
    return (
        f"{method_name} method found in {assembly_path} does not have expected signature. "
        f"{reason}"
    )


def format_bootstrap_threw(method_name: str, detail: str) -> str:
    return f"{method_name} method threw: {detail}"


def format_no_bootstrap(assembly_path: str, method_names: tuple[str, ...]) -> str:
    names = " nor ".join(f"'{name}'" for name in method_names)
    return f"Unable to build a service container: {assembly_path} defines neither {names}."


def format_no_container(method_name: str) -> str:
    return f"{method_name} method did not provide a service container."


def format_using_document(document_name: str) -> str:
    return f"Using document '{document_name}'."


def format_using_service(service_name: str) -> str:
    return f"Using service '{service_name}'."


def format_using_method(method_name: str) -> str:
    return f"Using method '{method_name}'."


def format_using_methods(method_name: str, alternate_method_name: str) -> str:
    return f"Using method '{method_name}' or '{alternate_method_name}'."


def format_service_type_not_found(service_name: str) -> str:
    return f"Unable to find service type '{service_name}' in loaded modules."


def format_method_not_found(method_name: str, service_name: str) -> str:
    return (
        f"Unable to find method '{method_name}' on service type '{service_name}' "
        "with expected signature."
    )


def format_methods_not_found(method_name: str, alternate_method_name: str, service_name: str) -> str:
    return (
        f"Unable to find either method '{method_name}' or '{alternate_method_name}' on "
        f"service type '{service_name}' with expected signature."
    )


def format_service_not_found(service_name: str) -> str:
    return f"Unable to find service type '{service_name}' in the service container."


def format_method_invocation_failed(method_name: str, service_name: str, document_name: str) -> str:
    return f"Method '{method_name}' of type '{service_name}' failed to generate document '{document_name}'."


def format_writing_document(document_name: str, output: str) -> str:
    return f"Writing document '{document_name}' to '{output}'."


def format_entry_point_owner(owner_name: str) -> str:
    return f"Entry point declared by '{owner_name}'."
