"""docbridge configuration module."""

from docbridge.config.settings import (
    DEFAULT_INVOCATION_TIMEOUT_SECONDS,
    FALLBACK_DOCUMENT_NAME,
    FALLBACK_METHOD,
    FALLBACK_SERVICE,
    Settings,
    get_settings,
    reset_settings_cache,
    settings,
)

__all__ = [
    "settings",
    "Settings",
    "get_settings",
    "reset_settings_cache",
    # Fallbacks
    "DEFAULT_INVOCATION_TIMEOUT_SECONDS",
    "FALLBACK_DOCUMENT_NAME",
    "FALLBACK_METHOD",
    "FALLBACK_SERVICE",
]
