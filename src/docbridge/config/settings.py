"""Application settings using Pydantic."""

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FALLBACK_DOCUMENT_NAME = "v1"
FALLBACK_METHOD = "generate"
FALLBACK_SERVICE = "docbridge.providers.fastapi.OpenApiDocumentProvider"
DEFAULT_INVOCATION_TIMEOUT_SECONDS = 30.0


class Settings(BaseSettings):
    """docbridge configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DOCBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Fallbacks substituted when the caller leaves an option empty
    document_name: str = Field(
        default=FALLBACK_DOCUMENT_NAME,
        description="Document name passed to the generator when --document is omitted.",
    )
    method: str = Field(
        default=FALLBACK_METHOD,
        description="Generator method name when --method is omitted (the '_async' variant is tried too).",
    )
    service: str = Field(
        default=FALLBACK_SERVICE,
        description="Fully qualified type name of the document-generation service.",
    )

    # Invocation
    invocation_timeout_seconds: float = Field(
        default=DEFAULT_INVOCATION_TIMEOUT_SECONDS,
        description="Upper bound (seconds) on waiting for an awaitable generator result.",
    )
    escalate_soft_failures: bool = Field(
        default=False,
        description=(
            "Exit with code 4 on any warning raised after the container was built. "
            "Off by default so existing build pipelines keep exiting 0."
        ),
    )

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_json: bool = Field(
        default=False,
        description="Render structured logs as JSON instead of the console renderer.",
    )

    @field_validator("invocation_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DOCBRIDGE_INVOCATION_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("document_name", "method", "service", mode="before")
    @classmethod
    def blank_means_fallback(cls, v: Any, info: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return {
                "document_name": FALLBACK_DOCUMENT_NAME,
                "method": FALLBACK_METHOD,
                "service": FALLBACK_SERVICE,
            }[info.field_name]
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Lazily construct Settings so tests and CLIs can set env vars before first access.
    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()


class _SettingsProxy:
    """Lazy proxy for Settings.

    This avoids eager settings instantiation at import time, which can make tests
    order-dependent when env vars are changed during `pytest_configure()`.
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<SettingsProxy {get_settings()!r}>"


settings = _SettingsProxy()
