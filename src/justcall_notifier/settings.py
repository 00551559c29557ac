"""Transport settings via environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from justcall_notifier.config import DEFAULT_HOST, AdapterConfig
from justcall_notifier.logging import configure_logging

__all__ = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """JustCall credentials and client tuning, all from ``JUSTCALL_*``."""

    model_config = SettingsConfigDict(
        env_prefix="JUSTCALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    api_key: SecretStr = Field(default=SecretStr(""))
    api_secret: SecretStr = Field(default=SecretStr(""))

    # Sender in local form, e.g. 15551234567
    default_from: str = ""

    # Endpoint
    host: str = DEFAULT_HOST
    port: int | None = None

    # Applied only to HTTP clients the transport creates itself
    timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    def to_adapter_config(self) -> AdapterConfig:
        """Unwrap secrets into the transport's immutable config.

        Raises ValueError if credentials or the default sender are missing.
        """
        return AdapterConfig(
            api_key=self.api_key.get_secret_value(),
            api_secret=self.api_secret.get_secret_value(),
            default_from=self.default_from.lstrip("+"),
            host=self.host,
            port=self.port,
        )

    def apply_logging(self) -> None:
        """Configure structlog from ``log_level`` and ``log_json``."""
        configure_logging(json_output=self.log_json, level=self.log_level)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
