"""Immutable connection parameters for the JustCall transport."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["DEFAULT_HOST", "AdapterConfig"]

DEFAULT_HOST = "api.justcall.io"


@dataclass(frozen=True)
class AdapterConfig:
    """Credentials and default sender, fixed for the transport's lifetime.

    ``default_from`` is the sender in local form, without the leading ``+``.
    """

    api_key: str = field(repr=False)
    api_secret: str = field(repr=False)
    default_from: str
    host: str = DEFAULT_HOST
    port: int | None = None

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("api_key", "api_secret", "default_from", "host")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"AdapterConfig requires non-empty: {', '.join(missing)}")

    @property
    def endpoint(self) -> str:
        """Host, with the port appended when one is set."""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"
