"""Tests for adapter config and environment-driven settings."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
import structlog

from justcall_notifier.config import DEFAULT_HOST, AdapterConfig
from justcall_notifier.logging import get_logger
from justcall_notifier.settings import Settings, get_settings
from justcall_notifier.transport import AsyncJustCallTransport, JustCallTransport


@pytest.fixture()
def fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


class TestAdapterConfig:
    def test_defaults(self) -> None:
        config = AdapterConfig(api_key="k", api_secret="s", default_from="15551234567")
        assert config.host == DEFAULT_HOST == "api.justcall.io"
        assert config.endpoint == "api.justcall.io"

    def test_secrets_not_in_repr(self) -> None:
        config = AdapterConfig(api_key="key-test", api_secret="secret-test", default_from="15551234567")
        assert "key-test" not in repr(config)
        assert "secret-test" not in repr(config)

    @pytest.mark.parametrize("missing", ["api_key", "api_secret", "default_from"])
    def test_required_fields(self, missing: str) -> None:
        values = {"api_key": "k", "api_secret": "s", "default_from": "15551234567", missing: ""}
        with pytest.raises(ValueError, match=missing):
            AdapterConfig(**values)


class TestSettings:
    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JUSTCALL_API_KEY", "env-key")
        monkeypatch.setenv("JUSTCALL_API_SECRET", "env-secret")
        monkeypatch.setenv("JUSTCALL_DEFAULT_FROM", "15551234567")
        monkeypatch.setenv("JUSTCALL_PORT", "8443")

        config = Settings(_env_file=None).to_adapter_config()  # type: ignore[call-arg]

        assert config.api_key == "env-key"
        assert config.api_secret == "env-secret"
        assert config.default_from == "15551234567"
        assert config.endpoint == "api.justcall.io:8443"

    def test_secrets_masked(self) -> None:
        settings = Settings(api_key="env-key", api_secret="env-secret", default_from="1555")
        assert "env-secret" not in repr(settings)

    def test_leading_plus_stripped(self) -> None:
        settings = Settings(api_key="k", api_secret="s", default_from="+15551234567")
        assert settings.to_adapter_config().default_from == "15551234567"

    def test_missing_credentials(self) -> None:
        with pytest.raises(ValueError):
            Settings(_env_file=None, default_from="15551234567").to_adapter_config()  # type: ignore[call-arg]

    def test_transport_from_settings(self) -> None:
        settings = Settings(api_key="k", api_secret="s", default_from="15551234567", timeout=3.0)
        transport = JustCallTransport.from_settings(settings)
        assert str(transport) == "justCall://api.justcall.io?from=15551234567"
        assert transport._client.timeout == httpx.Timeout(3.0)
        transport.close()
        assert transport._client.is_closed is True

    def test_from_settings_keeps_injected_client(self) -> None:
        settings = Settings(api_key="k", api_secret="s", default_from="15551234567")
        client = httpx.Client()
        JustCallTransport.from_settings(settings, client=client).close()
        assert client.is_closed is False
        client.close()

    @pytest.mark.anyio
    async def test_async_transport_from_settings(self) -> None:
        settings = Settings(api_key="k", api_secret="s", default_from="15551234567")
        async with AsyncJustCallTransport.from_settings(settings) as transport:
            assert str(transport) == "justCall://api.justcall.io?from=15551234567"
        assert transport._client.is_closed is True

    def test_transport_from_environment(self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None) -> None:
        monkeypatch.setenv("JUSTCALL_API_KEY", "env-key")
        monkeypatch.setenv("JUSTCALL_API_SECRET", "env-secret")
        monkeypatch.setenv("JUSTCALL_DEFAULT_FROM", "15550001111")

        with JustCallTransport.from_settings() as transport:
            assert str(transport) == "justCall://api.justcall.io?from=15550001111"
        assert get_settings() is get_settings()


class TestLoggingSettings:
    def test_log_level_from_env(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        fresh_settings: None,
    ) -> None:
        monkeypatch.setenv("JUSTCALL_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("JUSTCALL_LOG_JSON", "true")

        Settings(_env_file=None).apply_logging()  # type: ignore[call-arg]
        log = get_logger()
        log.info("notifier.quiet")
        log.warning("notifier.loud")

        out = capsys.readouterr().out
        assert "notifier.quiet" not in out
        assert '"event": "notifier.loud"' in out

    def test_console_output(self, capsys: pytest.CaptureFixture[str], fresh_settings: None) -> None:
        Settings(_env_file=None, log_json=False, log_level="DEBUG").apply_logging()  # type: ignore[call-arg]
        get_logger().debug("notifier.debug")

        out = capsys.readouterr().out
        assert "notifier.debug" in out
        assert not out.lstrip().startswith("{")
