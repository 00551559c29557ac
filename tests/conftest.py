"""Shared fixtures: a fixed config, a sample SMS and a stubbed JustCall API."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from justcall_notifier.config import AdapterConfig
from justcall_notifier.messages import SmsMessage


class ProviderStub:
    """Stands in for the JustCall API and records every request it receives."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: str | None = None,
        error: type[httpx.TransportError] | None = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("connection refused", request=request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture()
def config() -> AdapterConfig:
    return AdapterConfig(
        api_key="key-test",
        api_secret="secret-test",
        default_from="15551234567",
    )


@pytest.fixture()
def sms() -> SmsMessage:
    return SmsMessage(recipient_phone="+34600111222", body="Recordatorio: cita mañana 09:00")


@pytest.fixture()
def accepted() -> ProviderStub:
    """Provider that accepts every message as id abc123."""
    return ProviderStub(200, {"data": [{"id": "abc123"}]})
