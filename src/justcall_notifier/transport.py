"""JustCall SMS transport — one POST per message, typed outcome."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from justcall_notifier.config import AdapterConfig
from justcall_notifier.events import (
    EventDispatcherProtocol,
    FailedMessageEvent,
    MessageEvent,
    NotifierEvent,
    SentMessageEvent,
)
from justcall_notifier.logging import mask_phone
from justcall_notifier.messages import Message, SmsMessage
from justcall_notifier.phone import is_e164
from justcall_notifier.results import (
    InvalidSender,
    NetworkUnreachable,
    ProviderRejected,
    SendFailure,
    SendOutcome,
    SendResult,
    UnsupportedMessageKind,
)
from justcall_notifier.settings import Settings, get_settings

__all__ = [
    "AsyncJustCallTransport",
    "JustCallTransport",
    "TransportProtocol",
    "build_request_options",
    "resolve_sender",
]

logger = logging.getLogger(__name__)

SCHEME = "justCall"
SEND_PATH = "/v2/texts/new"
SUCCESS_STATUSES = frozenset({200, 201})


# ---------------------------------------------------------------------------
# Transport protocol
# ---------------------------------------------------------------------------


class TransportProtocol(Protocol):
    """What a router needs from a transport to pick it and send through it."""

    def supports(self, message: Message) -> bool:
        ...

    def send(self, message: Message) -> SendOutcome:
        ...


# ---------------------------------------------------------------------------
# Request / response mapping
# ---------------------------------------------------------------------------


def _describe(config: AdapterConfig) -> str:
    return f"{SCHEME}://{config.endpoint}?from={config.default_from}"


def resolve_sender(message: SmsMessage, config: AdapterConfig) -> str:
    """Explicit sender if set, else the configured default with a leading ``+``."""
    return message.sender or f"+{config.default_from}"


def _unsupported(message: Message, transport: str) -> UnsupportedMessageKind:
    return UnsupportedMessageKind(
        transport=transport,
        expected=SmsMessage.__name__,
        given=type(message).__name__,
    )


def build_request_options(message: SmsMessage, sender: str, config: AdapterConfig) -> dict[str, Any]:
    """Request arguments; ``auth`` goes to ``client.send``, the rest to ``build_request``.

    JustCall expects ``key:secret`` verbatim in ``Authorization``; basic auth is
    sent as well. httpx applies the basic-auth flow last, so that is the value
    on the wire.
    """
    return {
        "auth": httpx.BasicAuth(config.api_key, config.api_secret),
        "headers": {
            "Authorization": f"{config.api_key}:{config.api_secret}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        "json": {
            "justcall_number": sender,
            "contact_number": message.recipient_phone,
            "body": message.body,
        },
    }


def _endpoint_url(config: AdapterConfig) -> str:
    return f"https://{config.endpoint}{SEND_PATH}"


def _decode_body(response: httpx.Response) -> Any:
    """Parsed JSON, or the raw text when the body is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _extract_message_id(payload: Any) -> str | None:
    try:
        raw = payload["data"][0]["id"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        return None
    return str(raw) or None


def _unreadable(response: httpx.Response, error: httpx.HTTPError) -> ProviderRejected:
    """A status arrived but its body could not be read or decoded."""
    return ProviderRejected(
        status_code=response.status_code,
        body="",
        reason=f"Unable to read the JustCall response body ({error})",
    )


def _read_response(response: httpx.Response, message: SmsMessage, transport: str) -> SendOutcome:
    status = response.status_code
    payload = _decode_body(response)

    if status not in SUCCESS_STATUSES:
        return ProviderRejected(status_code=status, body=payload)

    message_id = _extract_message_id(payload)
    if message_id is None:
        return ProviderRejected(
            status_code=status,
            body=payload,
            reason="Unable to read the message id from the JustCall response",
        )
    return SendResult(transport=transport, message_id=message_id, message=message)


# ---------------------------------------------------------------------------
# Shared outcome handling
# ---------------------------------------------------------------------------


def _notify(dispatcher: EventDispatcherProtocol | None, event: NotifierEvent) -> None:
    if dispatcher is None:
        return
    try:
        dispatcher.dispatch(event)
    except Exception:
        logger.warning(
            "Event dispatcher failed for %s",
            type(event).__name__,
            exc_info=True,
        )


def _finish(
    dispatcher: EventDispatcherProtocol | None,
    message: Message,
    outcome: SendOutcome,
) -> SendOutcome:
    if isinstance(outcome, SendFailure):
        logger.warning("JustCall send failed (%s): %s", outcome.kind, outcome.describe())
        _notify(dispatcher, FailedMessageEvent(message=message, failure=outcome))
    else:
        logger.info(
            "SMS sent: id=%s to=%s",
            outcome.message_id,
            mask_phone(outcome.message.recipient_phone),
        )
        _notify(dispatcher, SentMessageEvent(result=outcome))
    return outcome


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class JustCallTransport:
    """Blocking JustCall transport over a shared ``httpx.Client``.

    A client passed in is left open on ``close()``; one created here is owned
    and closed by the transport.
    """

    def __init__(
        self,
        config: AdapterConfig,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcherProtocol | None = None,
        owns_client: bool | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None if owns_client is None else owns_client
        self._client = client if client is not None else httpx.Client()
        self._dispatcher = dispatcher

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
        dispatcher: EventDispatcherProtocol | None = None,
    ) -> JustCallTransport:
        """Build from settings, or from the cached environment settings when omitted."""
        if settings is None:
            settings = get_settings()
        config = settings.to_adapter_config()
        if client is not None:
            return cls(config, client=client, dispatcher=dispatcher)
        return cls(
            config,
            client=httpx.Client(timeout=settings.timeout),
            dispatcher=dispatcher,
            owns_client=True,
        )

    def __str__(self) -> str:
        return _describe(self._config)

    def __enter__(self) -> JustCallTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def supports(self, message: Message) -> bool:
        return isinstance(message, SmsMessage)

    def send(self, message: Message) -> SendOutcome:
        """Send *message*; a failure is returned, never raised.

        Dispatches MessageEvent before the attempt and SentMessageEvent or
        FailedMessageEvent after it.
        """
        _notify(self._dispatcher, MessageEvent(message=message, transport=str(self)))
        return _finish(self._dispatcher, message, self._do_send(message))

    def _do_send(self, message: Message) -> SendOutcome:
        if not isinstance(message, SmsMessage):
            return _unsupported(message, str(self))
        sender = resolve_sender(message, self._config)
        if not is_e164(sender):
            return InvalidSender(sender=sender)

        options = build_request_options(message, sender, self._config)
        auth = options.pop("auth")
        request = self._client.build_request("POST", _endpoint_url(self._config), **options)
        try:
            response = self._client.send(request, auth=auth, stream=True)
        except httpx.TransportError as e:
            return NetworkUnreachable(error=e)

        try:
            response.read()
        except (httpx.DecodingError, httpx.TransportError) as e:
            return _unreadable(response, e)
        finally:
            response.close()

        return _read_response(response, message, str(self))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class AsyncJustCallTransport:
    """Awaitable JustCall transport over a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: AdapterConfig,
        client: httpx.AsyncClient | None = None,
        dispatcher: EventDispatcherProtocol | None = None,
        owns_client: bool | None = None,
    ) -> None:
        self._config = config
        self._owns_client = client is None if owns_client is None else owns_client
        self._client = client if client is not None else httpx.AsyncClient()
        self._dispatcher = dispatcher

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        dispatcher: EventDispatcherProtocol | None = None,
    ) -> AsyncJustCallTransport:
        """Build from settings, or from the cached environment settings when omitted."""
        if settings is None:
            settings = get_settings()
        config = settings.to_adapter_config()
        if client is not None:
            return cls(config, client=client, dispatcher=dispatcher)
        return cls(
            config,
            client=httpx.AsyncClient(timeout=settings.timeout),
            dispatcher=dispatcher,
            owns_client=True,
        )

    def __str__(self) -> str:
        return _describe(self._config)

    async def __aenter__(self) -> AsyncJustCallTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def supports(self, message: Message) -> bool:
        return isinstance(message, SmsMessage)

    async def send(self, message: Message) -> SendOutcome:
        _notify(self._dispatcher, MessageEvent(message=message, transport=str(self)))
        return _finish(self._dispatcher, message, await self._do_send(message))

    async def _do_send(self, message: Message) -> SendOutcome:
        if not isinstance(message, SmsMessage):
            return _unsupported(message, str(self))
        sender = resolve_sender(message, self._config)
        if not is_e164(sender):
            return InvalidSender(sender=sender)

        options = build_request_options(message, sender, self._config)
        auth = options.pop("auth")
        request = self._client.build_request("POST", _endpoint_url(self._config), **options)
        try:
            response = await self._client.send(request, auth=auth, stream=True)
        except httpx.TransportError as e:
            return NetworkUnreachable(error=e)

        try:
            await response.aread()
        except (httpx.DecodingError, httpx.TransportError) as e:
            return _unreadable(response, e)
        finally:
            await response.aclose()

        return _read_response(response, message, str(self))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
