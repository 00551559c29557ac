"""JustCall SMS transport for notifier-style message routing."""

from justcall_notifier.config import DEFAULT_HOST, AdapterConfig
from justcall_notifier.events import (
    FailedMessageEvent,
    InMemoryEventDispatcher,
    LoggingEventDispatcher,
    MessageEvent,
    SentMessageEvent,
)
from justcall_notifier.messages import ChatMessage, Message, SmsMessage
from justcall_notifier.results import (
    InvalidSender,
    NetworkUnreachable,
    ProviderRejected,
    SendFailure,
    SendResult,
    TransportError,
    UnsupportedMessageKind,
    ensure_sent,
)
from justcall_notifier.transport import AsyncJustCallTransport, JustCallTransport

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_HOST",
    "AdapterConfig",
    "AsyncJustCallTransport",
    "ChatMessage",
    "FailedMessageEvent",
    "InMemoryEventDispatcher",
    "InvalidSender",
    "JustCallTransport",
    "LoggingEventDispatcher",
    "Message",
    "MessageEvent",
    "NetworkUnreachable",
    "ProviderRejected",
    "SendFailure",
    "SendResult",
    "SentMessageEvent",
    "SmsMessage",
    "TransportError",
    "UnsupportedMessageKind",
    "ensure_sent",
]
