"""Send-lifecycle events and the dispatcher hook that observes them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from justcall_notifier.logging import get_logger, new_correlation_id
from justcall_notifier.messages import Message, SmsMessage
from justcall_notifier.results import SendFailure, SendResult

__all__ = [
    "EventDispatcherProtocol",
    "FailedMessageEvent",
    "InMemoryEventDispatcher",
    "LoggingEventDispatcher",
    "MessageEvent",
    "NotifierEvent",
    "SentMessageEvent",
]


@dataclass(frozen=True)
class MessageEvent:
    """A message is about to be handed to a transport."""

    message: Message
    transport: str


@dataclass(frozen=True)
class SentMessageEvent:
    result: SendResult


@dataclass(frozen=True)
class FailedMessageEvent:
    message: Message
    failure: SendFailure


NotifierEvent = MessageEvent | SentMessageEvent | FailedMessageEvent


class EventDispatcherProtocol(Protocol):
    """Observer of send attempts (metrics, audit, logging)."""

    def dispatch(self, event: NotifierEvent) -> None:
        ...


class InMemoryEventDispatcher:
    """Records every event in order — for tests and local runs."""

    def __init__(self) -> None:
        self._events: list[NotifierEvent] = []

    def dispatch(self, event: NotifierEvent) -> None:
        self._events.append(event)

    def list_events(self, event_type: type | None = None) -> list[NotifierEvent]:
        """Return recorded events, optionally only those of *event_type*."""
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if isinstance(e, event_type)]

    def clear(self) -> None:
        self._events.clear()


class LoggingEventDispatcher:
    """Emits one structured log entry per event.

    A fresh correlation id is set when an attempt starts so the attempt and
    its outcome share it.
    """

    def __init__(self, **context: Any) -> None:
        self._log = get_logger(**context)

    def dispatch(self, event: NotifierEvent) -> None:
        if isinstance(event, MessageEvent):
            new_correlation_id()
            fields: dict[str, Any] = {
                "transport": event.transport,
                "message_kind": event.message.kind,
            }
            if isinstance(event.message, SmsMessage):
                fields["recipient"] = event.message.recipient_phone
            self._log.info("notifier.send_attempt", **fields)
        elif isinstance(event, SentMessageEvent):
            self._log.info(
                "notifier.sent",
                transport=event.result.transport,
                message_id=event.result.message_id,
                recipient=event.result.message.recipient_phone,
            )
        else:
            self._log.warning(
                "notifier.failed",
                message_kind=event.message.kind,
                **event.failure.to_dict(),
            )
