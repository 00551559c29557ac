"""Message kinds a notifier transport can be asked to deliver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = ["ChatMessage", "Message", "SmsMessage"]


@dataclass(frozen=True)
class SmsMessage:
    """An outbound text message."""

    recipient_phone: str  # passed through to the provider as-is
    body: str
    sender: str | None = None  # E.164 override of the transport's default

    @property
    def kind(self) -> Literal["sms"]:
        return "sms"


@dataclass(frozen=True)
class ChatMessage:
    """A chat-room notification (Slack, Telegram, ...)."""

    subject: str
    channel: str | None = None

    @property
    def kind(self) -> Literal["chat"]:
        return "chat"


Message = SmsMessage | ChatMessage
