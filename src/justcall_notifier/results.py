"""Outcome of a send attempt: a confirmed result or a typed failure."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from justcall_notifier.messages import SmsMessage

__all__ = [
    "InvalidSender",
    "NetworkUnreachable",
    "ProviderRejected",
    "SendFailure",
    "SendOutcome",
    "SendResult",
    "TransportError",
    "UnsupportedMessageKind",
    "ensure_sent",
]


@dataclass(frozen=True)
class SendResult:
    """A message the provider accepted."""

    transport: str
    message_id: str
    message: SmsMessage

    def to_dict(self) -> dict[str, Any]:
        return {
            "transport": self.transport,
            "message_id": self.message_id,
            "success": True,
        }


@dataclass(frozen=True)
class SendFailure(ABC):
    """Base for every way a send can fail. Only the variants are instantiated."""

    kind: ClassVar[str] = "failure"

    @abstractmethod
    def describe(self) -> str:
        """Human-readable error message."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error_code": self.kind,
            "error_message": self.describe(),
        }

    def to_exception(self) -> TransportError:
        return TransportError(self)


@dataclass(frozen=True)
class UnsupportedMessageKind(SendFailure):
    """The transport was handed a message it cannot deliver."""

    kind: ClassVar[str] = "unsupported_message"

    transport: str
    expected: str
    given: str

    def describe(self) -> str:
        return (
            f'The "{self.transport}" transport only supports instances of '
            f'"{self.expected}" (instance of "{self.given}" given).'
        )


@dataclass(frozen=True)
class InvalidSender(SendFailure):
    """Resolved sender number is not E.164."""

    kind: ClassVar[str] = "invalid_sender"

    sender: str

    def describe(self) -> str:
        return f'The "From" number "{self.sender}" is not a valid E.164 number.'


@dataclass(frozen=True)
class NetworkUnreachable(SendFailure):
    """No HTTP status could be obtained from the provider."""

    kind: ClassVar[str] = "network_unreachable"

    error: Exception

    def describe(self) -> str:
        return f"Could not reach the remote JustCall server: {self.error}"


@dataclass(frozen=True)
class ProviderRejected(SendFailure):
    """The provider answered, but not with a usable success.

    ``body`` is the decoded JSON payload, or the raw response text when the
    payload is not JSON.
    """

    kind: ClassVar[str] = "provider_rejected"

    status_code: int
    body: Any
    reason: str = "Unable to send the SMS"

    def describe(self) -> str:
        if isinstance(self.body, str):
            detail = self.body
        else:
            detail = json.dumps(self.body, default=str)
        return f"{self.reason}: [{self.status_code}] {detail}"


SendOutcome = SendResult | SendFailure


class TransportError(Exception):
    """Exception form of a :class:`SendFailure`."""

    def __init__(self, failure: SendFailure) -> None:
        super().__init__(failure.describe())
        self.failure = failure


def ensure_sent(outcome: SendOutcome) -> SendResult:
    """Return the result, or raise :class:`TransportError` for a failure."""
    if isinstance(outcome, SendFailure):
        cause = outcome.error if isinstance(outcome, NetworkUnreachable) else None
        raise outcome.to_exception() from cause
    return outcome
