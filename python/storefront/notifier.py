"""Email notifiers used by the order handler.

Example:
    >>> notifier = SesNotifier(sender="no-reply@shop.example")
    >>> notifier.send("ann@example.com", *confirmation_email("o1"))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import CollaboratorError, ConfigurationError

CONFIRMATION_SUBJECT = "Order Confirmation"
CONFIRMATION_TEMPLATE = (
    "Thank you for your purchase! Your order with ID {order_id} "
    "has been received and is being processed."
)


def confirmation_email(order_id: Any) -> tuple[str, str]:
    """Return the (subject, body) of the order-received email."""
    return CONFIRMATION_SUBJECT, CONFIRMATION_TEMPLATE.format(order_id=order_id)


class Notifier(ABC):
    """Abstract base class for email notifiers."""

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> None:
        """Send a plain-text email.

        Raises:
            CollaboratorError: If the email could not be sent.
        """
        ...


@dataclass
class SentEmail:
    """An email captured by :class:`MemoryNotifier`."""

    recipient: str
    subject: str
    body: str


class MemoryNotifier(Notifier):
    """Notifier that records emails instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []

    def send(self, recipient: str, subject: str, body: str) -> None:
        self.sent.append(SentEmail(recipient=recipient, subject=subject, body=body))


class SesNotifier(Notifier):
    """Notifier sending through Amazon SES.

    Args:
        sender: Verified SES source address.
        client: Existing boto3 SES client to reuse.
        region_name: AWS region when a client has to be created.

    Raises:
        ConfigurationError: If boto3 cannot create the client.
    """

    def __init__(
        self,
        sender: str,
        *,
        client: Any = None,
        region_name: str | None = None,
    ) -> None:
        self.sender = sender
        if client is None:
            try:
                client = boto3.client("ses", region_name=region_name)
            except (BotoCoreError, ClientError) as e:
                raise ConfigurationError(
                    "Cannot create SES client",
                    metadata={"cause_type": type(e).__name__, "cause": str(e)},
                ) from e
        self._client = client

    def send(self, recipient: str, subject: str, body: str) -> None:
        try:
            self._client.send_email(
                Source=self.sender,
                Destination={"ToAddresses": [recipient]},
                Message={
                    "Subject": {"Data": subject},
                    "Body": {"Text": {"Data": body}},
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise CollaboratorError(
                "SES send_email failed",
                cause=e,
                metadata={"recipient": recipient},
            ) from e


__all__ = [
    "Notifier",
    "MemoryNotifier",
    "SesNotifier",
    "SentEmail",
    "confirmation_email",
    "CONFIRMATION_SUBJECT",
]
