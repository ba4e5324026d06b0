"""Abstract interface for sending one email."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    sender: str
    to: str
    subject: str
    text_body: str
    html_body: str | None = None


class MailPort(ABC):
    @abstractmethod
    def send(self, email: OutgoingEmail) -> str:
        """Deliver ``email`` and return the transport's message id.

        Raises ``EmailDeliveryFailed`` when the message could not be handed
        over. Delivery is not retried here.
        """
        ...
