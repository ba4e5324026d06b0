"""In-memory mailer that keeps an outbox for assertions."""

from uuid import uuid4

from ordering.errors import EmailDeliveryFailed
from ordering.mail.port import MailPort, OutgoingEmail


class FakeMailer(MailPort):
    def __init__(self) -> None:
        self.outbox: list[OutgoingEmail] = []
        self.failure_reason: str | None = None

    def configure(self, failure_reason: str | None = None) -> None:
        """Make every following send fail with ``failure_reason`` (None restores delivery)."""
        self.failure_reason = failure_reason

    def send(self, email: OutgoingEmail) -> str:
        if self.failure_reason:
            raise EmailDeliveryFailed(self.failure_reason, to=email.to)
        self.outbox.append(email)
        return f"email-{uuid4().hex[:12]}"
