"""Configurable fake payment gateway for development and testing.

Keeps transactions in memory. A transaction starts ``pending`` when its
token is created; tests (or the dev-only configure endpoint) move it along
with ``set_status``. ``configure(available=False)`` makes every call fail
the way a timed-out gateway would.
"""

from uuid import uuid4

from ordering.errors import GatewayTransactionNotFound, GatewayUnavailable
from ordering.payment.gateway.port import (
    PaymentGateway,
    TransactionRequest,
    TransactionStatus,
    TransactionToken,
)


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.available: bool = True
        self.transactions: dict[str, TransactionStatus] = {}
        self.requests: dict[str, TransactionRequest] = {}
        self.calls: list[dict] = []

    def configure(self, available: bool = True) -> None:
        """Configure gateway behavior at runtime."""
        self.available = available

    def set_status(
        self,
        transaction_id: str,
        transaction_status: str,
        payment_type: str | None = None,
        settlement_time: str | None = None,
    ) -> None:
        """Simulate the customer (or the gateway) moving a transaction along."""
        self.transactions[transaction_id] = TransactionStatus(
            transaction_id=transaction_id,
            transaction_status=transaction_status,
            payment_type=payment_type,
            settlement_time=settlement_time,
        )

    def create_transaction(self, request: TransactionRequest) -> TransactionToken:
        self.calls.append({"method": "create_transaction", "transaction_id": request.transaction_id})
        self._ensure_available()

        self.requests[request.transaction_id] = request
        self.transactions.setdefault(
            request.transaction_id,
            TransactionStatus(transaction_id=request.transaction_id, transaction_status="pending"),
        )
        token = f"fake_token_{uuid4().hex[:12]}"
        return TransactionToken(token=token, redirect_url=f"https://gateway.test/snap/{token}")

    def get_status(self, transaction_id: str) -> TransactionStatus:
        self.calls.append({"method": "get_status", "transaction_id": transaction_id})
        self._ensure_available()

        status = self.transactions.get(transaction_id)
        if status is None:
            raise GatewayTransactionNotFound(
                "Transaction doesn't exist.",
                transaction_id=transaction_id,
            )
        return status

    def _ensure_available(self) -> None:
        if not self.available:
            raise GatewayUnavailable("Payment gateway timed out")
