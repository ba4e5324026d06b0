"""Invoice aggregate — payment state for one OrderDetail.

Created ``Pending`` at checkout. After that only payment reconciliation
changes ``payment_status``; it can settle a pending or failed invoice, mark a
pending one failed, and never un-pays a paid one.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering
from ordering.invoice.events import InvoiceCreated, InvoicePaymentReconciled


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.PAID: set(),
}


@ordering.aggregate
class Invoice:
    order_detail_id = Identifier(required=True, unique=True)
    payment_method = String(required=True, max_length=100)
    specific_payment_method = String(max_length=100)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_date = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def issue(cls, order_detail_id, payment_method):
        now = datetime.now(UTC)
        invoice = cls(
            order_detail_id=order_detail_id,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        invoice.raise_(
            InvoiceCreated(
                invoice_id=str(invoice.id),
                order_detail_id=str(order_detail_id),
                payment_method=payment_method,
                created_at=now,
            )
        )
        return invoice

    @property
    def invoice_code(self) -> str:
        return f"INV-{self.id}"

    @property
    def created_at_ms(self) -> int:
        """Creation time in epoch milliseconds; part of the gateway transaction id."""
        created = self.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        return int(created.timestamp() * 1000)

    def reconcile(self, target: PaymentStatus, specific_payment_method=None, settled_at=None) -> bool:
        """Merge the gateway's verdict. Returns True only if a stored value changed.

        The instrument is recorded whenever the gateway reports one, even if
        the status itself is unchanged.
        """
        current = PaymentStatus(self.payment_status)
        status_changes = target != current and target in _VALID_TRANSITIONS[current]
        method_changes = bool(specific_payment_method) and specific_payment_method != self.specific_payment_method

        if not status_changes and not method_changes:
            return False

        now = datetime.now(UTC)
        if status_changes:
            self.payment_status = target.value
            if target == PaymentStatus.PAID:
                self.payment_date = settled_at or now
        if method_changes:
            self.specific_payment_method = specific_payment_method
        self.updated_at = now

        self.raise_(
            InvoicePaymentReconciled(
                invoice_id=str(self.id),
                previous_status=current.value,
                new_status=self.payment_status,
                specific_payment_method=self.specific_payment_method,
                payment_date=self.payment_date,
                reconciled_at=now,
            )
        )
        return True


@ordering.repository(part_of=Invoice)
class InvoiceRepository:
    def find_by_order_detail(self, order_detail_id) -> Invoice | None:
        results = self._dao.query.filter(order_detail_id=str(order_detail_id)).all().items
        return results[0] if results else None

    def find_paid(self) -> list[Invoice]:
        return self._dao.query.filter(payment_status=PaymentStatus.PAID.value).all().items
