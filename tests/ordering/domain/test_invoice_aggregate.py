from datetime import UTC, datetime

import pytest
from ordering.invoice.events import InvoiceCreated, InvoicePaymentReconciled
from ordering.invoice.invoice import Invoice, PaymentStatus


def _invoice(status=PaymentStatus.PENDING):
    invoice = Invoice.issue(order_detail_id="det-001", payment_method="Gateway Checkout")
    invoice.payment_status = status.value
    invoice._events.clear()
    return invoice


class TestIssue:
    def test_starts_pending(self):
        invoice = Invoice.issue(order_detail_id="det-001", payment_method="Gateway Checkout")
        assert invoice.payment_status == "Pending"
        assert invoice.payment_date is None
        assert isinstance(invoice._events[-1], InvoiceCreated)

    def test_invoice_code(self):
        invoice = _invoice()
        assert invoice.invoice_code == f"INV-{invoice.id}"

    def test_created_at_ms(self):
        invoice = _invoice()
        invoice.created_at = datetime(2025, 1, 10, 8, 0, 0, tzinfo=UTC)
        assert invoice.created_at_ms == 1736496000000


class TestReconcile:
    def test_pending_to_paid_sets_payment_date(self):
        invoice = _invoice()
        settled = datetime(2025, 1, 10, 9, 0, tzinfo=UTC)

        assert invoice.reconcile(PaymentStatus.PAID, "bank_transfer", settled_at=settled) is True
        assert invoice.payment_status == "Paid"
        assert invoice.payment_date == settled
        assert invoice.specific_payment_method == "bank_transfer"
        assert isinstance(invoice._events[-1], InvoicePaymentReconciled)

    def test_paid_without_settlement_time_uses_now(self):
        invoice = _invoice()
        invoice.reconcile(PaymentStatus.PAID)
        assert invoice.payment_date is not None

    def test_pending_to_failed(self):
        invoice = _invoice()
        assert invoice.reconcile(PaymentStatus.FAILED, "credit_card") is True
        assert invoice.payment_status == "Failed"
        assert invoice.payment_date is None

    def test_failed_to_paid(self):
        invoice = _invoice(PaymentStatus.FAILED)
        assert invoice.reconcile(PaymentStatus.PAID) is True
        assert invoice.payment_status == "Paid"

    @pytest.mark.parametrize("target", [PaymentStatus.PENDING, PaymentStatus.FAILED])
    def test_paid_is_never_undone(self, target):
        invoice = _invoice(PaymentStatus.PAID)
        assert invoice.reconcile(target) is False
        assert invoice.payment_status == "Paid"

    def test_unchanged_values_are_not_a_change(self):
        invoice = _invoice()
        invoice.reconcile(PaymentStatus.PENDING, "gopay")
        invoice._events.clear()

        assert invoice.reconcile(PaymentStatus.PENDING, "gopay") is False
        assert invoice._events == []

    def test_instrument_recorded_even_when_status_unchanged(self):
        invoice = _invoice()
        assert invoice.reconcile(PaymentStatus.PENDING, "bank_transfer") is True
        assert invoice.payment_status == "Pending"
        assert invoice.specific_payment_method == "bank_transfer"

    def test_missing_instrument_keeps_known_one(self):
        invoice = _invoice()
        invoice.reconcile(PaymentStatus.PENDING, "bank_transfer")
        invoice.reconcile(PaymentStatus.PENDING, None)
        assert invoice.specific_payment_method == "bank_transfer"
