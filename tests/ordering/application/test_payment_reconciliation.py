import pytest
from ordering.actor import Actor
from ordering.errors import Forbidden, GatewayTransactionNotFound, GatewayUnavailable, RecordNotFound
from ordering.invoice.invoice import Invoice
from ordering.order.order import Order
from ordering.order.status import change_order_status
from ordering.payment.initiation import initiate_payment
from ordering.payment.reconciliation import check_payment_status
from protean import current_domain


@pytest.fixture()
def initiated(placed_order, shopper, gateway):
    return initiate_payment(placed_order["order_detail_id"], shopper)


def _check(initiated, actor=None):
    return check_payment_status(
        initiated["invoice_id"],
        initiated["order_id"],
        initiated["initiation_timestamp"],
        actor=actor,
    )


def _records(initiated):
    invoice = current_domain.repository_for(Invoice).get(initiated["invoice_id"])
    order = current_domain.repository_for(Order).get(initiated["order_id"])
    return invoice, order


class TestSettlement:
    def test_settlement_pays_invoice_and_confirms_order(self, initiated, gateway, shopper):
        gateway.set_status(initiated["transaction_id"], "settlement", "bank_transfer", "2025-01-10 15:00:00")

        result = _check(initiated, shopper)

        assert result["payment_status"] == "Paid"
        assert result["order_status"] == "Pembayaran Dikonfirmasi"
        invoice, order = _records(initiated)
        assert invoice.payment_status == "Paid"
        assert invoice.specific_payment_method == "bank_transfer"
        assert invoice.payment_date is not None
        assert order.status == "Pembayaran Dikonfirmasi"
        assert order.is_paid is True
        assert order.paid_at is not None

    def test_capture_counts_as_paid(self, initiated, gateway):
        gateway.set_status(initiated["transaction_id"], "capture", "credit_card")
        assert _check(initiated)["payment_status"] == "Paid"


class TestIdempotency:
    def test_second_check_writes_nothing(self, initiated, gateway):
        gateway.set_status(initiated["transaction_id"], "settlement", "bank_transfer")

        first = _check(initiated)
        invoice_before, order_before = _records(initiated)
        second = _check(initiated)
        invoice_after, order_after = _records(initiated)

        assert (first["payment_status"], first["order_status"]) == (second["payment_status"], second["order_status"])
        assert first["invoice_changed"] and first["order_changed"]
        assert not second["invoice_changed"] and not second["order_changed"]
        assert invoice_after.updated_at == invoice_before.updated_at
        assert order_after.updated_at == order_before.updated_at

    def test_pending_with_no_instrument_changes_nothing(self, initiated):
        result = _check(initiated)
        assert result == {
            "invoice_id": initiated["invoice_id"],
            "order_id": initiated["order_id"],
            "transaction_status": "pending",
            "payment_status": "Pending",
            "order_status": "Menunggu Pembayaran",
            "specific_payment_method": None,
            "invoice_changed": False,
            "order_changed": False,
        }

    def test_pending_records_instrument(self, initiated, gateway):
        gateway.set_status(initiated["transaction_id"], "pending", "bank_transfer")
        result = _check(initiated)

        assert result["invoice_changed"] is True
        assert result["order_changed"] is False
        invoice, _ = _records(initiated)
        assert invoice.payment_status == "Pending"
        assert invoice.specific_payment_method == "bank_transfer"


class TestRejection:
    @pytest.mark.parametrize("gateway_status", ["deny", "cancel", "expire"])
    def test_rejected_payment(self, initiated, gateway, gateway_status):
        gateway.set_status(initiated["transaction_id"], gateway_status, "credit_card")
        result = _check(initiated)

        assert result["payment_status"] == "Failed"
        assert result["order_status"] == "Pembayaran Ditolak"
        _, order = _records(initiated)
        assert order.is_paid is False

    def test_order_past_payment_phase_is_not_moved(self, initiated, gateway, admin):
        change_order_status(initiated["order_id"], "Dibatalkan", admin)
        gateway.set_status(initiated["transaction_id"], "expire")

        result = _check(initiated)

        assert result["payment_status"] == "Failed"
        assert result["order_status"] == "Dibatalkan"

    def test_unknown_gateway_state_is_ignored(self, initiated, gateway):
        gateway.set_status(initiated["transaction_id"], "authorize")
        result = _check(initiated)
        assert result["payment_status"] == "Pending"
        assert result["invoice_changed"] is False


class TestFailures:
    def test_transaction_unknown_to_gateway(self, placed_order, gateway):
        invoice = current_domain.repository_for(Invoice).get(placed_order["invoice_id"])
        with pytest.raises(GatewayTransactionNotFound):
            check_payment_status(invoice.id, placed_order["order_id"], invoice.created_at_ms)

    def test_gateway_unavailable(self, initiated, gateway):
        gateway.configure(available=False)
        with pytest.raises(GatewayUnavailable):
            _check(initiated)
        invoice, _ = _records(initiated)
        assert invoice.payment_status == "Pending"

    def test_missing_invoice(self, initiated):
        with pytest.raises(RecordNotFound):
            check_payment_status("missing", initiated["order_id"], initiated["initiation_timestamp"])

    def test_order_not_linked_to_invoice(self, initiated, shopper, checkout, today):
        from ordering.checkout.saga import place_order

        other = place_order(shopper, checkout(), today=today)
        with pytest.raises(RecordNotFound):
            check_payment_status(initiated["invoice_id"], other["order_id"], initiated["initiation_timestamp"])

    def test_other_customer_is_forbidden(self, initiated):
        with pytest.raises(Forbidden):
            _check(initiated, Actor(id="cust-999"))
