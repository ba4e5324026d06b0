"""Application tests for order placement, including forced step failures."""

from datetime import timedelta

import pytest
from ordering.actor import Actor
from ordering.checkout.saga import place_order
from ordering.customer.customer import Customer
from ordering.errors import DownstreamUnavailable, PersistenceFailed, UserNotFound
from ordering.invoice.invoice import Invoice, InvoiceRepository
from ordering.order.detail import OrderDetail, OrderDetailRepository
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError


def _all(aggregate_cls):
    return current_domain.repository_for(aggregate_cls)._dao.query.all().items


def _cart(customer_id="cust-001"):
    return current_domain.repository_for(Customer).get(customer_id).cart_items()


class TestSuccessfulCheckout:
    def test_creates_all_three_records(self, placed_order):
        order = current_domain.repository_for(Order).get(placed_order["order_id"])
        detail = current_domain.repository_for(OrderDetail).get(placed_order["order_detail_id"])
        invoice = current_domain.repository_for(Invoice).get(placed_order["invoice_id"])

        assert order.status == "Menunggu Pembayaran"
        assert order.is_paid is False
        assert order.customer_id == "cust-001"
        assert detail.order_id == order.id
        assert invoice.order_detail_id == detail.id
        assert invoice.payment_status == "Pending"

    def test_clears_cart(self, placed_order):
        assert _cart() == {}

    def test_snapshot_and_defaults(self, placed_order):
        detail = current_domain.repository_for(OrderDetail).get(placed_order["order_detail_id"])
        invoice = current_domain.repository_for(Invoice).get(placed_order["invoice_id"])

        assert len(detail.items) == 1
        assert detail.items[0].line_total == 100000.0
        assert detail.note == "Tolong dibungkus rapi"
        assert invoice.payment_method == "Gateway Checkout"

    def test_payment_method_from_payload(self, shopper, checkout, today):
        result = place_order(shopper, checkout(payment_method="Transfer Manual"), today=today)
        order = current_domain.repository_for(Order).get(result["order_id"])
        assert order.payment_method == "Transfer Manual"

    def test_note_defaults_when_absent(self, shopper, checkout, today):
        result = place_order(shopper, checkout(note=None), today=today)
        detail = current_domain.repository_for(OrderDetail).get(result["order_detail_id"])
        assert detail.note == "tidak ada"

    def test_fourteen_digit_phone(self, shopper, checkout, today):
        result = place_order(shopper, checkout(recipient_phone="0812345678901"), today=today)
        assert result["order_id"]


class TestRejectedBeforeAnyWrite:
    def test_invalid_phone(self, shopper, checkout, today):
        with pytest.raises(ValidationError) as exc:
            place_order(shopper, checkout(recipient_phone="123"), today=today)

        assert "recipient_phone" in exc.value.messages
        assert _all(Order) == []
        assert _cart() == {"prod-001": {"M": 2}}

    def test_delivery_too_soon(self, shopper, checkout, today):
        with pytest.raises(ValidationError) as exc:
            place_order(shopper, checkout(delivery_date=(today + timedelta(days=1)).isoformat()), today=today)
        assert "delivery_date" in exc.value.messages
        assert _all(Order) == []

    def test_unknown_user(self, checkout, today):
        with pytest.raises(UserNotFound):
            place_order(Actor(id="nobody"), checkout(), today=today)
        assert _all(Order) == []


class TestCompensation:
    def test_detail_failure_removes_order(self, shopper, checkout, today, monkeypatch):
        def fail(self, aggregate):
            raise RuntimeError("disk full")

        monkeypatch.setattr(OrderDetailRepository, "add", fail)

        with pytest.raises(PersistenceFailed):
            place_order(shopper, checkout(), today=today)

        assert _all(Order) == []
        assert _all(OrderDetail) == []
        assert _all(Invoice) == []
        assert _cart() == {"prod-001": {"M": 2}}

    def test_invoice_failure_removes_detail_and_order(self, shopper, checkout, today, monkeypatch):
        def fail(self, aggregate):
            raise RuntimeError("disk full")

        monkeypatch.setattr(InvoiceRepository, "add", fail)

        with pytest.raises(PersistenceFailed):
            place_order(shopper, checkout(), today=today)

        assert _all(Order) == []
        assert _all(OrderDetail) == []
        assert _all(Invoice) == []
        assert _cart() == {"prod-001": {"M": 2}}

    def test_connection_loss_is_downstream_unavailable(self, shopper, checkout, today, monkeypatch):
        def fail(self, aggregate):
            raise ConnectionError("connection reset")

        monkeypatch.setattr(InvoiceRepository, "add", fail)

        with pytest.raises(DownstreamUnavailable):
            place_order(shopper, checkout(), today=today)
        assert _all(Order) == []

    def test_cart_clear_failure_rolls_back_all_three(self, shopper, checkout, today, monkeypatch):
        def fail(self):
            raise RuntimeError("cart store down")

        monkeypatch.setattr(Customer, "clear_cart", fail)

        with pytest.raises(PersistenceFailed):
            place_order(shopper, checkout(), today=today)

        assert _all(Order) == []
        assert _all(OrderDetail) == []
        assert _all(Invoice) == []

    def test_compensation_failure_keeps_original_error(self, shopper, checkout, today, monkeypatch):
        def fail(self, aggregate):
            raise RuntimeError("disk full")

        dao_cls = type(current_domain.repository_for(OrderDetail)._dao)
        original_delete = dao_cls.delete

        def refuse_detail_delete(self, entity):
            if isinstance(entity, OrderDetail):
                raise RuntimeError("delete refused")
            return original_delete(self, entity)

        monkeypatch.setattr(InvoiceRepository, "add", fail)
        monkeypatch.setattr(dao_cls, "delete", refuse_detail_delete)

        with pytest.raises(PersistenceFailed) as exc:
            place_order(shopper, checkout(), today=today)

        assert "disk full" in exc.value.details["reason"]
        # The detail could not be deleted; the order written before it still was
        assert _all(Order) == []
        assert len(_all(OrderDetail)) == 1
