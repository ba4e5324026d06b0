"""Shared BDD fixtures and step definitions for the ordering domain."""

from datetime import UTC, datetime, timedelta

import pytest
from ordering.errors import IllegalTransition
from ordering.order.events import OrderPaymentReconciled, OrderPlaced, OrderStatusChanged
from ordering.order.order import Order
from pytest_bdd import given, parsers, then

_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderStatusChanged": OrderStatusChanged,
    "OrderPaymentReconciled": OrderPaymentReconciled,
}


def _new_order(status=None) -> Order:
    """A freshly placed order, optionally forced into ``status``, with its events cleared."""
    today = datetime.now(UTC).date()
    order = Order.place(
        customer_id="cust-001",
        total_amount=115000.0,
        total_weight=1.2,
        delivery_date=today + timedelta(days=3),
        payment_method="Gateway Checkout",
        today=today,
    )
    if status is not None:
        order.status = status
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def order_factory():
    return _new_order


@pytest.fixture()
def error():
    """Container for a captured domain error."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an order awaiting payment", target_fixture="order")
def order_awaiting_payment():
    return _new_order()


@given(parsers.cfparse('an order in status "{status}"'), target_fixture="order")
def order_in_status(status):
    return _new_order(status)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then("the change is rejected as an illegal transition")
def change_rejected(error):
    assert isinstance(error["exc"], IllegalTransition), f"Expected IllegalTransition, got {error['exc']!r}"
    error["exc"] = None


@then(parsers.cfparse("a {event_type} order event is raised"))
def order_event_raised(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in order._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in order._events]}"


@then("no order event is raised")
def no_order_event(order):
    assert order._events == []
