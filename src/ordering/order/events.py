"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing order state changes.
"""

from protean.fields import Boolean, Date, DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer checked out; the order awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    total_amount = Float(required=True)
    total_weight = Float(required=True)
    delivery_date = Date(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order along its status graph."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentReconciled:
    """The order's payment state was aligned with the gateway's authoritative status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    is_paid = Boolean(required=True)
    reconciled_at = DateTime(required=True)
