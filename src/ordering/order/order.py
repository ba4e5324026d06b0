"""Order aggregate (CQRS) — one per checkout.

The order header: owner, totals, delivery date and the fulfilment status.
Line items and the shipping address live on the 1:1 OrderDetail; payment
state lives on the Invoice hanging off that detail.

State Machine (admin-driven, forward only):
    Menunggu Pembayaran → Pembayaran Dikonfirmasi → Diproses → Dikirim → Selesai
    Dibatalkan (from the first three states)

Payment reconciliation moves the order only within the payment phase:
    Menunggu Pembayaran → Pembayaran Dikonfirmasi | Pembayaran Ditolak
    Pembayaran Ditolak → Pembayaran Dikonfirmasi
"""

from datetime import UTC, date, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, DateTime, Float, HasMany, Identifier, String

from ordering.domain import ordering
from ordering.errors import IllegalTransition
from ordering.order.events import OrderPaymentReconciled, OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    AWAITING_PAYMENT = "Menunggu Pembayaran"
    PAYMENT_CONFIRMED = "Pembayaran Dikonfirmasi"
    PAYMENT_REJECTED = "Pembayaran Ditolak"
    PROCESSING = "Diproses"
    SHIPPED = "Dikirim"
    COMPLETED = "Selesai"
    CANCELLED = "Dibatalkan"


# Admin transition map. The current status is always an allowed (no-op) choice.
_VALID_TRANSITIONS = {
    OrderStatus.AWAITING_PAYMENT: {OrderStatus.PAYMENT_CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.PAYMENT_CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.PAYMENT_REJECTED: {OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Moves the payment reconciler may make on its own
_PAYMENT_TRANSITIONS = {
    OrderStatus.AWAITING_PAYMENT: {OrderStatus.PAYMENT_CONFIRMED, OrderStatus.PAYMENT_REJECTED},
    OrderStatus.PAYMENT_REJECTED: {OrderStatus.PAYMENT_CONFIRMED},
    OrderStatus.PAYMENT_CONFIRMED: set(),
}


def allowed_next_statuses(current: OrderStatus) -> set[OrderStatus]:
    """Statuses an administrator may pick from ``current``, including ``current`` itself."""
    return {current} | _VALID_TRANSITIONS.get(current, set())


def earliest_delivery_date(today: date, lead_days: int = 2) -> date:
    return today + timedelta(days=lead_days)


@ordering.entity(part_of="Order")
class StatusChange:
    """One applied status change, kept as the order's history."""

    from_status = String(required=True, max_length=50)
    to_status = String(required=True, max_length=50)
    changed_by = String(required=True, max_length=100)
    source = String(max_length=20, default="admin")  # admin | gateway
    changed_at = DateTime(required=True)


@ordering.aggregate
class Order:
    customer_id = Identifier(required=True)
    total_amount = Float(required=True, min_value=0.0)
    total_weight = Float(required=True, min_value=0.0)
    payment_method = String(max_length=100)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.AWAITING_PAYMENT.value,
    )
    is_paid = Boolean(default=False)
    paid_at = DateTime()
    order_date = DateTime()
    delivery_date = Date(required=True)
    status_history = HasMany(StatusChange)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        total_amount,
        total_weight,
        delivery_date: date,
        payment_method,
        today: date | None = None,
        lead_days: int = 2,
    ):
        """Create a new order awaiting payment.

        The delivery date must be at least ``lead_days`` calendar days after
        ``today`` (day granularity).
        """
        now = datetime.now(UTC)
        today = today or now.date()
        if delivery_date < earliest_delivery_date(today, lead_days):
            raise ValidationError(
                {"delivery_date": [f"Delivery date must be at least {lead_days} days from today"]}
            )

        order = cls(
            customer_id=customer_id,
            total_amount=total_amount,
            total_weight=total_weight,
            payment_method=payment_method,
            status=OrderStatus.AWAITING_PAYMENT.value,
            is_paid=False,
            order_date=now,
            delivery_date=delivery_date,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                total_amount=total_amount,
                total_weight=total_weight,
                delivery_date=delivery_date,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Admin status machine
    # -------------------------------------------------------------------
    def allowed_next_statuses(self) -> set[OrderStatus]:
        return allowed_next_statuses(OrderStatus(self.status))

    def transition_to(self, requested: OrderStatus, changed_by) -> bool:
        """Apply an admin-requested status. Returns False when it is already current."""
        current = OrderStatus(self.status)
        if requested not in self.allowed_next_statuses():
            raise IllegalTransition(
                f"Cannot transition from {current.value} to {requested.value}",
                current_status=current.value,
                requested_status=requested.value,
                allowed=sorted(s.value for s in self.allowed_next_statuses()),
            )
        if requested == current:
            return False

        now = datetime.now(UTC)
        self._record_change(current, requested, changed_by, "admin", now)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=requested.value,
                changed_by=str(changed_by),
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Payment reconciliation
    # -------------------------------------------------------------------
    def reconcile_payment(self, target: OrderStatus, paid_at: datetime | None = None) -> bool:
        """Align the order with the gateway's verdict. Returns True if anything changed.

        Only moves within the payment phase; once an administrator has taken
        the order further (or it was cancelled) the status is left alone.
        """
        current = OrderStatus(self.status)
        if target != current and target not in _PAYMENT_TRANSITIONS.get(current, set()):
            return False

        is_paid = target == OrderStatus.PAYMENT_CONFIRMED
        if target == current and self.is_paid == is_paid:
            return False

        now = datetime.now(UTC)
        if target != current:
            self._record_change(current, target, "gateway", "gateway", now)
        else:
            self.updated_at = now
        self.is_paid = is_paid
        self.paid_at = (paid_at or now) if is_paid else None

        self.raise_(
            OrderPaymentReconciled(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                is_paid=is_paid,
                reconciled_at=now,
            )
        )
        return True

    def _record_change(self, current, target, changed_by, source, now):
        self.status = target.value
        self.updated_at = now
        self.add_status_history(
            StatusChange(
                from_status=current.value,
                to_status=target.value,
                changed_by=str(changed_by),
                source=source,
                changed_at=now,
            )
        )
