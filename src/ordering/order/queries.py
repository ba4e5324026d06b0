"""Read side for orders: the joined order view, listings and status counts.

A checkout writes its records one at a time, so an Order can exist before
its OrderDetail or Invoice. Such an order is returned with
``ready: False`` rather than treated as an error.
"""

from collections import Counter

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.errors import OrderNotFound
from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.order.order import Order, OrderStatus


def _iso(value):
    return value.isoformat() if value is not None else None


def order_summary(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "total_amount": order.total_amount,
        "total_weight": order.total_weight,
        "payment_method": order.payment_method,
        "is_paid": order.is_paid,
        "paid_at": _iso(order.paid_at),
        "order_date": _iso(order.order_date),
        "delivery_date": _iso(order.delivery_date),
        "allowed_next_statuses": sorted(s.value for s in order.allowed_next_statuses()),
    }


def detail_view(detail: OrderDetail) -> dict:
    return {
        "order_detail_id": str(detail.id),
        "recipient_name": detail.recipient_name,
        "recipient_phone": detail.recipient_phone,
        "address": {
            "street": detail.address.street,
            "village": detail.address.village,
            "district": detail.address.district,
            "regency": detail.address.regency,
            "province": detail.address.province,
            "zipcode": detail.address.zipcode,
        },
        "formatted_address": detail.formatted_address(),
        "shipping_cost": detail.shipping_cost,
        "amount": detail.amount,
        "note": detail.note,
        "items": [
            {
                "product_id": str(item.product_id),
                "name": item.name,
                "unit_price": item.unit_price,
                "quantity": item.quantity,
                "size": item.size,
                "line_total": item.line_total,
                "image_url": item.image_url,
            }
            for item in detail.items
        ],
    }


def invoice_summary(invoice: Invoice) -> dict:
    return {
        "invoice_id": str(invoice.id),
        "invoice_code": invoice.invoice_code,
        "payment_method": invoice.payment_method,
        "specific_payment_method": invoice.specific_payment_method,
        "payment_status": invoice.payment_status,
        "payment_date": _iso(invoice.payment_date),
        "initiation_timestamp": invoice.created_at_ms,
    }


def order_view(order_id, actor: Actor) -> dict:
    """Order joined with its detail and invoice, for the owner or an admin."""
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound("Order not found", order_id=str(order_id))
    actor.require_owner_or_admin(order.customer_id)

    detail = current_domain.repository_for(OrderDetail).find_by_order(order.id)
    invoice = current_domain.repository_for(Invoice).find_by_order_detail(detail.id) if detail else None

    return {
        **order_summary(order),
        "ready": detail is not None and invoice is not None,
        "detail": detail_view(detail) if detail else None,
        "invoice": invoice_summary(invoice) if invoice else None,
        "status_history": [
            {
                "from_status": change.from_status,
                "to_status": change.to_status,
                "changed_by": change.changed_by,
                "source": change.source,
                "changed_at": _iso(change.changed_at),
            }
            for change in sorted(order.status_history, key=lambda c: c.changed_at)
        ],
    }


def list_orders(actor: Actor) -> list[dict]:
    """The actor's own orders, or every order for an admin; newest first."""
    repo = current_domain.repository_for(Order)
    orders = repo.find_all() if actor.is_admin else repo.find_by_customer(actor.id)
    return [order_summary(order) for order in orders]


def status_counts(actor: Actor) -> dict[str, int]:
    """Number of orders per status, every status present (zero when none)."""
    repo = current_domain.repository_for(Order)
    orders = repo.find_all() if actor.is_admin else repo.find_by_customer(actor.id)
    counts = Counter(order.status for order in orders)
    return {status.value: counts.get(status.value, 0) for status in OrderStatus}
