"""Invoice projection: Invoice, OrderDetail, Order and Customer as one flat view.

Read only. Used by the invoice endpoints and by the invoice email.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.customer.customer import Customer
from ordering.errors import RecordNotFound
from ordering.invoice.formatting import display_payment_method, format_long_date, format_rupiah
from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.order.order import Order

UNKNOWN = "-"


def _get_or_none(aggregate_cls, identifier):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def _load_invoice(invoice_id=None, order_detail_id=None) -> Invoice:
    if invoice_id is not None:
        invoice = _get_or_none(Invoice, invoice_id)
    else:
        invoice = current_domain.repository_for(Invoice).find_by_order_detail(order_detail_id)
    if invoice is None:
        raise RecordNotFound(
            "Invoice not found",
            invoice_id=str(invoice_id) if invoice_id else None,
            order_detail_id=str(order_detail_id) if order_detail_id else None,
        )
    return invoice


def load_invoice_records(invoice: Invoice):
    detail = _get_or_none(OrderDetail, invoice.order_detail_id)
    if detail is None:
        raise RecordNotFound("Order detail not found for this invoice", invoice_id=str(invoice.id))
    order = _get_or_none(Order, detail.order_id)
    if order is None:
        raise RecordNotFound("Order not found for this invoice", invoice_id=str(invoice.id))
    customer = _get_or_none(Customer, order.customer_id)
    return detail, order, customer


def project(invoice: Invoice, detail: OrderDetail, order: Order, customer: Customer | None) -> dict:
    items = [
        {
            "product_id": str(item.product_id),
            "name": item.name,
            "size": item.size or "N/A",
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "line_total": item.line_total,
            "unit_price_display": format_rupiah(item.unit_price),
            "line_total_display": format_rupiah(item.line_total),
        }
        for item in detail.items
    ]
    return {
        "invoice_id": str(invoice.id),
        "invoice_code": invoice.invoice_code,
        "order_id": str(order.id),
        "order_detail_id": str(detail.id),
        "customer_name": customer.username if customer else UNKNOWN,
        "customer_email": customer.email if customer else UNKNOWN,
        "order_date": format_long_date(order.order_date),
        "delivery_date": format_long_date(order.delivery_date),
        "recipient_name": detail.recipient_name,
        "recipient_phone": detail.recipient_phone,
        "address": detail.formatted_address(),
        "items": items,
        "subtotal": detail.amount,
        "shipping_cost": detail.shipping_cost,
        "grand_total": order.total_amount,
        "subtotal_display": format_rupiah(detail.amount),
        "shipping_cost_display": format_rupiah(detail.shipping_cost),
        "grand_total_display": format_rupiah(order.total_amount),
        "payment_method": display_payment_method(invoice.specific_payment_method, invoice.payment_method),
        "payment_status": invoice.payment_status,
        "payment_date": format_long_date(invoice.payment_date) if invoice.payment_date else None,
        "note": detail.note,
        "order_status": order.status,
    }


def render_invoice(invoice_id=None, order_detail_id=None, actor: Actor | None = None) -> dict:
    """Render by invoice id or by order detail id (exactly one is needed)."""
    if invoice_id is None and order_detail_id is None:
        raise ValueError("invoice_id or order_detail_id is required")

    invoice = _load_invoice(invoice_id=invoice_id, order_detail_id=order_detail_id)
    detail, order, customer = load_invoice_records(invoice)
    if actor is not None:
        actor.require_owner_or_admin(order.customer_id)
    return project(invoice, detail, order, customer)


def list_invoices() -> list[dict]:
    """Every invoice with its order id, newest first (admin listing)."""
    invoices = current_domain.repository_for(Invoice)._dao.query.all().items
    rows = []
    for invoice in sorted(invoices, key=lambda i: i.created_at, reverse=True):
        detail = _get_or_none(OrderDetail, invoice.order_detail_id)
        rows.append(
            {
                "invoice_id": str(invoice.id),
                "invoice_code": invoice.invoice_code,
                "order_detail_id": str(invoice.order_detail_id),
                "order_id": str(detail.order_id) if detail else None,
                "specific_payment_method": invoice.specific_payment_method,
                "payment_status": invoice.payment_status,
                "payment_date": invoice.payment_date.isoformat() if invoice.payment_date else None,
                "created_at": invoice.created_at.isoformat() if invoice.created_at else None,
            }
        )
    return rows
