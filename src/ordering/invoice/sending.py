"""Send an order's invoice to the customer by email.

One attempt, no retry. A failed send is reported to the caller and leaves
every record untouched.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.config import get_settings
from ordering.errors import OrderNotFound, RecordNotFound, UserNotFound
from ordering.invoice.invoice import Invoice
from ordering.invoice.rendering import load_invoice_records, project
from ordering.invoice.templates import InvoiceEmailTemplate
from ordering.mail import get_mailer
from ordering.mail.port import OutgoingEmail
from ordering.order.detail import OrderDetail
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


def send_invoice_email(order_id, actor: Actor | None = None) -> dict:
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound("Order not found", order_id=str(order_id))
    if actor is not None:
        actor.require_owner_or_admin(order.customer_id)

    detail = current_domain.repository_for(OrderDetail).find_by_order(order.id)
    if detail is None:
        raise RecordNotFound("Order detail not found for this order", order_id=str(order.id))
    invoice = current_domain.repository_for(Invoice).find_by_order_detail(detail.id)
    if invoice is None:
        raise RecordNotFound("Invoice not found for this order", order_id=str(order.id))

    detail, order, customer = load_invoice_records(invoice)
    if customer is None:
        raise UserNotFound("User not found for this order", customer_id=str(order.customer_id))

    settings = get_settings()
    context = {**project(invoice, detail, order, customer), "store_name": settings.store_name}
    content = InvoiceEmailTemplate.render(context)

    message_id = get_mailer().send(
        OutgoingEmail(
            sender=settings.email_sender,
            to=customer.email,
            subject=content["subject"],
            text_body=content["body"],
            html_body=content["html_body"],
        )
    )
    logger.info("Invoice email sent", order_id=str(order.id), invoice_id=str(invoice.id), message_id=message_id)
    return {"order_id": str(order.id), "invoice_id": str(invoice.id), "message_id": message_id, "to": customer.email}
