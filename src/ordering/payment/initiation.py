"""Payment initiation — open a hosted checkout for an order's invoice.

The gateway transaction id is ``INV-{invoice_id}-{invoice created_at ms}``.
It depends only on the invoice, so asking again for the same invoice reuses
the same key at the gateway, and the status check can rebuild it from the
identifiers handed back to the client.
"""

from urllib.parse import urlencode

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.config import get_settings
from ordering.customer.customer import Customer
from ordering.domain import ordering
from ordering.errors import RecordNotFound, UserNotFound
from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.order.order import Order
from ordering.payment.gateway import get_gateway
from ordering.payment.gateway.port import (
    CustomerDetails,
    ItemDetail,
    ShippingAddress,
    TransactionRequest,
)

logger = structlog.get_logger(__name__)

PRODUCT_CATEGORY = "Produk Bakeshop"
SHIPPING_LINE_ID = "shipping_cost"
SHIPPING_LINE_NAME = "Biaya Pengiriman"
SHIPPING_CATEGORY = "Biaya Layanan"


def transaction_id_for(invoice_id, initiation_timestamp) -> str:
    return f"INV-{invoice_id}-{initiation_timestamp}"


@ordering.command(part_of="Invoice")
class InitiatePayment:
    order_detail_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    redirect_url = String(max_length=500)


def _get_or_none(aggregate_cls, identifier):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        return None


def load_payment_records(order_detail_id):
    """Load OrderDetail, Order, Invoice and Customer for a checkout.

    Any missing link (for instance, a checkout that was compensated while the
    client still held its ids) is reported as not found.
    """
    detail = _get_or_none(OrderDetail, order_detail_id)
    if detail is None:
        raise RecordNotFound("Order detail not found", order_detail_id=str(order_detail_id))

    order = _get_or_none(Order, detail.order_id)
    if order is None:
        raise RecordNotFound("Order not found for this detail", order_detail_id=str(detail.id))

    invoice = current_domain.repository_for(Invoice).find_by_order_detail(detail.id)
    if invoice is None:
        raise RecordNotFound("Invoice not found for this order", order_detail_id=str(detail.id))

    customer = _get_or_none(Customer, order.customer_id)
    if customer is None:
        raise UserNotFound("User not found for this order", customer_id=str(order.customer_id))

    return detail, order, invoice, customer


def build_transaction_request(detail, order, invoice, customer, redirect_url) -> TransactionRequest:
    timestamp = invoice.created_at_ms
    transaction_id = transaction_id_for(invoice.id, timestamp)

    items = [
        ItemDetail(
            id=str(item.product_id) if item.product_id else "UNKNOWN_PRODUCT",
            name=item.name,
            price=item.unit_price,
            quantity=item.quantity,
            category=PRODUCT_CATEGORY,
        )
        for item in detail.items
    ]
    if detail.shipping_cost and detail.shipping_cost > 0:
        items.append(
            ItemDetail(
                id=SHIPPING_LINE_ID,
                name=SHIPPING_LINE_NAME,
                price=detail.shipping_cost,
                quantity=1,
                category=SHIPPING_CATEGORY,
            )
        )

    address = detail.address
    street_line = address.street
    if address.village:
        street_line += f", Kel. {address.village}"
    street_line += f", Kec. {address.district}"
    callback_params = {
        "invoiceId": str(invoice.id),
        "orderId": str(order.id),
        "initiationTimestamp": timestamp,
    }

    return TransactionRequest(
        transaction_id=transaction_id,
        gross_amount=order.total_amount,
        items=tuple(items),
        customer=CustomerDetails(
            first_name=customer.username,
            email=customer.email,
            phone=detail.recipient_phone,
            shipping_address=ShippingAddress(
                first_name=detail.recipient_name,
                phone=detail.recipient_phone,
                address=street_line,
                city=address.regency,
                postal_code=address.zipcode,
            ),
        ),
        finish_url=f"{redirect_url}?{urlencode(callback_params)}",
        error_url=f"{redirect_url}?{urlencode({'status': 'failed', **callback_params})}",
    )


@ordering.command_handler(part_of=Invoice)
class InitiatePaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        detail, order, invoice, customer = load_payment_records(command.order_detail_id)
        Actor(id=command.actor_id, role=command.actor_role).require_owner_or_admin(order.customer_id)

        redirect_url = command.redirect_url or get_settings().frontend_redirect_url
        request = build_transaction_request(detail, order, invoice, customer, redirect_url)
        token = get_gateway().create_transaction(request)

        logger.info(
            "Payment initiated",
            order_id=str(order.id),
            invoice_id=str(invoice.id),
            transaction_id=request.transaction_id,
        )
        return {
            "token": token.token,
            "redirect_url": token.redirect_url,
            "invoice_id": str(invoice.id),
            "order_id": str(order.id),
            "initiation_timestamp": invoice.created_at_ms,
            "transaction_id": request.transaction_id,
        }


def initiate_payment(order_detail_id, actor: Actor, redirect_url=None) -> dict:
    return current_domain.process(
        InitiatePayment(
            order_detail_id=order_detail_id,
            actor_id=actor.id,
            actor_role=actor.role,
            redirect_url=redirect_url,
        ),
        asynchronous=False,
    )
