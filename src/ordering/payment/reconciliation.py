"""Payment reconciliation — pull the gateway's status and merge it locally.

The gateway never writes to us. After the customer finishes (or abandons)
the hosted checkout, the client asks us to check; we rebuild the
transaction id, query the gateway, and move the Invoice and its Order
together in one unit of work. Nothing is written when the merged values
equal what is already stored, so repeated checks converge.
"""

from datetime import datetime

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.domain import ordering
from ordering.errors import RecordNotFound
from ordering.invoice.formatting import WIB
from ordering.invoice.invoice import Invoice, PaymentStatus
from ordering.order.detail import OrderDetail
from ordering.order.order import Order, OrderStatus
from ordering.payment.gateway import get_gateway
from ordering.payment.initiation import transaction_id_for

logger = structlog.get_logger(__name__)

# Settlement times come back as WIB wall-clock time without an offset
GATEWAY_TIMEZONE = WIB

_GATEWAY_TO_PAYMENT_STATUS = {
    "capture": PaymentStatus.PAID,
    "settlement": PaymentStatus.PAID,
    "pending": PaymentStatus.PENDING,
    "deny": PaymentStatus.FAILED,
    "cancel": PaymentStatus.FAILED,
    "expire": PaymentStatus.FAILED,
}

_PAYMENT_TO_ORDER_STATUS = {
    PaymentStatus.PAID: OrderStatus.PAYMENT_CONFIRMED,
    PaymentStatus.PENDING: OrderStatus.AWAITING_PAYMENT,
    PaymentStatus.FAILED: OrderStatus.PAYMENT_REJECTED,
}


def map_gateway_status(transaction_status: str) -> PaymentStatus | None:
    """Local payment status for a raw gateway state, or None if unrecognised."""
    return _GATEWAY_TO_PAYMENT_STATUS.get((transaction_status or "").lower())


def order_status_for(payment_status: PaymentStatus) -> OrderStatus:
    return _PAYMENT_TO_ORDER_STATUS[payment_status]


def parse_settlement_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        settled = datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Unparseable settlement time from gateway", settlement_time=value)
        return None
    if settled.tzinfo is None:
        settled = settled.replace(tzinfo=GATEWAY_TIMEZONE)
    return settled


@ordering.command(part_of="Invoice")
class CheckPaymentStatus:
    invoice_id = Identifier(required=True)
    order_id = Identifier(required=True)
    initiation_timestamp = String(required=True, max_length=20)
    actor_id = Identifier()
    actor_role = String(max_length=20)


def _get(aggregate_cls, identifier, message, **details):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise RecordNotFound(message, **details)


@ordering.command_handler(part_of=Invoice)
class CheckPaymentStatusHandler:
    @handle(CheckPaymentStatus)
    def check_payment_status(self, command):
        invoice = _get(Invoice, command.invoice_id, "Invoice not found", invoice_id=str(command.invoice_id))
        detail = _get(
            OrderDetail,
            invoice.order_detail_id,
            "Order detail not found for this invoice",
            invoice_id=str(invoice.id),
        )
        order = _get(Order, command.order_id, "Order not found", order_id=str(command.order_id))
        if str(detail.order_id) != str(order.id):
            raise RecordNotFound(
                "Invoice does not belong to this order",
                invoice_id=str(invoice.id),
                order_id=str(order.id),
            )
        if command.actor_id:
            Actor(id=command.actor_id, role=command.actor_role).require_owner_or_admin(order.customer_id)

        transaction_id = transaction_id_for(invoice.id, command.initiation_timestamp)
        status = get_gateway().get_status(transaction_id)

        target = map_gateway_status(status.transaction_status)
        if target is None:
            logger.warning(
                "Unrecognised gateway transaction status",
                transaction_id=transaction_id,
                transaction_status=status.transaction_status,
            )
            return _result(invoice, order, status.transaction_status, False, False)

        invoice_changed = invoice.reconcile(
            target,
            specific_payment_method=status.payment_type,
            settled_at=parse_settlement_time(status.settlement_time),
        )
        # Follow the invoice as stored, so an order never disagrees with its invoice
        order_target = order_status_for(PaymentStatus(invoice.payment_status))
        order_changed = order.reconcile_payment(order_target, paid_at=invoice.payment_date)
        if not order_changed and order.status != order_target.value:
            logger.warning(
                "Order already past the payment phase; status left unchanged",
                order_id=str(order.id),
                order_status=order.status,
                gateway_status=status.transaction_status,
            )

        if invoice_changed:
            current_domain.repository_for(Invoice).add(invoice)
        if order_changed:
            current_domain.repository_for(Order).add(order)

        logger.info(
            "Payment status reconciled",
            transaction_id=transaction_id,
            transaction_status=status.transaction_status,
            payment_status=invoice.payment_status,
            order_status=order.status,
            invoice_changed=invoice_changed,
            order_changed=order_changed,
        )
        return _result(invoice, order, status.transaction_status, invoice_changed, order_changed)


def _result(invoice, order, transaction_status, invoice_changed, order_changed) -> dict:
    return {
        "invoice_id": str(invoice.id),
        "order_id": str(order.id),
        "transaction_status": transaction_status,
        "payment_status": invoice.payment_status,
        "order_status": order.status,
        "specific_payment_method": invoice.specific_payment_method,
        "invoice_changed": invoice_changed,
        "order_changed": order_changed,
    }


def check_payment_status(invoice_id, order_id, initiation_timestamp, actor: Actor | None = None) -> dict:
    return current_domain.process(
        CheckPaymentStatus(
            invoice_id=invoice_id,
            order_id=order_id,
            initiation_timestamp=str(initiation_timestamp),
            actor_id=actor.id if actor else None,
            actor_role=actor.role if actor else None,
        ),
        asynchronous=False,
    )
