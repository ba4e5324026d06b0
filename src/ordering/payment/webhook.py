"""Gateway notifications: acknowledged, never trusted.

A notification is only a hint that something may have changed. When it
names a transaction we issued, we run the same pull-based status check a
client would; the notification body itself is never written anywhere.
"""

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.errors import OrderingError
from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.payment.reconciliation import check_payment_status

logger = structlog.get_logger(__name__)

_PREFIX = "INV-"


def parse_transaction_id(transaction_id) -> tuple[str, str] | None:
    """Split ``INV-{invoice_id}-{timestamp}`` into its parts, or None if it isn't one of ours."""
    if not isinstance(transaction_id, str) or not transaction_id.startswith(_PREFIX):
        return None
    invoice_id, sep, timestamp = transaction_id[len(_PREFIX) :].rpartition("-")
    if not sep or not invoice_id or not timestamp.isdigit():
        return None
    return invoice_id, timestamp


def handle_notification(payload: dict) -> dict:
    """Acknowledge a gateway notification, triggering a status check when it is ours."""
    transaction_id = payload.get("order_id")
    parsed = parse_transaction_id(transaction_id)
    if parsed is None:
        logger.info("Ignoring gateway notification for unknown transaction", transaction_id=transaction_id)
        return {"acknowledged": True, "reconciled": False}

    invoice_id, timestamp = parsed
    try:
        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        detail = current_domain.repository_for(OrderDetail).get(invoice.order_detail_id)
    except ObjectNotFoundError:
        logger.info("Gateway notification names no local invoice", transaction_id=transaction_id)
        return {"acknowledged": True, "reconciled": False}

    try:
        result = check_payment_status(invoice.id, detail.order_id, timestamp)
    except OrderingError as exc:
        logger.warning(
            "Status check triggered by notification failed",
            transaction_id=transaction_id,
            error=exc.code,
            message=exc.message,
        )
        return {"acknowledged": True, "reconciled": False}
    except (ValidationError, ExpectedVersionError) as exc:
        logger.warning(
            "Status check triggered by notification failed",
            transaction_id=transaction_id,
            error=type(exc).__name__,
            message=str(exc),
        )
        return {"acknowledged": True, "reconciled": False}

    return {"acknowledged": True, "reconciled": True, "payment_status": result["payment_status"]}
