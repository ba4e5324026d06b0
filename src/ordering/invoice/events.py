"""Domain events for the Invoice aggregate."""

from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Invoice")
class InvoiceCreated:
    __version__ = 1

    invoice_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    payment_method = String(required=True)
    created_at = DateTime(required=True)


@ordering.event(part_of="Invoice")
class InvoicePaymentReconciled:
    """The gateway's status for this invoice was merged into local state."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    specific_payment_method = String()
    payment_date = DateTime()
    reconciled_at = DateTime(required=True)
