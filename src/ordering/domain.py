"""Ordering bounded context: cart, order placement, invoicing and payment settlement.

Holds the customer record (with its cart), the Order / OrderDetail / Invoice
triple created at checkout, the admin-driven order status machine, and the
pull-based reconciliation of payment status against the external gateway.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
