"""Ordering API package."""

from ordering.api.routes import cart_router, customer_router, invoice_router, order_router, payment_router

__all__ = ["cart_router", "customer_router", "invoice_router", "order_router", "payment_router"]
