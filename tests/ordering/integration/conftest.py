import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import cart_router, customer_router, invoice_router, order_router, payment_router
from ordering.api.auth import create_access_token
from ordering.api.errors import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(customer_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(invoice_router)
    return TestClient(app)


@pytest.fixture()
def bearer():
    """Build an Authorization header for a subject and role."""

    def _headers(subject: str, role: str = "customer") -> dict:
        return {"Authorization": f"Bearer {create_access_token(subject, role=role)}"}

    return _headers


@pytest.fixture()
def shopper_headers(bearer, customer):
    return bearer(str(customer.id))


@pytest.fixture()
def admin_headers(bearer):
    return bearer("admin-001", role="admin")
