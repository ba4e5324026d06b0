from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    bed = DomainFixture(ordering)
    bed.setup()
    setup_db(ordering)
    yield bed
    drop_db(ordering)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    from ordering.mail import reset_mailer
    from ordering.payment.gateway import reset_gateway

    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()

    reset_gateway()
    reset_mailer()


@pytest.fixture()
def gateway():
    from ordering.payment.gateway import set_gateway
    from ordering.payment.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def mailer():
    from ordering.mail import set_mailer
    from ordering.mail.fake_adapter import FakeMailer

    fake = FakeMailer()
    set_mailer(fake)
    return fake


@pytest.fixture()
def today():
    return datetime.now(UTC).date()


@pytest.fixture()
def customer():
    """A persisted customer with one item in the cart."""
    from ordering.customer.customer import Customer

    record = Customer.register(username="sari", email="sari@example.com", customer_id="cust-001")
    record.set_cart_quantity("prod-001", "M", 2)
    current_domain.repository_for(Customer).add(record)
    return current_domain.repository_for(Customer).get("cust-001")


@pytest.fixture()
def admin():
    from ordering.actor import Actor

    return Actor(id="admin-001", role="admin")


@pytest.fixture()
def shopper(customer):
    from ordering.actor import Actor

    return Actor(id=str(customer.id), role="customer")


def build_checkout(today, **overrides) -> dict:
    payload = {
        "items": [
            {
                "product_id": "prod-001",
                "name": "Bolu Pandan",
                "quantity": 2,
                "unit_price": 50000.0,
                "line_total": 100000.0,
                "size": "M",
                "image_url": "https://img.example/bolu.jpg",
            }
        ],
        "total_amount": 115000.0,
        "total_weight": 1.2,
        "delivery_date": (today + timedelta(days=3)).isoformat(),
        "address": {
            "street": "Jl. Merdeka 1",
            "village": "Sukajadi",
            "district": "Sukasari",
            "regency": "Kota Bandung",
            "province": "Jawa Barat",
            "zipcode": "40162",
        },
        "recipient_name": "Sari",
        "recipient_phone": "081234567890",
        "shipping_cost": 15000.0,
        "amount": 100000.0,
        "note": "Tolong dibungkus rapi",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def checkout(today):
    """Factory for a valid checkout payload; keyword arguments override fields."""

    def _build(**overrides):
        return build_checkout(today, **overrides)

    return _build


@pytest.fixture()
def placed_order(shopper, checkout, today):
    """Ids of a freshly placed order for the ``customer`` fixture."""
    from ordering.checkout.saga import place_order

    return place_order(shopper, checkout(), today=today)
