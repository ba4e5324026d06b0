"""Pydantic request/response schemas for the ordering API.

These are external contracts, kept separate from the Protean commands.
Checkout fields are all optional here on purpose: the checkout validator
reports every missing or malformed field in one ``ValidationFailed``
response instead of failing on the first.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------
class RegisterCustomerRequest(BaseModel):
    customer_id: str
    username: str
    email: str
    role: str | None = None


class RegisterCustomerResponse(BaseModel):
    customer_id: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class SetCartItemRequest(BaseModel):
    product_id: str
    size: str
    quantity: int = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"product_id": "prod-001", "size": "M", "quantity": 2},
            ]
        }
    }


class RemoveCartItemRequest(BaseModel):
    product_id: str
    size: str


class CartResponse(BaseModel):
    items: dict[str, dict[str, int]]


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str | None = None
    village: str | None = None
    district: str | None = None
    regency: str | None = None
    province: str | None = None
    zipcode: str | None = None


class CheckoutItemSchema(BaseModel):
    product_id: str | None = None
    name: str | None = None
    quantity: int | None = None
    unit_price: float | None = None
    line_total: float | None = None
    size: str | None = None
    image_url: str | None = None


class CheckoutRequest(BaseModel):
    items: list[CheckoutItemSchema] | None = None
    total_amount: float | None = None
    total_weight: float | None = None
    delivery_date: str | None = None
    address: AddressSchema | None = None
    recipient_name: str | None = None
    recipient_phone: str | None = None
    shipping_cost: float | None = None
    amount: float | None = None
    note: str | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-001",
                            "name": "Bolu Pandan",
                            "quantity": 2,
                            "unit_price": 50000,
                            "line_total": 100000,
                            "size": "M",
                            "image_url": "https://img.example/bolu.jpg",
                        }
                    ],
                    "total_amount": 115000,
                    "total_weight": 1.2,
                    "delivery_date": "2025-01-20",
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
                    "shipping_cost": 15000,
                    "amount": 100000,
                    "note": "Tolong dibungkus rapi",
                }
            ]
        }
    }


class PlacedOrderResponse(BaseModel):
    order_id: str
    order_detail_id: str
    invoice_id: str


# ---------------------------------------------------------------------------
# Order status
# ---------------------------------------------------------------------------
class ChangeStatusRequest(BaseModel):
    status: str
    expected_status: str | None = None


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class InitiatePaymentRequest(BaseModel):
    order_detail_id: str
    redirect_url: str | None = None


class PaymentTokenResponse(BaseModel):
    token: str
    redirect_url: str | None = None
    invoice_id: str
    order_id: str
    initiation_timestamp: int
    transaction_id: str


class CheckStatusRequest(BaseModel):
    invoice_id: str
    order_id: str
    initiation_timestamp: int


class ReconciledStatusResponse(BaseModel):
    payment_status: str
    order_status: str
    transaction_status: str
    specific_payment_method: str | None = None
    invoice_changed: bool
    order_changed: bool


class FakeGatewayStatusRequest(BaseModel):
    """Dev-only: move a fake-gateway transaction (or take the gateway offline)."""

    transaction_id: str | None = None
    transaction_status: str | None = None
    payment_type: str | None = None
    settlement_time: str | None = None
    available: bool = True


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------
class InvoiceEmailResponse(BaseModel):
    order_id: str
    invoice_id: str
    message_id: str
    to: str


class MonthlyRevenue(BaseModel):
    month: str
    revenue: float


class RevenueReportResponse(BaseModel):
    total_revenue: float
    monthly_revenue: list[MonthlyRevenue]


class StatusResponse(BaseModel):
    status: str = "ok"
