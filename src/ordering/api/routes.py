"""FastAPI routes for the ordering context."""

import os

from fastapi import APIRouter, Body, Depends
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.api.auth import admin_actor, current_actor
from ordering.api.schemas import (
    CartResponse,
    ChangeStatusRequest,
    CheckoutRequest,
    CheckStatusRequest,
    FakeGatewayStatusRequest,
    InitiatePaymentRequest,
    InvoiceEmailResponse,
    OrderStatusResponse,
    PaymentTokenResponse,
    PlacedOrderResponse,
    ReconciledStatusResponse,
    RegisterCustomerRequest,
    RegisterCustomerResponse,
    RemoveCartItemRequest,
    RevenueReportResponse,
    SetCartItemRequest,
    StatusResponse,
)
from ordering.cart.management import ClearCart, RemoveCartItem, SetCartItem, get_cart
from ordering.checkout.saga import place_order
from ordering.customer.registration import register_customer
from ordering.errors import NotFoundError
from ordering.invoice.rendering import list_invoices, render_invoice
from ordering.invoice.reports import revenue_report
from ordering.invoice.sending import send_invoice_email
from ordering.order.queries import list_orders, order_view, status_counts
from ordering.order.status import change_order_status
from ordering.payment.gateway import get_gateway
from ordering.payment.gateway.fake_adapter import FakeGateway
from ordering.payment.initiation import initiate_payment
from ordering.payment.reconciliation import check_payment_status
from ordering.payment.webhook import handle_notification

# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.post("", status_code=201, response_model=RegisterCustomerResponse)
async def register(body: RegisterCustomerRequest, actor: Actor = Depends(admin_actor)) -> RegisterCustomerResponse:  # noqa: ARG001
    """Admin: mirror a user from the auth service so it can hold a cart and place orders."""
    customer_id = register_customer(body.customer_id, body.username, body.email, role=body.role)
    return RegisterCustomerResponse(customer_id=customer_id)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def read_cart(actor: Actor = Depends(current_actor)) -> CartResponse:
    return CartResponse(items=get_cart(actor.id))


@cart_router.put("", response_model=CartResponse)
async def set_cart_item(body: SetCartItemRequest, actor: Actor = Depends(current_actor)) -> CartResponse:
    command = SetCartItem(
        customer_id=actor.id,
        product_id=body.product_id,
        size=body.size,
        quantity=body.quantity,
    )
    return CartResponse(items=current_domain.process(command, asynchronous=False))


@cart_router.delete("/item", response_model=CartResponse)
async def remove_cart_item(body: RemoveCartItemRequest, actor: Actor = Depends(current_actor)) -> CartResponse:
    command = RemoveCartItem(customer_id=actor.id, product_id=body.product_id, size=body.size)
    return CartResponse(items=current_domain.process(command, asynchronous=False))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(actor: Actor = Depends(current_actor)) -> CartResponse:
    command = ClearCart(customer_id=actor.id)
    return CartResponse(items=current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", response_model=PlacedOrderResponse)
async def create_order(body: CheckoutRequest, actor: Actor = Depends(current_actor)) -> PlacedOrderResponse:
    return PlacedOrderResponse(**place_order(actor, body.model_dump()))


@order_router.get("")
async def read_orders(actor: Actor = Depends(current_actor)) -> list[dict]:
    return list_orders(actor)


@order_router.get("/status-counts")
async def read_status_counts(actor: Actor = Depends(current_actor)) -> dict[str, int]:
    return status_counts(actor)


@order_router.get("/{order_id}")
async def read_order(order_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return order_view(order_id, actor)


@order_router.patch("/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(
    order_id: str,
    body: ChangeStatusRequest,
    actor: Actor = Depends(admin_actor),
) -> OrderStatusResponse:
    result = change_order_status(order_id, body.status, actor, expected_status=body.expected_status)
    return OrderStatusResponse(**result)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/initiate", response_model=PaymentTokenResponse)
async def initiate(body: InitiatePaymentRequest, actor: Actor = Depends(current_actor)) -> PaymentTokenResponse:
    return PaymentTokenResponse(**initiate_payment(body.order_detail_id, actor, redirect_url=body.redirect_url))


@payment_router.post("/check-status", response_model=ReconciledStatusResponse)
async def check_status(body: CheckStatusRequest, actor: Actor = Depends(current_actor)) -> ReconciledStatusResponse:
    result = check_payment_status(body.invoice_id, body.order_id, body.initiation_timestamp, actor=actor)
    return ReconciledStatusResponse(**result)


@payment_router.post("/notification")
async def gateway_notification(payload: dict = Body(default_factory=dict)) -> dict:
    """Acknowledge a gateway push. It can only trigger a status check, never a write."""
    return handle_notification(payload)


@payment_router.post("/gateway/configure", response_model=StatusResponse)
async def configure_fake_gateway(body: FakeGatewayStatusRequest, actor: Actor = Depends(admin_actor)) -> StatusResponse:  # noqa: ARG001
    """Dev-only: drive the fake gateway. Unavailable in production or with a real gateway."""
    gateway = get_gateway()
    if os.environ.get("PROTEAN_ENV") == "production" or not isinstance(gateway, FakeGateway):
        raise NotFoundError("Not found")

    gateway.configure(available=body.available)
    if body.transaction_id and body.transaction_status:
        gateway.set_status(
            body.transaction_id,
            body.transaction_status,
            payment_type=body.payment_type,
            settlement_time=body.settlement_time,
        )
    return StatusResponse()


# ---------------------------------------------------------------------------
# Invoice Router
# ---------------------------------------------------------------------------
invoice_router = APIRouter(prefix="/invoices", tags=["invoices"])


@invoice_router.get("")
async def read_invoices(actor: Actor = Depends(admin_actor)) -> list[dict]:  # noqa: ARG001
    return list_invoices()


@invoice_router.get("/revenue-report", response_model=RevenueReportResponse)
async def read_revenue_report(actor: Actor = Depends(admin_actor)) -> RevenueReportResponse:  # noqa: ARG001
    return RevenueReportResponse(**revenue_report())


@invoice_router.get("/by-order-detail/{order_detail_id}")
async def read_invoice_by_order_detail(order_detail_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return render_invoice(order_detail_id=order_detail_id, actor=actor)


@invoice_router.get("/{invoice_id}")
async def read_invoice(invoice_id: str, actor: Actor = Depends(current_actor)) -> dict:
    return render_invoice(invoice_id=invoice_id, actor=actor)


@invoice_router.post("/{order_id}/email", response_model=InvoiceEmailResponse)
async def email_invoice(order_id: str, actor: Actor = Depends(current_actor)) -> InvoiceEmailResponse:
    return InvoiceEmailResponse(**send_invoice_email(order_id, actor=actor))
