"""HTTP adapter for a Snap-style hosted-checkout gateway.

Two endpoints are used:

- ``POST {snap_url}/transactions`` opens a checkout and returns a token.
- ``GET {api_url}/{transaction_id}/status`` returns the authoritative status.

Both authenticate with HTTP basic auth (server key as username, empty
password). Every call is bounded by a timeout; a timeout is reported as
``GatewayUnavailable`` and never as a failed payment.
"""

import httpx
import structlog

from ordering.errors import (
    GatewayRequestRejected,
    GatewayTransactionNotFound,
    GatewayUnavailable,
)
from ordering.payment.gateway.port import (
    PaymentGateway,
    TransactionRequest,
    TransactionStatus,
    TransactionToken,
)

logger = structlog.get_logger(__name__)


class SnapGateway(PaymentGateway):
    def __init__(
        self,
        server_key: str,
        snap_url: str,
        api_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.snap_url = snap_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            auth=(server_key, ""),
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def create_transaction(self, request: TransactionRequest) -> TransactionToken:
        body = self._send("POST", f"{self.snap_url}/transactions", request.transaction_id, json=_payload(request))
        token = body.get("token")
        if not token:
            raise GatewayRequestRejected(
                "Payment gateway did not return a token",
                transaction_id=request.transaction_id,
            )
        return TransactionToken(token=token, redirect_url=body.get("redirect_url"))

    def get_status(self, transaction_id: str) -> TransactionStatus:
        body = self._send("GET", f"{self.api_url}/{transaction_id}/status", transaction_id)
        return TransactionStatus(
            transaction_id=body.get("order_id", transaction_id),
            transaction_status=body.get("transaction_status", ""),
            payment_type=body.get("payment_type"),
            settlement_time=body.get("settlement_time"),
            fraud_status=body.get("fraud_status"),
            raw=body,
        )

    def _send(self, method: str, url: str, transaction_id: str, **kwargs) -> dict:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("Payment gateway timed out", transaction_id=transaction_id, url=url)
            raise GatewayUnavailable("Payment gateway timed out", transaction_id=transaction_id) from exc
        except httpx.TransportError as exc:
            logger.warning("Payment gateway unreachable", transaction_id=transaction_id, error=str(exc))
            raise GatewayUnavailable("Payment gateway unreachable", transaction_id=transaction_id) from exc

        body = _json_or_empty(response)
        status_code = response.status_code
        # The status API reports some failures with HTTP 200 and the real code in the body.
        # A body that carries a transaction_status is a real status (expired ones come back as 407).
        if "transaction_status" not in body and str(body.get("status_code", "")).isdigit():
            status_code = max(status_code, int(body["status_code"]))
        message = body.get("status_message") or _first_error(body) or response.reason_phrase

        if status_code == 404:
            raise GatewayTransactionNotFound(message or "Transaction doesn't exist.", transaction_id=transaction_id)
        if status_code >= 500:
            logger.warning(
                "Payment gateway error",
                transaction_id=transaction_id,
                status_code=status_code,
                message=message,
            )
            raise GatewayUnavailable(message or "Payment gateway error", transaction_id=transaction_id)
        if status_code >= 400:
            raise GatewayRequestRejected(
                message or "Payment gateway rejected the request",
                transaction_id=transaction_id,
                gateway_status_code=status_code,
            )
        return body


def _payload(request: TransactionRequest) -> dict:
    payload = {
        "transaction_details": {
            "order_id": request.transaction_id,
            "gross_amount": request.gross_amount,
        },
        "item_details": [
            {
                "id": item.id,
                "name": item.name,
                "price": item.price,
                "quantity": item.quantity,
                **({"category": item.category} if item.category else {}),
            }
            for item in request.items
        ],
    }
    if request.customer is not None:
        customer = {
            "first_name": request.customer.first_name,
            "email": request.customer.email,
            "phone": request.customer.phone,
        }
        address = request.customer.shipping_address
        if address is not None:
            customer["shipping_address"] = {
                "first_name": address.first_name,
                "phone": address.phone,
                "address": address.address,
                "city": address.city,
                "postal_code": address.postal_code,
                "country_code": address.country_code,
            }
        payload["customer_details"] = customer
    callbacks = {}
    if request.finish_url:
        callbacks["finish"] = request.finish_url
    if request.error_url:
        callbacks["error"] = request.error_url
    if callbacks:
        payload["callbacks"] = callbacks
    return payload


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _first_error(body: dict) -> str | None:
    errors = body.get("error_messages") or []
    return errors[0] if errors else None
