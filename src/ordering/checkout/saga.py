"""Order placement saga: cart checkout into Order, OrderDetail and Invoice.

The three records are written one after another, each committed on its
own, and then the customer's cart is cleared. There is no transaction
spanning them, so when a step fails every record already written by this
attempt is deleted again in reverse order before the error is returned.

Between step 1 and step 2 an Order is briefly visible without its
OrderDetail; readers report such an order as not ready.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.checkout.validation import validate_checkout
from ordering.config import get_settings
from ordering.customer.customer import Customer
from ordering.errors import DownstreamUnavailable, OrderingError, PersistenceFailed, UserNotFound
from ordering.invoice.invoice import Invoice
from ordering.order.detail import OrderDetail
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


class OrderPlacementSaga:
    def __init__(self, actor: Actor, payload: dict, today=None) -> None:
        self.actor = actor
        self.payload = payload
        self.today = today or datetime.now(UTC).date()
        self.settings = get_settings()
        self._created: list = []

    def run(self) -> dict:
        checkout = validate_checkout(self.payload, self.today, self.settings.min_delivery_lead_days)
        customer = self._load_customer()

        try:
            order = Order.place(
                customer_id=customer.id,
                total_amount=checkout["total_amount"],
                total_weight=checkout["total_weight"],
                delivery_date=checkout["delivery_date"],
                payment_method=checkout.get("payment_method") or self.settings.default_payment_method,
                today=self.today,
                lead_days=self.settings.min_delivery_lead_days,
            )
            self._save(order)

            detail = OrderDetail.snapshot(
                order_id=order.id,
                address=_address(checkout["address"]),
                recipient_name=checkout["recipient_name"],
                recipient_phone=checkout["recipient_phone"],
                shipping_cost=checkout["shipping_cost"],
                amount=checkout["amount"],
                items=checkout["items"],
                note=checkout.get("note"),
            )
            self._save(detail)

            invoice = Invoice.issue(order_detail_id=detail.id, payment_method=order.payment_method)
            self._save(invoice)

            customer.clear_cart()
            current_domain.repository_for(Customer).add(customer)
        except (ValidationError, OrderingError):
            self._compensate()
            raise
        except (ConnectionError, TimeoutError) as exc:
            self._compensate()
            raise DownstreamUnavailable("Storage is unavailable, please retry", reason=str(exc)) from exc
        except Exception as exc:
            self._compensate()
            raise PersistenceFailed("Order could not be saved", reason=str(exc)) from exc

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_detail_id=str(detail.id),
            invoice_id=str(invoice.id),
            customer_id=str(customer.id),
        )
        return {
            "order_id": str(order.id),
            "order_detail_id": str(detail.id),
            "invoice_id": str(invoice.id),
        }

    def _load_customer(self) -> Customer:
        try:
            return current_domain.repository_for(Customer).get(self.actor.id)
        except ObjectNotFoundError:
            raise UserNotFound("User not found", customer_id=str(self.actor.id))

    def _save(self, aggregate) -> None:
        current_domain.repository_for(type(aggregate)).add(aggregate)
        self._created.append(aggregate)
        logger.debug("Checkout step committed", record=type(aggregate).__name__, record_id=str(aggregate.id))

    def _compensate(self) -> None:
        """Delete what this attempt wrote, newest first. Failures are logged, not raised."""
        while self._created:
            aggregate = self._created.pop()
            record = type(aggregate).__name__
            try:
                current_domain.repository_for(type(aggregate))._dao.delete(aggregate)
            except Exception as exc:
                logger.error(
                    "Checkout compensation failed",
                    record=record,
                    record_id=str(aggregate.id),
                    error=str(exc),
                )
            else:
                logger.warning("Checkout step compensated", record=record, record_id=str(aggregate.id))


def _address(raw: dict) -> dict:
    return {
        "street": raw["street"],
        "village": raw.get("village"),
        "district": raw["district"],
        "regency": raw["regency"],
        "province": raw["province"],
        "zipcode": str(raw["zipcode"]),
    }


def place_order(actor: Actor, payload: dict, today=None) -> dict:
    """Run checkout for ``actor``. Returns the ids of the Order, OrderDetail and Invoice."""
    return OrderPlacementSaga(actor, payload, today=today).run()
