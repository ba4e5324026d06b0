"""Admin-driven order status transitions.

Only administrators may move an order. The caller may pass the status it
last saw as ``expected_status``; if the stored status has moved on since,
the request is refused instead of being applied on top of a stale read.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.actor import Actor
from ordering.domain import ordering
from ordering.errors import ConcurrentModification, OrderNotFound
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    expected_status = String(max_length=50)
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)


def _parse_status(value, field):
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({field: [f"Unknown order status: {value}"]})


@ordering.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        Actor(id=command.actor_id, role=command.actor_role).require_admin()
        requested = _parse_status(command.status, "status")

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            raise OrderNotFound("Order not found", order_id=str(command.order_id))

        if command.expected_status and order.status != _parse_status(command.expected_status, "expected_status").value:
            raise ConcurrentModification(
                "Order status changed since it was read",
                order_id=str(order.id),
                expected_status=command.expected_status,
                current_status=order.status,
            )

        previous = order.status
        if order.transition_to(requested, changed_by=command.actor_id):
            repo.add(order)
            logger.info(
                "Order status changed",
                order_id=str(order.id),
                previous_status=previous,
                new_status=order.status,
                changed_by=str(command.actor_id),
            )
        return {"order_id": str(order.id), "status": order.status}


def change_order_status(order_id, status, actor: Actor, expected_status=None) -> dict:
    return current_domain.process(
        ChangeOrderStatus(
            order_id=order_id,
            status=status,
            expected_status=expected_status,
            actor_id=actor.id,
            actor_role=actor.role,
        ),
        asynchronous=False,
    )
