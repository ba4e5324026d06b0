"""Cart management — commands and handler.

Every operation is a full replace of the customer's stored cart document;
there is no line-level locking, so concurrent updates to the same line are
last-write-wins.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.customer.customer import Customer
from ordering.domain import ordering
from ordering.errors import UserNotFound


@ordering.command(part_of="Customer")
class SetCartItem:
    """Set a product/size line to an absolute quantity. Zero removes it."""

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=0)


@ordering.command(part_of="Customer")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(required=True, max_length=50)


@ordering.command(part_of="Customer")
class ClearCart:
    customer_id = Identifier(required=True)


def _load_customer(customer_id) -> Customer:
    try:
        return current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        raise UserNotFound("User not found", customer_id=str(customer_id))


@ordering.command_handler(part_of=Customer)
class ManageCartHandler:
    @handle(SetCartItem)
    def set_cart_item(self, command):
        customer = _load_customer(command.customer_id)
        customer.set_cart_quantity(
            product_id=command.product_id,
            size=command.size,
            quantity=command.quantity,
        )
        current_domain.repository_for(Customer).add(customer)
        return customer.cart_items()

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        customer = _load_customer(command.customer_id)
        customer.set_cart_quantity(
            product_id=command.product_id,
            size=command.size,
            quantity=0,
        )
        current_domain.repository_for(Customer).add(customer)
        return customer.cart_items()

    @handle(ClearCart)
    def clear_cart(self, command):
        customer = _load_customer(command.customer_id)
        customer.clear_cart()
        current_domain.repository_for(Customer).add(customer)
        return customer.cart_items()


def get_cart(customer_id) -> dict[str, dict[str, int]]:
    """Return the customer's full cart mapping, or ``{}`` when empty."""
    return _load_customer(customer_id).cart_items()
