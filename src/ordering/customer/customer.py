"""Customer aggregate — the user record that owns orders and carries the cart.

Account CRUD and authentication live elsewhere; this aggregate keeps only
what order placement, invoicing and the cart need: display name, email,
role and the cart document.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, String, Text

from ordering.actor import Role
from ordering.cart.cart import cart_lines, dump_cart, load_cart, set_quantity
from ordering.customer.events import CartCleared, CartItemSet
from ordering.domain import ordering


@ordering.aggregate
class Customer:
    username = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    cart = Text(default="{}")  # JSON: {product_id: {size: quantity}}
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, username, email, role=Role.CUSTOMER.value, customer_id=None):
        now = datetime.now(UTC)
        kwargs = {}
        if customer_id is not None:
            kwargs["id"] = customer_id
        return cls(
            username=username,
            email=email,
            role=role,
            cart=dump_cart({}),
            created_at=now,
            updated_at=now,
            **kwargs,
        )

    def refresh_profile(self, username, email):
        if (username, email) != (self.username, self.email):
            self.username = username
            self.email = email
            self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------
    def cart_items(self) -> dict[str, dict[str, int]]:
        return load_cart(self.cart)

    def cart_lines(self):
        return cart_lines(self.cart_items())

    def set_cart_quantity(self, product_id, size, quantity):
        """Set the absolute quantity for one product/size; zero removes the line."""
        now = datetime.now(UTC)
        self.cart = dump_cart(set_quantity(self.cart_items(), product_id, size, quantity))
        self.updated_at = now
        self.raise_(
            CartItemSet(
                customer_id=str(self.id),
                product_id=str(product_id),
                size=str(size),
                quantity=quantity,
                updated_at=now,
            )
        )

    def clear_cart(self):
        now = datetime.now(UTC)
        self.cart = dump_cart({})
        self.updated_at = now
        self.raise_(CartCleared(customer_id=str(self.id), cleared_at=now))
