"""Domain events for the Customer aggregate's cart."""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Customer")
class CartItemSet:
    """A cart line was set to an absolute quantity (zero removes it)."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    size = String(required=True)
    quantity = Integer(required=True)
    updated_at = DateTime(required=True)


@ordering.event(part_of="Customer")
class CartCleared:
    """All cart lines were removed, either by the customer or by checkout."""

    __version__ = 1

    customer_id = Identifier(required=True)
    cleared_at = DateTime(required=True)
