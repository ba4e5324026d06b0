"""Cart state — a per-customer mapping of ``product_id -> size -> quantity``.

Setting a quantity is absolute (last write wins per product and size); a
quantity of zero removes the size, and a product with no sizes left is
dropped entirely. No merging of concurrent deltas happens here.
"""

import json
from typing import NamedTuple


class CartLine(NamedTuple):
    product_id: str
    size: str
    quantity: int


def load_cart(raw: str | None) -> dict[str, dict[str, int]]:
    """Decode the stored JSON cart, treating a missing value as empty."""
    if not raw:
        return {}
    return json.loads(raw)


def dump_cart(items: dict[str, dict[str, int]]) -> str:
    return json.dumps(items, sort_keys=True)


def set_quantity(items: dict[str, dict[str, int]], product_id: str, size: str, quantity: int) -> dict[str, dict[str, int]]:
    """Return a new cart with ``product_id``/``size`` set to ``quantity``."""
    updated = {pid: dict(sizes) for pid, sizes in items.items()}
    product_id = str(product_id)
    size = str(size)

    if quantity > 0:
        updated.setdefault(product_id, {})[size] = quantity
        return updated

    sizes = updated.get(product_id)
    if sizes is not None:
        sizes.pop(size, None)
        if not sizes:
            del updated[product_id]
    return updated


def cart_lines(items: dict[str, dict[str, int]]) -> list[CartLine]:
    return [
        CartLine(product_id=product_id, size=size, quantity=quantity)
        for product_id, sizes in sorted(items.items())
        for size, quantity in sorted(sizes.items())
    ]
