"""OrderDetail aggregate — the 1:1 companion of an Order.

Holds the delivery address, recipient, shipping cost, item subtotal, the
customer's note and the frozen line-item snapshot. Line items copy name,
price and image at checkout time so later catalogue edits never rewrite a
historical order.
"""

from protean.exceptions import ValidationError
from protean.fields import Float, HasMany, Identifier, Integer, String, Text, ValueObject

from ordering.domain import ordering

DEFAULT_NOTE = "tidak ada"


@ordering.value_object(part_of="OrderDetail")
class DeliveryAddress:
    street = String(required=True, max_length=255)
    village = String(max_length=100)
    district = String(required=True, max_length=100)
    regency = String(required=True, max_length=100)
    province = String(required=True, max_length=100)
    zipcode = String(required=True, max_length=10)

    def formatted(self) -> str:
        """``street, Kel. village, Kec. district, regency, Prov. province, Kode Pos zipcode``.

        The village segment is omitted when unknown.
        """
        parts = [self.street]
        if self.village:
            parts.append(f"Kel. {self.village}")
        parts.extend(
            [
                f"Kec. {self.district}",
                self.regency,
                f"Prov. {self.province}",
                f"Kode Pos {self.zipcode}",
            ]
        )
        return ", ".join(parts)


@ordering.entity(part_of="OrderDetail")
class OrderLineItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=50)
    line_total = Float(required=True, min_value=0.0)
    image_url = String(max_length=500)


@ordering.aggregate
class OrderDetail:
    order_id = Identifier(required=True, unique=True)
    address = ValueObject(DeliveryAddress, required=True)
    recipient_name = String(required=True, max_length=150)
    recipient_phone = String(required=True, max_length=15)
    shipping_cost = Float(required=True, min_value=0.0)
    amount = Float(required=True, min_value=0.0)
    note = Text(default=DEFAULT_NOTE)
    items = HasMany(OrderLineItem)

    @classmethod
    def snapshot(cls, order_id, address, recipient_name, recipient_phone, shipping_cost, amount, items, note=None):
        """Freeze the checkout payload against ``order_id``.

        ``items`` are mappings with ``product_id``, ``name``, ``unit_price``,
        ``quantity``, ``line_total`` and optional ``size``/``image_url``.
        """
        if not items:
            raise ValidationError({"items": ["At least one item is required"]})

        detail = cls(
            order_id=order_id,
            address=DeliveryAddress(**address),
            recipient_name=recipient_name,
            recipient_phone=recipient_phone,
            shipping_cost=shipping_cost,
            amount=amount,
            note=note or DEFAULT_NOTE,
        )
        for item in items:
            detail.add_items(
                OrderLineItem(
                    product_id=item["product_id"],
                    name=item["name"],
                    unit_price=item["unit_price"],
                    quantity=item["quantity"],
                    size=item.get("size"),
                    line_total=item["line_total"],
                    image_url=item.get("image_url"),
                )
            )
        return detail

    def formatted_address(self) -> str:
        return self.address.formatted()

    def items_total(self) -> float:
        return sum(item.line_total for item in self.items)


@ordering.repository(part_of=OrderDetail)
class OrderDetailRepository:
    def find_by_order(self, order_id) -> OrderDetail | None:
        """Return the detail for ``order_id``, or None while checkout is still writing it."""
        results = self._dao.query.filter(order_id=str(order_id)).all().items
        return results[0] if results else None
