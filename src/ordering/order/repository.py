"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_customer(self, customer_id) -> list[Order]:
        """Orders placed by ``customer_id``, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def find_all(self) -> list[Order]:
        orders = self._dao.query.all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)
