"""The identity attached to a request, passed explicitly into every operation."""

from dataclasses import dataclass
from enum import Enum

from ordering.errors import Forbidden


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    id: str
    role: str = Role.CUSTOMER.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def require_admin(self) -> None:
        if not self.is_admin:
            raise Forbidden("Administrator role required", actor_id=self.id)

    def require_owner_or_admin(self, owner_id) -> None:
        if not self.is_admin and str(owner_id) != str(self.id):
            raise Forbidden("Not allowed to access this order", actor_id=self.id)
