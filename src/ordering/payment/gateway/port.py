"""Payment gateway port (abstract interface).

The gateway is a hosted-checkout service: we ask it for a client token for
a transaction id we choose, the customer pays on the gateway's pages, and
afterwards we pull the authoritative status for that same transaction id.
Nothing the gateway pushes to us is trusted as a write.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ItemDetail:
    id: str
    name: str
    price: float
    quantity: int
    category: str | None = None


@dataclass(frozen=True)
class ShippingAddress:
    first_name: str
    phone: str
    address: str
    city: str
    postal_code: str
    country_code: str = "IDN"


@dataclass(frozen=True)
class CustomerDetails:
    first_name: str
    email: str
    phone: str
    shipping_address: ShippingAddress | None = None


@dataclass(frozen=True)
class TransactionRequest:
    """Everything the gateway needs to open a hosted checkout."""

    transaction_id: str
    gross_amount: float
    items: tuple[ItemDetail, ...] = ()
    customer: CustomerDetails | None = None
    finish_url: str | None = None
    error_url: str | None = None


@dataclass(frozen=True)
class TransactionToken:
    token: str
    redirect_url: str | None = None


@dataclass(frozen=True)
class TransactionStatus:
    """The gateway's view of a transaction.

    ``transaction_status`` is the gateway's raw state: capture, settlement,
    pending, deny, cancel, expire (or something newer we do not map).
    """

    transaction_id: str
    transaction_status: str
    payment_type: str | None = None
    settlement_time: str | None = None
    fraud_status: str | None = None
    raw: dict = field(default_factory=dict, compare=False)


class PaymentGateway(ABC):
    """Abstract payment gateway interface.

    Implementations raise ``GatewayTransactionNotFound`` when the gateway has
    no record of a transaction, ``GatewayUnavailable`` for timeouts, transport
    failures and server errors, and ``GatewayRequestRejected`` when the
    gateway refuses a request outright.
    """

    @abstractmethod
    def create_transaction(self, request: TransactionRequest) -> TransactionToken:
        """Open a hosted checkout for ``request.transaction_id``."""
        ...

    @abstractmethod
    def get_status(self, transaction_id: str) -> TransactionStatus:
        """Fetch the authoritative status of a previously opened transaction."""
        ...
