"""Error taxonomy for the ordering domain.

Caller-input problems are raised as ``protean.exceptions.ValidationError``
(keyed by field). Everything else derives from ``OrderingError``, which
carries the HTTP status and machine-readable code the API layer renders.
"""


class OrderingError(Exception):
    code = "OrderingError"
    status_code = 500

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message, **self.details}


# ---------------------------------------------------------------------------
# Missing records
# ---------------------------------------------------------------------------
class NotFoundError(OrderingError):
    code = "NotFound"
    status_code = 404


class UserNotFound(NotFoundError):
    code = "UserNotFound"


class OrderNotFound(NotFoundError):
    code = "OrderNotFound"


class RecordNotFound(NotFoundError):
    """A referenced Invoice, OrderDetail or Order (or the link between them) is missing."""

    code = "RecordNotFound"


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------
class IllegalTransition(OrderingError):
    code = "IllegalTransition"
    status_code = 400


class ConcurrentModification(OrderingError):
    code = "ConcurrentModification"
    status_code = 409


# ---------------------------------------------------------------------------
# Payment gateway
# ---------------------------------------------------------------------------
class GatewayError(OrderingError):
    code = "GatewayError"
    status_code = 502


class GatewayTransactionNotFound(GatewayError):
    """The gateway has no record of the transaction; usually the customer never finished the redirect."""

    code = "GatewayTransactionNotFound"
    status_code = 404


class GatewayUnavailable(GatewayError):
    """Transient: timeout, transport failure or 5xx from the gateway. Retry later."""

    code = "GatewayUnavailable"
    status_code = 503


class GatewayRequestRejected(GatewayError):
    code = "GatewayRequestRejected"
    status_code = 502


# ---------------------------------------------------------------------------
# Persistence and collaborators
# ---------------------------------------------------------------------------
class PersistenceFailed(OrderingError):
    code = "PersistenceFailed"
    status_code = 500


class DownstreamUnavailable(OrderingError):
    code = "DownstreamUnavailable"
    status_code = 503


class EmailDeliveryFailed(OrderingError):
    code = "EmailDeliveryFailed"
    status_code = 502


# ---------------------------------------------------------------------------
# Identity preconditions
# ---------------------------------------------------------------------------
class Unauthorized(OrderingError):
    code = "Unauthorized"
    status_code = 401


class Forbidden(OrderingError):
    code = "Forbidden"
    status_code = 403
