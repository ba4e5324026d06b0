"""Process-wide payment gateway.

``SnapGateway`` when ``BACKOFFICE_GATEWAY_SERVER_KEY`` is set, otherwise the
in-memory ``FakeGateway``. Tests install their own with ``set_gateway``.
"""

from ordering.config import get_settings
from ordering.payment.gateway.fake_adapter import FakeGateway
from ordering.payment.gateway.port import PaymentGateway
from ordering.payment.gateway.snap_adapter import SnapGateway

_current_gateway: PaymentGateway | None = None


def _from_settings() -> PaymentGateway:
    settings = get_settings()
    if not settings.gateway_server_key:
        return FakeGateway()
    return SnapGateway(
        server_key=settings.gateway_server_key,
        snap_url=settings.gateway_snap_url,
        api_url=settings.gateway_api_url,
        timeout=settings.gateway_timeout_seconds,
    )


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _from_settings()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Forget the installed gateway; the next ``get_gateway`` rebuilds it from settings."""
    global _current_gateway
    _current_gateway = None
