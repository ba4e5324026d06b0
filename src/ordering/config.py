"""Application settings, read from the environment (prefix ``BACKOFFICE_``) or a ``.env`` file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BACKOFFICE_", env_file=".env", extra="ignore")

    store_name: str = "Ninanoor Bakeshop"

    # Bearer credentials are issued upstream; we only verify them.
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    # Hosted-checkout payment gateway. Leave the server key empty to use the fake gateway.
    gateway_server_key: str = ""
    gateway_snap_url: str = "https://app.sandbox.midtrans.com/snap/v1"
    gateway_api_url: str = "https://api.sandbox.midtrans.com/v2"
    gateway_timeout_seconds: float = 10.0
    frontend_redirect_url: str = "http://localhost:5173/payment/finish"

    default_payment_method: str = "Gateway Checkout"
    min_delivery_lead_days: int = 2

    email_sender: str = "no-reply@ninanoor.example"


@lru_cache
def get_settings() -> Settings:
    return Settings()
