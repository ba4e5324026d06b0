"""Bearer-token identity for the HTTP layer.

Tokens are issued by the upstream auth service; we only verify them and
turn the claims into an ``Actor`` (``sub`` is the customer id, ``role`` is
``customer`` or ``admin``).
"""

from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, Header

from ordering.actor import Actor, Role
from ordering.config import get_settings
from ordering.errors import Unauthorized


def create_access_token(subject: str, role: str = Role.CUSTOMER.value, expires_minutes: int = 60) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    payload = {"sub": subject, "role": role, "iat": now, "exp": now + timedelta(minutes=expires_minutes)}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise Unauthorized("Invalid or expired token") from exc


def current_actor(authorization: str | None = Header(default=None)) -> Actor:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized("Missing bearer token")

    claims = decode_access_token(authorization.split(" ", 1)[1].strip())
    subject = claims.get("sub")
    if not subject:
        raise Unauthorized("Token has no subject")

    role = claims.get("role", Role.CUSTOMER.value)
    if role not in {r.value for r in Role}:
        raise Unauthorized("Token has an unknown role")
    return Actor(id=str(subject), role=role)


def admin_actor(actor: Actor = Depends(current_actor)) -> Actor:
    actor.require_admin()
    return actor
