"""
JWT access tokens — issue and verify.

Tokens are signed with ``settings.JWT_SECRET_KEY`` and carry
``sub``/``email``/``role`` plus integer ``iat``/``exp``. Nothing is stored
server-side; a token stays valid until it expires.

Expiry is exclusive: a token is rejected from the exact ``exp`` second
onward (plus ``JWT_LEEWAY_SECONDS`` of tolerance, 0 by default).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import UUID

from jose import JWTError, jwt

from smartsupply.config import settings
from smartsupply.core.exceptions import UnauthorizedException
from smartsupply.core.permissions import Role, parse_role

log = logging.getLogger(__name__)

TOKEN_TYPE = "access"

_DECODE_OPTIONS = {
    # exp is checked below against an injectable clock
    "verify_exp": False,
    "require_sub": True,
}


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    email: str
    role: Role
    issued_at: datetime
    expires_at: datetime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(
    subject_id: Union[UUID, str],
    email: str,
    role: Union[Role, str],
    *,
    now: Optional[datetime] = None,
) -> str:
    """Build and sign an access token valid for ``settings.jwt_lifetime``."""
    issued = now or _utc_now()
    expires = issued + settings.jwt_lifetime
    payload = {
        "sub": str(subject_id),
        "email": email,
        "role": Role(role).value,
        "type": TOKEN_TYPE,
        "iat": int(issued.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, *, now: Optional[datetime] = None) -> TokenClaims:
    """
    Verify ``token`` and return its claims.

    Raises ``UnauthorizedException`` on a bad signature, a malformed or
    incomplete token, a non-access token, or an expired one.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options=_DECODE_OPTIONS,
        )
    except JWTError as exc:
        log.debug("Token rejected: %s", exc.__class__.__name__)
        raise UnauthorizedException("Invalid token") from exc

    if payload.get("type") != TOKEN_TYPE:
        raise UnauthorizedException("Invalid token")

    subject_id = payload.get("sub")
    email = payload.get("email")
    role = parse_role(payload.get("role"))
    if not subject_id or not email or role is None:
        raise UnauthorizedException("Invalid token")

    try:
        issued_ts = int(payload["iat"])
        expires_ts = int(payload["exp"])
    except (KeyError, TypeError, ValueError) as exc:
        raise UnauthorizedException("Invalid token") from exc

    current = (now or _utc_now()).timestamp()
    if current >= expires_ts + settings.JWT_LEEWAY_SECONDS:
        raise UnauthorizedException("Token expired")

    return TokenClaims(
        subject_id=subject_id,
        email=email,
        role=role,
        issued_at=datetime.fromtimestamp(issued_ts, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(expires_ts, tz=timezone.utc),
    )
