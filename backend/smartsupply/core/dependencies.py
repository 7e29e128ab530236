"""
FastAPI dependencies — DB session, bearer-token gate, login gate and
capability checks.

Authentication failures are 401 (``UnauthorizedException``); an
authenticated user without the needed capability gets 403
(``ForbiddenException``).
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.auth import decode_access_token
from smartsupply.core.exceptions import ForbiddenException, UnauthorizedException
from smartsupply.core.permissions import CAPABILITIES, can_perform
from smartsupply.database import get_db
from smartsupply.schemas.user import UserLogin, UserOut
from smartsupply.services import auth_service, user_directory

__all__ = ["get_db", "get_current_user", "require_permission", "authenticate_login"]

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> UserOut:
    """
    Resolve the caller from ``Authorization: Bearer <token>``.

    The user is re-read from the database on every request, so role changes
    and removed accounts apply immediately; the role claim inside the token
    is not trusted on its own.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated")

    claims = decode_access_token(credentials.credentials)

    user = await user_directory.find_by_id(db, claims.subject_id)
    if user is None:
        raise UnauthorizedException("User no longer exists")

    current = UserOut.model_validate(user)
    request.state.user = current
    return current


def require_permission(capability: str) -> Callable:
    """Dependency factory: authenticated user whose role holds ``capability``."""
    if capability not in CAPABILITIES:
        raise ValueError(f"Unknown capability: {capability}")

    async def dependency(current_user: UserOut = Depends(get_current_user)) -> UserOut:
        if not can_perform(current_user.role, capability):
            log.info("User %s denied %s", current_user.id, capability)
            raise ForbiddenException("Insufficient permissions")
        return current_user

    return dependency


async def authenticate_login(
    payload: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> UserOut:
    """Login-only gate: check email/password from the body instead of a token."""
    user = await auth_service.validate_credentials(db, payload.email, payload.password)
    if user is None:
        log.info("Failed login attempt")
        raise UnauthorizedException(INVALID_CREDENTIALS)
    return user
