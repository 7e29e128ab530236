"""
Auth service — business logic for registration, credential checks and login.
"""

import logging
from functools import lru_cache
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.auth import create_access_token
from smartsupply.core.exceptions import ConflictException
from smartsupply.core.security import (
    MalformedHashError,
    hash_password,
    password_needs_rehash,
    verify_password,
)
from smartsupply.schemas.user import LoginResponse, UserCreate, UserDetailOut, UserOut
from smartsupply.services import user_directory

log = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash compared against when the email is unknown, so both paths cost the same."""
    return hash_password("smartsupply-no-such-user")


async def register_user(db: AsyncSession, payload: UserCreate) -> UserDetailOut:
    """Register a new user. Raises ConflictException if the email is taken."""
    if await user_directory.find_by_email(db, payload.email) is not None:
        raise ConflictException(user_directory.EMAIL_TAKEN)

    # A concurrent registration can still slip past the check above; the
    # directory's unique index turns that into the same ConflictException.
    user = await user_directory.create(
        db,
        email=payload.email,
        password_hash=await run_in_threadpool(hash_password, payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )
    log.info("Registered user %s with role %s", user.id, user.role.value)
    return UserDetailOut.model_validate(user)


async def validate_credentials(db: AsyncSession, email: str, password: str) -> Optional[UserOut]:
    """
    Return the public view of the user if ``password`` matches, else None.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = await user_directory.find_by_email(db, email)
    if user is None:
        dummy = await run_in_threadpool(_dummy_hash)
        await run_in_threadpool(verify_password, dummy, password)
        return None

    try:
        if not await run_in_threadpool(verify_password, user.password_hash, password):
            return None
        needs_rehash = password_needs_rehash(user.password_hash)
    except MalformedHashError:
        log.error("User %s has a malformed password hash", user.id)
        return None

    if needs_rehash:
        await user_directory.update_password_hash(
            db, user, await run_in_threadpool(hash_password, password)
        )
        log.info("Upgraded password hash parameters for user %s", user.id)

    return UserOut.model_validate(user)


def login(user: UserOut) -> LoginResponse:
    """Issue an access token for an already-validated user."""
    token = create_access_token(user.id, user.email, user.role)
    return LoginResponse(access_token=token, user=user)
