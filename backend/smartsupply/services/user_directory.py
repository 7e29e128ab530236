"""
User directory — lookups and creation of ``User`` rows keyed by email / id.
"""

import logging
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartsupply.core.exceptions import ConflictException
from smartsupply.core.permissions import Role
from smartsupply.models.user import User

log = logging.getLogger(__name__)

EMAIL_TAKEN = "User with this email already exists"


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, user_id: Union[UUID, str]) -> Optional[User]:
    """Fetch a user by id; ids that are not UUIDs simply match nothing."""
    if not isinstance(user_id, UUID):
        try:
            user_id = UUID(str(user_id))
        except ValueError:
            return None
    return await db.get(User, user_id)


async def create(
    db: AsyncSession,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    role: Role,
) -> User:
    """
    Insert a new user.

    The unique index on ``users.email`` decides duplicates; a violation is
    reported as ``ConflictException``. The insert runs in a SAVEPOINT, so
    other pending work in the caller's session survives the conflict.
    """
    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    try:
        async with db.begin_nested():
            db.add(user)
            await db.flush()
    except IntegrityError as exc:
        log.info("Duplicate email rejected by unique index")
        raise ConflictException(EMAIL_TAKEN) from exc
    await db.refresh(user)
    return user


async def update_password_hash(db: AsyncSession, user: User, password_hash: str) -> None:
    user.password_hash = password_hash
    await db.flush()
