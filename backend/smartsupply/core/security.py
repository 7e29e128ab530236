"""
Password hashing with Argon2id.

Hashes are PHC strings (``$argon2id$v=19$m=...,t=...,p=...$salt$hash``) that
carry their own parameters and random salt, so verification needs nothing
but the stored string.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from smartsupply.config import settings


class MalformedHashError(ValueError):
    """The stored password hash is not a parsable Argon2 string."""


_password_hasher = PasswordHasher(
    time_cost=settings.ARGON2_TIME_COST,
    memory_cost=settings.ARGON2_MEMORY_COST,
    parallelism=settings.ARGON2_PARALLELISM,
)


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    return _password_hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """
    Check ``password`` against ``password_hash``.

    Returns False on a wrong password. Raises ``MalformedHashError`` when the
    stored hash itself is unusable.
    """
    try:
        return _password_hasher.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except InvalidHashError as exc:
        raise MalformedHashError("Stored password hash is malformed") from exc
    except VerificationError:
        return False


def password_needs_rehash(password_hash: str) -> bool:
    """True if the hash was made with parameters other than the configured ones."""
    try:
        return _password_hasher.check_needs_rehash(password_hash)
    except InvalidHashError as exc:
        raise MalformedHashError("Stored password hash is malformed") from exc
