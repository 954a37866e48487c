"""Account registration, login and profile lookup."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drive.auth.passwords import hash_password, verify_password
from drive.auth.tokens import create_access_token
from drive.errors import AlreadyExistsError, InvalidArgumentError, NotFoundError, UnauthorizedError
from drive.models import User
from drive.services import catalog

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_MAX_PASSWORD_BYTES = 72
_MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str) -> str:
    cleaned = (email or "").strip().lower()
    if "@" not in cleaned or cleaned.startswith("@") or cleaned.endswith("@"):
        raise InvalidArgumentError("A valid email is required")
    return cleaned


def _check_password(password: str) -> None:
    if not password or len(password) < _MIN_PASSWORD_LENGTH:
        raise InvalidArgumentError(
            f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > _MAX_PASSWORD_BYTES:
        raise InvalidArgumentError(f"Password must be at most {_MAX_PASSWORD_BYTES} bytes")


async def register_user(
    session: AsyncSession, name: str, email: str, password: str
) -> tuple[User, str]:
    """Create an account and sign it in.

    Returns:
        (user, access_token).

    Raises:
        InvalidArgumentError: On a missing name, bad email or weak password.
        AlreadyExistsError: If the email is already registered.
    """
    name = (name or "").strip()
    if not name:
        raise InvalidArgumentError("Name is required")
    email = _normalize_email(email)
    _check_password(password)

    if await catalog.find_user_by_email(session, email) is not None:
        raise AlreadyExistsError("User already exists with this email")

    password_hash = await asyncio.to_thread(hash_password, password)
    try:
        user = await catalog.create_user(session, email, name, password_hash)
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same email
        raise AlreadyExistsError("User already exists with this email") from e

    logger.info("Registered user %s", user.id)
    return user, create_access_token(user.id)


async def login_user(session: AsyncSession, email: str, password: str) -> tuple[User, str]:
    """Check credentials and issue a session token.

    Raises:
        UnauthorizedError: If the email is unknown or the password is wrong.
    """
    user = await catalog.find_user_by_email(session, (email or "").strip().lower())
    if user is None:
        raise UnauthorizedError("Invalid credentials")
    if not await asyncio.to_thread(verify_password, password or "", user.password_hash):
        raise UnauthorizedError("Invalid credentials")
    return user, create_access_token(user.id)


async def get_profile(session: AsyncSession, user_id: str) -> User:
    """Fetch the signed-in user's profile.

    Raises:
        NotFoundError: If the account no longer exists.
    """
    user = await catalog.find_user(session, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
