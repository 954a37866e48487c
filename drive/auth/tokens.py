"""JWT session and content-access token management.

Session tokens: HS256, ``type="access"``, identify the caller (1 day default).
Content tokens: HS256, ``type="content"``, grant one purpose on one file
(1 hour default). Neither kind is persisted; validity is purely signature
plus expiry, and each kind is rejected where the other is expected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt

from drive.config import get_settings
from drive.errors import UnauthorizedError

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
_SESSION_TYPE = "access"
_CONTENT_TYPE = "content"


class TokenPurpose(str, Enum):
    """What a content token may be used for."""

    FILE_DOWNLOAD = "file-download"
    FILE_PREVIEW = "file-preview"


@dataclass(frozen=True)
class ContentTokenClaims:
    """Verified payload of a content token."""

    user_id: str
    file_id: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


# ---------- Session tokens ----------


def create_access_token(user_id: str) -> str:
    """Create a session token for a signed-in user.

    Args:
        user_id: The user's UUID.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
        "type": _SESSION_TYPE,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Decode and validate a session token.

    Args:
        token: The encoded JWT.

    Returns:
        user_id (sub claim).

    Raises:
        UnauthorizedError: If token is invalid, expired or not a session token.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token has expired")
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(f"Invalid access token: {e}")

    if payload.get("type") != _SESSION_TYPE:
        raise UnauthorizedError("Token is not an access token")

    sub = payload.get("sub")
    if not sub:
        raise UnauthorizedError("Token missing subject")
    return sub


# ---------- Content tokens ----------


def issue_content_token(
    user_id: str,
    file_id: str,
    purpose: TokenPurpose = TokenPurpose.FILE_DOWNLOAD,
    ttl: timedelta | None = None,
) -> tuple[str, datetime]:
    """Mint a capability token for one purpose on one file.

    Args:
        user_id: Owner the token is issued to.
        file_id: The only file the token grants access to.
        purpose: What the token may be used for.
        ttl: Lifetime; defaults to CONTENT_TOKEN_EXPIRE_MINUTES.

    Returns:
        (token, expires_at).
    """
    settings = get_settings()
    if ttl is None:
        ttl = timedelta(minutes=settings.CONTENT_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    expires_at = now + ttl
    payload = {
        "userId": user_id,
        "fileId": file_id,
        "purpose": TokenPurpose(purpose).value,
        "iat": now,
        "exp": expires_at,
        "type": _CONTENT_TYPE,
    }
    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=_ALGORITHM)
    return token, expires_at


def verify_content_token(token: str) -> ContentTokenClaims:
    """Verify a content token's signature, expiry and shape.

    Every failure is reported the same way so a caller cannot tell a forged
    token from an expired one.

    Raises:
        UnauthorizedError: For malformed, forged, expired or non-content tokens.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
        if payload.get("type") != _CONTENT_TYPE:
            raise ValueError("not a content token")
        claims = ContentTokenClaims(
            user_id=str(payload["userId"]),
            file_id=str(payload["fileId"]),
            purpose=TokenPurpose(payload["purpose"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
        logger.info("Rejected content token: %s", e)
        raise UnauthorizedError("Invalid or expired token")
    return claims


def require_content_claims(
    token: str, file_id: str, purpose: TokenPurpose
) -> ContentTokenClaims:
    """Verify a content token and check it was issued for this file and purpose.

    Raises:
        UnauthorizedError: If verification fails or the token targets
            another file or purpose.
    """
    claims = verify_content_token(token)
    if claims.file_id != file_id or claims.purpose != TokenPurpose(purpose):
        logger.info(
            "Content token mismatch: issued for %s/%s, used for %s/%s",
            claims.file_id,
            claims.purpose.value,
            file_id,
            TokenPurpose(purpose).value,
        )
        raise UnauthorizedError("Invalid or expired token")
    return claims
