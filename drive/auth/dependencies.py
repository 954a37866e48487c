"""FastAPI dependencies for authentication and service wiring.

Principal resolution accepts the session token from the
``Authorization: Bearer`` header, or from the ``auth`` query parameter for
links that are opened directly in a browser.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from drive.auth.tokens import decode_access_token
from drive.config import get_settings
from drive.database import get_db_session
from drive.errors import UnauthorizedError
from drive.services.drive import DriveService
from drive.storage import BlobStore, BlobStoreConfig

logger = logging.getLogger(__name__)


def extract_bearer(request: Request) -> str | None:
    """Return the raw bearer credential of a request, if any."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return request.query_params.get("auth") or None


async def get_current_user_id(request: Request) -> str:
    """Resolve the calling user's id from a session token.

    Raises:
        HTTPException 401: If no valid session token is present.
    """
    token = extract_bearer(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_access_token(token)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@lru_cache
def get_blob_store() -> BlobStore:
    """Process-wide blob store built from settings."""
    return BlobStore.from_config(BlobStoreConfig.from_settings(get_settings()))


async def get_drive_service(
    session: AsyncSession = Depends(get_db_session),
    blobs: BlobStore = Depends(get_blob_store),
) -> DriveService:
    """Storage facade bound to the request's database session."""
    return DriveService(session, blobs, get_settings())
