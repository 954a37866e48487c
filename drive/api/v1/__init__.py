"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from drive.api.v1.auth import router as auth_router
from drive.api.v1.files import router as files_router
from drive.api.v1.folders import router as folders_router

router = APIRouter(prefix="/api/v1")
router.include_router(auth_router)
router.include_router(files_router)
router.include_router(folders_router)

__all__ = ["router"]
