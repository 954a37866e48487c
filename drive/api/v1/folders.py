"""Folders API endpoints.

Endpoints:
    POST   /api/v1/folders                 - Create a folder (root or under parent_id)
    GET    /api/v1/folders                 - Child folders of parent_id (root when omitted)
    GET    /api/v1/folders/{id}/contents   - Folder with its files and subfolders
    GET    /api/v1/folders/{id}/path       - Breadcrumb from the root down to the folder
    PATCH  /api/v1/folders/{id}/rename     - Rename
    PATCH  /api/v1/folders/{id}/move       - Re-parent (rejects cycles)
    DELETE /api/v1/folders/{id}            - Delete the folder and everything below it
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from drive.api.v1.schemas import (
    CreateFolderRequest,
    DeleteFolderResponse,
    FolderContentsResponse,
    FolderResponse,
    MoveFolderRequest,
    RenameRequest,
)
from drive.auth.dependencies import get_current_user_id, get_drive_service
from drive.services.drive import DriveService

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    body: CreateFolderRequest,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.create_folder(user_id, body.name, body.parent_id or None)


@router.get("", response_model=list[FolderResponse])
async def list_folders(
    parent_id: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    listing = await service.list(user_id, parent_id)
    return listing.folders


@router.get("/{folder_id}/contents", response_model=FolderContentsResponse)
async def get_folder_contents(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> FolderContentsResponse:
    contents = await service.get_folder_contents(user_id, folder_id)
    return FolderContentsResponse.model_validate(contents, from_attributes=True)


@router.get("/{folder_id}/path", response_model=list[FolderResponse])
async def get_folder_path(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.get_folder_path(user_id, folder_id)


@router.patch("/{folder_id}/rename", response_model=FolderResponse)
async def rename_folder(
    folder_id: str,
    body: RenameRequest,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.rename_folder(user_id, folder_id, body.name)


@router.patch("/{folder_id}/move", response_model=FolderResponse)
async def move_folder(
    folder_id: str,
    body: MoveFolderRequest,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.move_folder(user_id, folder_id, body.parent_id)


@router.delete("/{folder_id}", response_model=DeleteFolderResponse)
async def delete_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> DeleteFolderResponse:
    summary = await service.delete_folder(user_id, folder_id)
    return DeleteFolderResponse(
        message="Folder and all contents deleted successfully",
        folders_deleted=summary.folders,
        files_deleted=summary.files,
    )
