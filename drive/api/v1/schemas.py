"""Request and response schemas for the files and folders API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class FolderResponse(BaseModel):
    """Folder record."""

    id: str
    name: str
    owner_id: str
    parent_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FileResponse(BaseModel):
    """File metadata record (the storage key stays server-side)."""

    id: str
    name: str
    size: int
    mime_type: str
    owner_id: str
    folder_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ListingResponse(BaseModel):
    """One level of the tree."""

    folders: list[FolderResponse]
    files: list[FileResponse]


class FolderContentsResponse(BaseModel):
    """A folder with its direct children."""

    folder: FolderResponse
    files: list[FileResponse]
    subfolders: list[FolderResponse]


class CreateFolderRequest(BaseModel):
    name: str = Field(..., max_length=255)
    parent_id: str | None = None


class RenameRequest(BaseModel):
    name: str = Field(..., max_length=255)


class MoveFolderRequest(BaseModel):
    parent_id: str | None = Field(default=None, description="New parent; null moves to root")


class MoveFileRequest(BaseModel):
    folder_id: str | None = Field(default=None, description="Target folder; null moves to root")


class FileLinkResponse(BaseModel):
    """Short-lived link to a file's content."""

    url: str
    token: str
    expires_at: datetime
    file_name: str
    file_type: str
    file_size: int


class MessageResponse(BaseModel):
    message: str


class DeleteFolderResponse(BaseModel):
    message: str
    folders_deleted: int
    files_deleted: int
