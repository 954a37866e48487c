"""Files API endpoints.

Endpoints:
    POST   /api/v1/files/upload             - Upload a file (multipart), optionally into a folder
    GET    /api/v1/files                    - List files and folders at one level
    GET    /api/v1/files/{id}               - File metadata
    GET    /api/v1/files/{id}/download      - Content as attachment (session or download token)
    GET    /api/v1/files/{id}/view          - Content inline (session, preview token, or public mode)
    GET    /api/v1/files/{id}/preview-url   - Mint a preview link
    GET    /api/v1/files/{id}/download-url  - Mint a download link
    PATCH  /api/v1/files/{id}/rename        - Rename
    PATCH  /api/v1/files/{id}/move          - Move to another folder or to root
    DELETE /api/v1/files/{id}               - Delete content and metadata
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File as FileParam, Form, Query, Request, Response, UploadFile, status

from drive.api.v1.schemas import (
    FileLinkResponse,
    FileResponse,
    ListingResponse,
    MessageResponse,
    MoveFileRequest,
    RenameRequest,
)
from drive.auth.dependencies import extract_bearer, get_current_user_id, get_drive_service
from drive.auth.tokens import TokenPurpose, decode_access_token
from drive.errors import UnauthorizedError
from drive.services.drive import DriveService, FileContent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


def content_disposition(kind: str, filename: str) -> str:
    """Build a Content-Disposition header value that survives non-ASCII names."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "file"
    return f"{kind}; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def _content_response(content: FileContent, kind: str) -> Response:
    return Response(
        content=content.data,
        media_type=content.mime_type,
        headers={"Content-Disposition": content_disposition(kind, content.name)},
    )


async def _read_content(
    request: Request,
    file_id: str,
    purpose: TokenPurpose,
    service: DriveService,
    token: str | None,
    allow_public: bool = False,
) -> FileContent:
    """Serve a content read through whichever credential the request carries.

    A session token reads as the owner; anything else must be a content
    token for this file and purpose. With no credential at all, only the
    public preview mode (when enabled) can serve the read.
    """
    credential = token or extract_bearer(request)
    if credential is None:
        if allow_public:
            return await service.get_content_public(file_id)
        raise UnauthorizedError("Unauthorized")

    try:
        owner_id = decode_access_token(credential)
    except UnauthorizedError:
        return await service.get_content_with_token(file_id, credential, purpose)
    return await service.get_content_for_owner(owner_id, file_id)


@router.post("/upload", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = FileParam(...),
    folder_id: str | None = Form(default=None),
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    """Upload a file into the caller's root or one of their folders.

    The declared size is checked before the body is read, and the read
    stops one byte past the limit so an undeclared oversized body is
    still rejected without buffering all of it.
    """
    service.check_upload_size(file.size)
    data = await file.read(service.settings.MAX_UPLOAD_BYTES + 1)
    return await service.upload(
        user_id,
        file.filename or "",
        file.content_type,
        data,
        folder_id=folder_id or None,
    )


@router.get("", response_model=ListingResponse)
async def list_files(
    folder_id: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> ListingResponse:
    listing = await service.list(user_id, folder_id)
    return ListingResponse.model_validate(listing, from_attributes=True)


@router.get("/{file_id}", response_model=FileResponse)
async def get_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.get_metadata(user_id, file_id)


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    request: Request,
    token: str | None = Query(default=None, description="Download token"),
    service: DriveService = Depends(get_drive_service),
) -> Response:
    content = await _read_content(request, file_id, TokenPurpose.FILE_DOWNLOAD, service, token)
    return _content_response(content, "attachment")


@router.get("/{file_id}/view")
async def view_file(
    file_id: str,
    request: Request,
    token: str | None = Query(default=None, description="Preview token"),
    service: DriveService = Depends(get_drive_service),
) -> Response:
    content = await _read_content(
        request, file_id, TokenPurpose.FILE_PREVIEW, service, token, allow_public=True
    )
    return _content_response(content, "inline")


async def _issue_link(
    request: Request,
    service: DriveService,
    user_id: str,
    file_id: str,
    purpose: TokenPurpose,
    route_name: str,
) -> FileLinkResponse:
    issued = await service.issue_access_token(user_id, file_id, purpose)
    logger.info("Issued %s link for file %s (owner=%s)", purpose.value, issued.file.id, user_id)
    url = request.app.url_path_for(route_name, file_id=issued.file.id)
    return FileLinkResponse(
        url=f"{url}?token={issued.token}",
        token=issued.token,
        expires_at=issued.expires_at,
        file_name=issued.file.name,
        file_type=issued.file.mime_type,
        file_size=issued.file.size,
    )


@router.get("/{file_id}/preview-url", response_model=FileLinkResponse)
async def get_preview_url(
    file_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> FileLinkResponse:
    return await _issue_link(request, service, user_id, file_id, TokenPurpose.FILE_PREVIEW, "view_file")


@router.get("/{file_id}/download-url", response_model=FileLinkResponse)
async def get_download_url(
    file_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> FileLinkResponse:
    return await _issue_link(
        request, service, user_id, file_id, TokenPurpose.FILE_DOWNLOAD, "download_file"
    )


@router.patch("/{file_id}/rename", response_model=FileResponse)
async def rename_file(
    file_id: str,
    body: RenameRequest,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.rename_file(user_id, file_id, body.name)


@router.patch("/{file_id}/move", response_model=FileResponse)
async def move_file(
    file_id: str,
    body: MoveFileRequest,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
):
    return await service.move_file(user_id, file_id, body.folder_id)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    service: DriveService = Depends(get_drive_service),
) -> MessageResponse:
    await service.delete_file(user_id, file_id)
    return MessageResponse(message="File deleted successfully")
