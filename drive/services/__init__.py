"""Core services: metadata catalog, namespace engine and the storage facade."""

from drive.services.drive import DriveService, FileContent, IssuedToken
from drive.services.namespace import DeleteSummary, FolderContents, Listing, NamespaceEngine

__all__ = [
    "DeleteSummary",
    "DriveService",
    "FileContent",
    "FolderContents",
    "IssuedToken",
    "Listing",
    "NamespaceEngine",
]
