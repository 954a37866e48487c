"""Blob store configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class BlobStoreConfig(BaseModel):
    """Configuration for the blob store.

    Attributes:
        root: Root directory under which every owner's blobs are kept.
    """

    root: str = Field(default="./uploads", description="Blob storage root directory")

    @classmethod
    def from_settings(cls, settings) -> "BlobStoreConfig":
        """Build the config from application settings."""
        return cls(root=settings.BLOB_ROOT)
