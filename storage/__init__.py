"""Blob storage module."""
from storage.blob_store import (
    BlobResult,
    BlobStore,
    BlobStoreError,
    LocalBlobStore,
    VercelBlobStore,
    create_blob_store,
    get_blob_store,
)

__all__ = [
    "BlobResult",
    "BlobStore",
    "BlobStoreError",
    "LocalBlobStore",
    "VercelBlobStore",
    "create_blob_store",
    "get_blob_store",
]
