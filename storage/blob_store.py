"""Blob storage clients.

A blob store accepts a byte payload plus a pathname and returns a publicly
reachable URL. Writes are append-only from this service's point of view.
"""
import os
import posixpath
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote
from uuid import uuid4

import requests
from pydantic import BaseModel, Field

from config import Config
from utils.logger import get_logger

logger = get_logger("storage.blob_store")


class BlobStoreError(RuntimeError):
    """Raised when a blob cannot be written."""


class BlobResult(BaseModel):
    """Result of a blob write."""
    url: str = Field(..., description="Durable public URL of the stored object")
    pathname: str = Field(..., description="Key the object was stored under")
    content_type: Optional[str] = Field(None, description="Declared MIME type")
    size: int = Field(..., description="Stored size in bytes")


def add_random_suffix(pathname: str) -> str:
    """Insert a random token before the extension: ``a/b.png`` -> ``a/b-<token>.png``."""
    root, ext = posixpath.splitext(pathname)
    return f"{root}-{uuid4().hex[:16]}{ext}"


def normalize_pathname(pathname: str) -> str:
    """Reject keys that are empty, absolute, or escape the store root."""
    if not pathname or pathname.startswith("/") or "\\" in pathname:
        raise ValueError(f"Invalid blob pathname: {pathname!r}")
    normalized = posixpath.normpath(pathname)
    if normalized in (".", "..") or normalized.startswith("../"):
        raise ValueError(f"Invalid blob pathname: {pathname!r}")
    return normalized


class BlobStore(ABC):
    """Interface for blob storage backends."""

    @abstractmethod
    def put(
        self,
        pathname: str,
        data: bytes,
        content_type: Optional[str] = None,
        access: str = "public",
    ) -> BlobResult:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Stores blobs on the local filesystem; the app serves them under ``/assets``."""

    def __init__(self, root: str, base_url: str, random_suffix: bool = True):
        self.root = os.path.abspath(root)
        self.base_url = base_url.rstrip("/")
        self.random_suffix = random_suffix

    def path_for(self, pathname: str) -> str:
        return os.path.join(self.root, *normalize_pathname(pathname).split("/"))

    def url_for(self, pathname: str) -> str:
        return f"{self.base_url}/assets/{quote(pathname)}"

    def put(self, pathname, data, content_type=None, access="public"):
        if access != "public":
            raise ValueError("Only public access is supported")
        key = normalize_pathname(pathname)
        if self.random_suffix:
            key = add_random_suffix(key)

        file_path = self.path_for(key)
        try:
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
        except (IOError, OSError) as e:
            logger.error(f"Failed to write blob {key}: {e}")
            raise BlobStoreError(f"Failed to write blob: {e}")

        logger.info(f"Stored blob {key} ({content_type or 'unknown type'}, {len(data)} bytes)")
        return BlobResult(url=self.url_for(key), pathname=key, content_type=content_type, size=len(data))

    def read(self, pathname: str) -> bytes:
        """Read back a stored blob by key."""
        with open(self.path_for(pathname), "rb") as f:
            return f.read()


class VercelBlobStore(BlobStore):
    """Stores blobs in Vercel Blob through its HTTP API."""

    API_VERSION = "7"

    def __init__(self, token: str, api_url: str = "https://blob.vercel-storage.com", session=None):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()

    def put(self, pathname, data, content_type=None, access="public"):
        if access != "public":
            raise ValueError("Only public access is supported")
        key = normalize_pathname(pathname)
        headers = {
            "authorization": f"Bearer {self.token}",
            "x-api-version": self.API_VERSION,
            "x-vercel-blob-access": access,
            "x-add-random-suffix": "1",
        }
        if content_type:
            headers["x-content-type"] = content_type

        try:
            response = self.session.put(f"{self.api_url}/{quote(key)}", data=data, headers=headers)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Vercel Blob upload failed for {key}: {e}")
            raise BlobStoreError(f"Blob upload failed: {e}")

        url = body.get("url")
        if not url:
            logger.error(f"Vercel Blob response for {key} has no url: {body}")
            raise BlobStoreError("Blob upload returned no URL")

        logger.info(f"Stored blob {body.get('pathname', key)} in Vercel Blob ({len(data)} bytes)")
        return BlobResult(
            url=url,
            pathname=body.get("pathname", key),
            content_type=body.get("contentType", content_type),
            size=len(data),
        )


def create_blob_store(backend: Optional[str] = None) -> BlobStore:
    """Build the blob store selected by configuration."""
    backend = (backend or Config.BLOB_BACKEND).lower()
    if backend == "local":
        return LocalBlobStore(Config.BLOB_DIR, Config.PUBLIC_BASE_URL)
    if backend == "vercel":
        return VercelBlobStore(Config.get_blob_token(), Config.VERCEL_BLOB_API_URL)
    raise ValueError(f"Unsupported blob backend: {backend}")


_blob_store: Optional[BlobStore] = None


def get_blob_store() -> BlobStore:
    """FastAPI dependency returning the process-wide blob store."""
    global _blob_store
    if _blob_store is None:
        _blob_store = create_blob_store()
        logger.info(f"Blob store initialized: {type(_blob_store).__name__}")
    return _blob_store
