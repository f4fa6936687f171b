"""Upload service functions: validation and persistence of raw photos."""
import os
import re
import time
from typing import Optional

from config import Config
from common.error_messages import ErrorCode
from storage.blob_store import BlobStore
from utils.logger import get_logger

logger = get_logger("upload.services")

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def validate_upload(content_type: Optional[str], size: int) -> Optional[ErrorCode]:
    """
    Check a file's declared media type and size.

    The type check looks at the declared media type only; the file's
    extension and contents are not inspected.

    Returns:
        The first failing ErrorCode (type before size), or None if valid
    """
    if (content_type or "").lower() not in Config.ALLOWED_IMAGE_TYPES:
        return ErrorCode.INVALID_FILE_TYPE
    if size > Config.MAX_UPLOAD_BYTES:
        return ErrorCode.FILE_TOO_LARGE
    return None


def safe_filename(filename: Optional[str]) -> str:
    """Reduce a client-supplied file name to a storage-safe base name."""
    base = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = _UNSAFE_NAME_CHARS.sub("-", base).strip("-.")
    return cleaned or "photo"


def upload_pathname(filename: Optional[str], now_ms: Optional[int] = None) -> str:
    """Storage key for an uploaded photo: ``<prefix>/<epoch-ms>-<name>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{Config.UPLOAD_PREFIX}/{now_ms}-{safe_filename(filename)}"


def store_upload(store: BlobStore, filename: Optional[str], data: bytes, content_type: str) -> str:
    """
    Persist an uploaded photo with public read access.

    Returns:
        Durable URL of the stored photo
    """
    pathname = upload_pathname(filename)
    blob = store.put(pathname, data, content_type=content_type, access="public")
    logger.info(f"Uploaded photo stored as {blob.pathname} ({len(data)} bytes)")
    return blob.url
