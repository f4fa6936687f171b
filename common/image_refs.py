"""Helpers for image references: data URIs and remote URLs."""
import base64
import binascii
import mimetypes
import re
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests

from utils.logger import get_logger

logger = get_logger("common.image_refs")

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]+)*?);base64,(?P<data>.*)$", re.DOTALL)

DEFAULT_IMAGE_MIME = "image/png"


def to_data_uri(data: bytes, mime_type: str = DEFAULT_IMAGE_MIME) -> str:
    """Encode raw bytes as a base64 ``data:`` URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_IMAGE_MIME};base64,{encoded}"


def parse_data_uri(ref: str) -> Tuple[bytes, str]:
    """
    Decode a base64 ``data:`` URI.

    Returns:
        Tuple of (bytes, mime_type)

    Raises:
        ValueError: If the reference is not a base64 data URI
    """
    match = _DATA_URI_RE.match(ref or "")
    if not match:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}")
    return data, match.group("mime") or DEFAULT_IMAGE_MIME


def guess_mime_type(url: str, header_value: Optional[str] = None) -> str:
    """Pick a MIME type from a Content-Type header, falling back to the URL's extension."""
    if header_value:
        mime = header_value.split(";")[0].strip().lower()
        if mime and mime != "application/octet-stream":
            return mime
    guessed, _ = mimetypes.guess_type(urlparse(url).path)
    return guessed or DEFAULT_IMAGE_MIME


def fetch_image_bytes(ref: str, timeout: Optional[float] = None) -> Tuple[bytes, str]:
    """
    Fetch the bytes behind an image reference exactly once.

    Supports ``data:`` URIs and http(s) URLs. No retries: a short-lived
    reference may already be gone on a second attempt.

    Returns:
        Tuple of (bytes, mime_type)

    Raises:
        ValueError: Unsupported reference scheme
        requests.RequestException: Network or HTTP status failure
    """
    if ref.startswith("data:"):
        return parse_data_uri(ref)

    scheme = urlparse(ref).scheme.lower()
    if scheme not in ("http", "https"):
        raise ValueError(f"Unsupported image reference scheme: {scheme or '(none)'}")

    response = requests.get(ref, timeout=timeout)
    response.raise_for_status()
    mime_type = guess_mime_type(ref, response.headers.get("content-type"))
    logger.debug(f"Fetched {len(response.content)} bytes ({mime_type}) from {ref[:80]}")
    return response.content, mime_type
