"""Photo upload module."""
from upload.models import UploadResponse
from upload.services import validate_upload, upload_pathname, store_upload

__all__ = [
    "UploadResponse",
    "validate_upload",
    "upload_pathname",
    "store_upload",
]
