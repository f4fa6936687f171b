"""Photo upload API route."""
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from common.error_messages import ErrorCode, raise_api_error
from storage.blob_store import BlobStore, get_blob_store
from upload.models import UploadResponse
from upload.services import validate_upload, store_upload
from utils.logger import get_logger

logger = get_logger("upload.routes")
router = APIRouter(prefix="/api", tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    openapi_extra={
        "requestBody": {
            "content": {
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {"file": {"type": "string", "format": "binary"}},
                    }
                }
            }
        }
    },
)
async def upload_photo(request: Request, store: BlobStore = Depends(get_blob_store)):
    """
    Upload a photo to the blob store.

    The ``file`` form field is read by hand so that a missing field and a
    plain-text field both count as "no file".

    Validation order: missing file, then media type, then size.

    Returns:
        Durable URL of the stored photo
    """
    async with request.form() as form:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            raise_api_error(ErrorCode.NO_FILE_PROVIDED)

        try:
            data = await file.read()
        except Exception as e:
            logger.error(f"Failed to read uploaded file: {e}")
            raise_api_error(ErrorCode.UPLOAD_FAILED)

    error = validate_upload(file.content_type, len(data))
    if error is not None:
        logger.info(f"Rejected upload {file.filename!r} ({file.content_type}, {len(data)} bytes): {error.value}")
        raise_api_error(error)

    try:
        url = store_upload(store, file.filename, data, file.content_type)
    except Exception as e:
        logger.error(f"Error uploading file {file.filename!r}: {e}", exc_info=True)
        raise_api_error(ErrorCode.UPLOAD_FAILED)

    return UploadResponse(success=True, url=url)
