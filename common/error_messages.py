"""
User-facing error messages and status codes.

Every error returned by the API is rendered as ``{"error": <message>}``.
Client input errors carry a specific message; upstream failures carry a
generic one and their details stay in the server log.
"""
from typing import NoReturn, Tuple
from enum import Enum

from fastapi import HTTPException

from config import Config


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Upload validation (400)
    NO_FILE_PROVIDED = "NO_FILE_PROVIDED"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"

    # Generation validation (400)
    NO_PHOTO_URL = "NO_PHOTO_URL"
    NO_STYLE_SELECTED = "NO_STYLE_SELECTED"

    # Request body could not be parsed or validated (400)
    INVALID_REQUEST = "INVALID_REQUEST"

    # Upstream / storage failures (500)
    UPLOAD_FAILED = "UPLOAD_FAILED"
    GENERATION_FAILED = "GENERATION_FAILED"

    # Generic
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Messages may reference {max_upload_mb}, filled from Config when rendered
ERROR_MESSAGES = {
    ErrorCode.NO_FILE_PROVIDED: "No file provided",
    ErrorCode.INVALID_FILE_TYPE: "Invalid file type. Please upload a valid image.",
    ErrorCode.FILE_TOO_LARGE: "File too large. Maximum size is {max_upload_mb}MB.",
    ErrorCode.NO_PHOTO_URL: "No photo URL provided",
    ErrorCode.NO_STYLE_SELECTED: "No style selected",
    ErrorCode.INVALID_REQUEST: "Invalid request body",
    ErrorCode.UPLOAD_FAILED: "Failed to upload file",
    ErrorCode.GENERATION_FAILED: "Failed to generate avatar",
    ErrorCode.UNKNOWN_ERROR: "Something unexpected happened. Please try again.",
}


ERROR_STATUS_CODES = {
    ErrorCode.NO_FILE_PROVIDED: 400,
    ErrorCode.INVALID_FILE_TYPE: 400,
    ErrorCode.FILE_TOO_LARGE: 400,
    ErrorCode.NO_PHOTO_URL: 400,
    ErrorCode.NO_STYLE_SELECTED: 400,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.UPLOAD_FAILED: 500,
    ErrorCode.GENERATION_FAILED: 500,
    ErrorCode.UNKNOWN_ERROR: 500,
}


def get_error_response(error_code: ErrorCode) -> Tuple[str, int]:
    """
    Get user-friendly error message and HTTP status code.

    Args:
        error_code: The error code enum

    Returns:
        Tuple of (error_message, status_code)
    """
    template = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])
    status_code = ERROR_STATUS_CODES.get(error_code, 500)
    return template.format(max_upload_mb=Config.max_upload_mb()), status_code


def raise_api_error(error_code: ErrorCode) -> NoReturn:
    """Raise the HTTPException that renders ``error_code`` to the client."""
    message, status_code = get_error_response(error_code)
    raise HTTPException(status_code=status_code, detail=message)
