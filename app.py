"""
FaceCraft avatar API.

Features:
- Photo upload to blob storage (POST /api/upload)
- Stylized avatar generation via Gemini: describe, generate, re-host (POST /api/generate)
- Style menu for the wizard (GET /api/styles)
- Public serving of locally stored blobs (/assets)
"""
import json
import time
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from upload.routes import router as upload_router
from generation.routes import router as generation_router
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

logger = get_logger("main")

# Sensitive fields that should be masked in logs
SENSITIVE_FIELDS = {
    'token', 'api_key', 'secret', 'authorization', 'blob_read_write_token'
}

MAX_LOGGED_BODY = 2000


def mask_sensitive_data(data: Any, mask_value: str = "***MASKED***") -> Any:
    """
    Recursively mask sensitive fields in data structures.

    Args:
        data: Data to mask (dict, list, or string)
        mask_value: Value to replace sensitive data with

    Returns:
        Data with sensitive fields masked
    """
    if isinstance(data, dict):
        return {
            key: mask_value if key.lower() in SENSITIVE_FIELDS else mask_sensitive_data(value, mask_value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive_data(item, mask_value) for item in data]
    if isinstance(data, str):
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, ValueError):
            return data
        if isinstance(parsed, (dict, list)):
            return json.dumps(mask_sensitive_data(parsed, mask_value))
        return data
    return data


def describe_request_body(content_type: str, body: bytes) -> str:
    """Loggable summary of a request body: masked JSON, or a size note for anything else."""
    if not body:
        return ""
    if "application/json" not in content_type:
        return f"[{content_type or 'unknown content type'} body: {len(body)} bytes]"
    text = mask_sensitive_data(body.decode("utf-8", errors="replace"))
    if len(text) > MAX_LOGGED_BODY:
        text = text[:MAX_LOGGED_BODY] + "... [truncated]"
    return text


# Validate configuration on startup
try:
    Config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please set required environment variables in .env file")

app = FastAPI(
    title="FaceCraft Avatar API",
    description="Upload a photo, pick a style, and get a stylized avatar generated with Gemini.",
    version="1.0.0"
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or mistyped request bodies are client errors."""
    logger.info(f"Request validation failed for {request.url.path}: {exc.errors()}")
    message, status_code = get_error_response(ErrorCode.INVALID_REQUEST)
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
    return JSONResponse(status_code=status_code, content={"error": message})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing."""
    start_time = time.time()
    full_url = str(request.url)

    log_msg = f"→ {request.method} {full_url} - Client: {request.client.host if request.client else 'unknown'}"
    if request.method in ("POST", "PUT", "PATCH"):
        body = await request.body()
        summary = describe_request_body(request.headers.get("content-type", ""), body)
        if summary:
            log_msg += f"\n  Request Body: {summary}"
    logger.info(log_msg)

    try:
        response = await call_next(request)
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {e} - Time: {process_time:.2f}ms")
        raise

    process_time = (time.time() - start_time) * 1000
    logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
    return response


# Serve locally stored blobs
if Config.BLOB_BACKEND == "local":
    try:
        app.mount("/assets", StaticFiles(directory=Config.BLOB_DIR), name="assets")
        logger.info(f"Blob directory {Config.BLOB_DIR} mounted at /assets")
    except Exception as e:
        logger.error(f"Failed to mount blob directory: {e}")
        logger.warning("Uploaded photos and avatars will not be publicly reachable")

app.include_router(upload_router)
app.include_router(generation_router)
logger.info("Upload and generation routers included")


@app.on_event("startup")
async def startup_event():
    """Log startup event."""
    logger.info("=" * 80)
    logger.info("FaceCraft API starting up")
    logger.info(f"Blob backend: {Config.BLOB_BACKEND} - public base URL: {Config.PUBLIC_BASE_URL}")
    logger.info(f"Models: vision={Config.GEMINI_VISION_MODEL} image={Config.GEMINI_IMAGE_MODEL}")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown event."""
    logger.info("=" * 80)
    logger.info("FaceCraft API shutting down")
    logger.info("=" * 80)


@app.get("/healthz")
def health():
    """Health check endpoint."""
    logger.debug("Health check requested")
    return {"status": "ok"}


if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=True,
        log_level="info"
    )
