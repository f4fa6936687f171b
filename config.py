"""
Configuration module - loads all settings from environment variables.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    print(f"Warning: Failed to load .env file: {e}")
    print("Continuing with environment variables or defaults...")


class Config:
    """Application configuration loaded from environment variables."""

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Safely parse integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid integer for {key}, using default {default}: {e}")
            return default

    # Gemini API
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_VISION_MODEL: str = os.getenv("GEMINI_VISION_MODEL", "gemini-2.5-flash")
    GEMINI_IMAGE_MODEL: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image-preview")

    # Blob storage
    BLOB_BACKEND: str = os.getenv("BLOB_BACKEND", "local").lower()
    BLOB_DIR: str = os.getenv("BLOB_DIR", "assets/blobs")
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
    BLOB_READ_WRITE_TOKEN: str = os.getenv("BLOB_READ_WRITE_TOKEN", "")
    VERCEL_BLOB_API_URL: str = os.getenv("VERCEL_BLOB_API_URL", "https://blob.vercel-storage.com").rstrip("/")
    UPLOAD_PREFIX: str = os.getenv("UPLOAD_PREFIX", "facecraft-uploads")
    AVATAR_PREFIX: str = os.getenv("AVATAR_PREFIX", "facecraft-avatars")

    # Upload limits
    MAX_UPLOAD_BYTES: int = _get_int.__func__("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
    ALLOWED_IMAGE_TYPES: tuple = (
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/avif",
        "image/gif",
        "image/bmp",
        "image/tiff",
    )

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int.__func__("PORT", 8000)

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if cls.BLOB_BACKEND not in ("local", "vercel"):
            raise ValueError(f"Unsupported BLOB_BACKEND: {cls.BLOB_BACKEND}")
        if cls.BLOB_BACKEND == "vercel" and not cls.BLOB_READ_WRITE_TOKEN:
            raise ValueError("BLOB_READ_WRITE_TOKEN is required when BLOB_BACKEND=vercel")

    @classmethod
    def max_upload_mb(cls) -> str:
        """Upload limit in MiB for user-facing messages, e.g. "10" or "2.5"."""
        return f"{cls.MAX_UPLOAD_BYTES / (1024 * 1024):g}"

    @classmethod
    def get_gemini_api_key(cls) -> str:
        """Get GEMINI_API_KEY, raise error if not set."""
        if not cls.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY must be set in environment variables")
        return cls.GEMINI_API_KEY

    @classmethod
    def get_blob_token(cls) -> str:
        """Get BLOB_READ_WRITE_TOKEN, raise error if not set."""
        if not cls.BLOB_READ_WRITE_TOKEN:
            raise ValueError("BLOB_READ_WRITE_TOKEN must be set in environment variables")
        return cls.BLOB_READ_WRITE_TOKEN


# Initialize directories
try:
    if Config.BLOB_BACKEND == "local":
        os.makedirs(Config.BLOB_DIR, exist_ok=True)
except Exception as e:
    print(f"Warning: Failed to create blob directory: {e}")
    print("Uploads will fail until the directory is writable.")
