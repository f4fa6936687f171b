"""Test configuration: isolated blob/log directories and fake upstream services."""
import os
import sys
import tempfile
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Must be set before config is imported
os.environ["BLOB_BACKEND"] = "local"
os.environ["BLOB_DIR"] = tempfile.mkdtemp(prefix="facecraft-blobs-")
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="facecraft-logs-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

from fastapi.testclient import TestClient  # noqa: E402

from app import app  # noqa: E402
from ai.services import AIService, get_ai_service  # noqa: E402
from common.image_refs import to_data_uri  # noqa: E402
from config import Config  # noqa: E402
from storage.blob_store import LocalBlobStore, get_blob_store  # noqa: E402

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def make_png(size: int) -> bytes:
    """Bytes that start like a PNG, padded to ``size``."""
    return PNG_SIGNATURE + b"\x00" * max(size - len(PNG_SIGNATURE), 0)


class FakeAIService(AIService):
    """In-memory AIService that records every call."""

    def __init__(self, description="A round face with short dark hair and brown eyes.", image=None,
                 describe_error=None, generate_error=None):
        self.description = description
        self.image = make_png(256) if image is None else image
        self.describe_error = describe_error
        self.generate_error = generate_error
        self.describe_calls = []
        self.generate_calls = []

    @property
    def call_count(self):
        return len(self.describe_calls) + len(self.generate_calls)

    def describe(self, image_ref, instruction):
        self.describe_calls.append((image_ref, instruction))
        if self.describe_error:
            raise self.describe_error
        return self.description

    def generate(self, prompt):
        self.generate_calls.append(prompt)
        if self.generate_error:
            raise self.generate_error
        if not self.image:
            return None
        return to_data_uri(self.image, "image/png")


class RecordingBlobStore(LocalBlobStore):
    """LocalBlobStore that remembers every write and can be told to fail."""

    def __init__(self, root, base_url, fail_with=None):
        super().__init__(root, base_url)
        self.puts = []
        self.fail_with = fail_with

    def put(self, pathname, data, content_type=None, access="public"):
        if self.fail_with:
            raise self.fail_with
        blob = super().put(pathname, data, content_type=content_type, access=access)
        self.puts.append(blob)
        return blob


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def blob_store():
    # Writes go to the directory served at /assets so returned URLs resolve
    return RecordingBlobStore(Config.BLOB_DIR, Config.PUBLIC_BASE_URL)


@pytest.fixture
def client(fake_ai, blob_store):
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
