"""
Python client for the four-step avatar wizard.

upload photo -> choose style -> generate -> download

Pre-validation here mirrors the server's checks but is advisory only; the
server validates every upload again.
"""
import mimetypes
import os
import threading
import time
from typing import Callable, Optional

import requests

from config import Config
from common.styles import get_style
from utils.logger import get_logger
from wizard.session import WizardSession

logger = get_logger("wizard.client")


class WizardError(Exception):
    """A wizard step failed. ``message`` is suitable for showing to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def prevalidate_photo(content_type: Optional[str], size: int) -> None:
    """Client-side check of a photo before upload. Raises WizardError."""
    if (content_type or "").lower() not in Config.ALLOWED_IMAGE_TYPES:
        raise WizardError("Please upload a valid image file (JPG, PNG, WEBP, etc.)")
    if size > Config.MAX_UPLOAD_BYTES:
        raise WizardError(f"File is too large. Please upload an image smaller than {Config.max_upload_mb()}MB.")


class ProgressSimulator:
    """
    Cosmetic progress for the generation step.

    Advances by ``step`` every ``interval`` seconds and stops at ``ceiling``
    until ``complete()`` is called. It is not connected to server progress.
    """

    def __init__(self, callback: Callable[[int], None], interval: float = 0.3, step: int = 5, ceiling: int = 95):
        self.callback = callback
        self.interval = interval
        self.step = step
        self.ceiling = ceiling
        self.progress = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.progress = min(self.progress + self.step, self.ceiling)
            self.callback(self.progress)
            if self.progress >= self.ceiling:
                return

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name="wizard-progress", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()

    def complete(self) -> None:
        self.stop()
        self.progress = 100
        self.callback(100)


class WizardClient:
    """Drives the wizard against the API, keeping state in a WizardSession."""

    def __init__(self, base_url: str = "http://localhost:8000", session: Optional[WizardSession] = None, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or WizardSession()
        self.http = http or requests.Session()

    def _error_from(self, response, fallback: str) -> WizardError:
        try:
            message = response.json().get("error") or fallback
        except ValueError:
            message = fallback
        return WizardError(message, status_code=response.status_code)

    def upload_photo(self, path: str, content_type: Optional[str] = None) -> str:
        """Step 1: validate and upload a photo; stores the returned URL in the session."""
        content_type = content_type or mimetypes.guess_type(path)[0]
        prevalidate_photo(content_type, os.path.getsize(path))

        with open(path, "rb") as f:
            response = self.http.post(
                f"{self.base_url}/api/upload",
                files={"file": (os.path.basename(path), f, content_type)},
            )
        if response.status_code != 200:
            raise self._error_from(response, "Failed to upload file")

        url = response.json()["url"]
        self.session.uploaded_photo_url = url
        logger.info(f"Photo uploaded: {url}")
        return url

    def choose_style(self, style_id: str) -> str:
        """Step 2: pick a style from the menu. Local only, no request is made."""
        if not self.session.uploaded_photo_url:
            raise WizardError("Please upload a photo first.")
        style = get_style(style_id)
        if style is None:
            raise WizardError(f"Unknown style: {style_id}")
        self.session.selected_style = style["id"]
        return style["id"]

    def generate(self, on_progress: Optional[Callable[[int], None]] = None) -> str:
        """Step 3: generate the avatar; stores the avatar URL in the session."""
        photo_url = self.session.uploaded_photo_url
        style = self.session.selected_style
        if not photo_url or not style:
            raise WizardError("Missing photo or style. Please start over.")

        progress = ProgressSimulator(on_progress) if on_progress else None
        if progress:
            progress.start()
        try:
            response = self.http.post(
                f"{self.base_url}/api/generate",
                json={"photoUrl": photo_url, "style": style},
            )
        finally:
            if progress:
                progress.stop()

        if response.status_code != 200:
            raise self._error_from(response, "Failed to generate avatar")

        if progress:
            progress.complete()
        avatar_url = response.json()["avatarUrl"]
        self.session.generated_avatar_url = avatar_url
        logger.info(f"Avatar generated: {avatar_url}")
        return avatar_url

    def download(self, dest_dir: str = ".") -> str:
        """Step 4: save the generated avatar to ``dest_dir``. Returns the file path."""
        avatar_url = self.session.generated_avatar_url
        if not avatar_url:
            raise WizardError("No generated avatar found. Please start over.")

        response = self.http.get(avatar_url)
        if response.status_code != 200:
            raise WizardError("Failed to download avatar. Please try again.", status_code=response.status_code)

        path = os.path.join(dest_dir, f"facecraft-avatar-{int(time.time() * 1000)}.jpg")
        with open(path, "wb") as f:
            f.write(response.content)
        logger.info(f"Avatar downloaded to {path}")
        return path

    def start_over(self) -> None:
        """Clear all wizard state."""
        self.session.clear()
