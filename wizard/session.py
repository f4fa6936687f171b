"""Client-side wizard session: the state handed from one wizard step to the next."""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Keys used by the browser wizard in per-tab session storage
UPLOADED_PHOTO_URL_KEY = "uploadedPhotoUrl"
SELECTED_STYLE_KEY = "selectedStyle"
GENERATED_AVATAR_URL_KEY = "generatedAvatarUrl"


class WizardSession(BaseModel):
    """
    Per-tab wizard state. Lives only as long as the client; there is no
    server-side counterpart. ``clear()`` is "start over".
    """
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    uploaded_photo_url: Optional[str] = Field(None, alias=UPLOADED_PHOTO_URL_KEY)
    selected_style: Optional[str] = Field(None, alias=SELECTED_STYLE_KEY)
    generated_avatar_url: Optional[str] = Field(None, alias=GENERATED_AVATAR_URL_KEY)

    def clear(self) -> None:
        self.uploaded_photo_url = None
        self.selected_style = None
        self.generated_avatar_url = None

    def to_storage(self) -> Dict[str, str]:
        """Session-storage view: only keys that are set."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_storage(cls, storage: Dict[str, str]) -> "WizardSession":
        return cls.model_validate({k: v for k, v in storage.items() if v})
