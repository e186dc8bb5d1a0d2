from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import field_validator

from emoticon_browser.schemas.base import BaseSchema

class ImageStatus(str, Enum):
    """Outcome of the image existence probe."""
    VERIFIED = "verified"
    UNVERIFIED = "unverified"

class Pack(BaseSchema):
    """A named group of emoticons."""
    id: int
    title: str

class EmoticonRecord(BaseSchema):
    """One emoticon joined to its pack, ready for display."""
    pack_id: Optional[int] = None
    pack_title: str
    title: str = ""
    description: str = ""
    keywords: List[str] = []
    img_src: str

    @field_validator("keywords")
    @classmethod
    def _drop_blank_keywords(cls, value: List[str]) -> List[str]:
        return [k.strip() for k in value if k and k.strip()]

class ImageLocation(BaseSchema):
    """Candidate image URL and whether the probe confirmed it."""
    url: str
    status: ImageStatus = ImageStatus.UNVERIFIED

    @property
    def verified(self) -> bool:
        return self.status is ImageStatus.VERIFIED

class Catalog(BaseSchema):
    """Result of one complete load of both datasets."""
    packs: List[Pack] = []
    emoticons: List[EmoticonRecord] = []
    loaded_at: Optional[datetime] = None
