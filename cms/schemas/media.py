from datetime import datetime
from typing import Optional

from cms.schemas.common import CamelModel


class MediaResponse(CamelModel):
    id: int
    filename: str
    original_name: str
    file_url: str
    thumbnail_url: Optional[str] = None
    file_type: str
    mime_type: str
    file_size: int
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    alt_text: Optional[str] = None
    uploaded_by: int
    created_at: datetime


class MediaUpdate(CamelModel):
    alt_text: Optional[str] = None
