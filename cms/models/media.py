import enum

from sqlalchemy import Column, Integer, String, ForeignKey

from cms.database import Base
from cms.models.base import TimestampMixin, SoftDeleteMixin


class FileType(str, enum.Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    OTHER = "other"


class MediaFile(TimestampMixin, SoftDeleteMixin, Base):
    """
    Uploaded file metadata. The binary lives under ``settings.upload_dir`` and
    is served from ``/uploads/<filename>``; soft delete keeps it on disk.
    """

    __tablename__ = "media_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False, unique=True)
    original_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_url = Column(String(500), nullable=False)
    thumbnail_url = Column(String(500), nullable=True)
    file_type = Column(String(20), nullable=False, index=True)
    mime_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    image_width = Column(Integer, nullable=True)
    image_height = Column(Integer, nullable=True)
    alt_text = Column(String(255), nullable=True)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
