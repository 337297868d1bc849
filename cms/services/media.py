"""
Media Library Service

Stores uploads under ``settings.upload_dir`` and records their metadata.

Processing Pipeline (raster images only):
    1. Decode with Pillow, reject undecodable files
    2. Downscale to at most 1920px wide, keeping aspect ratio
    3. Re-encode: JPEG quality 85, PNG compress level 8, WebP quality 80
    4. Write a 300x300 center-cropped ``thumb_<filename>`` thumbnail

SVG, GIF and documents are written unchanged (GIFs still get a thumbnail).
Deleting a media file is a soft delete; the bytes stay on disk.
"""

import io
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import aiofiles
from PIL import Image, ImageOps, UnidentifiedImageError
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from cms.config import get_settings
from cms.database import utcnow
from cms.errors import BadRequest, NotFound
from cms.models import FileType, MediaFile
from cms.schemas import Pagination
from cms.services.base import not_deleted, paginate
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

MAX_IMAGE_WIDTH = 1920
THUMBNAIL_SIZE = (300, 300)
UPLOAD_URL_PREFIX = "/uploads"

ALLOWED_MIME_TYPES = frozenset(
    {
        # Images
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/svg+xml",
        # Documents
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "text/plain",
        "text/csv",
    }
)

# mime type -> (Pillow format, save options)
REENCODE_OPTIONS = {
    "image/jpeg": ("JPEG", {"quality": 85}),
    "image/png": ("PNG", {"compress_level": 8}),
    "image/webp": ("WEBP", {"quality": 80}),
}


@dataclass
class ProcessedImage:
    content: bytes
    thumbnail: bytes
    width: int
    height: int


def classify(mime_type: str) -> FileType:
    if mime_type.startswith("image/"):
        return FileType.IMAGE
    if mime_type.startswith("video/"):
        return FileType.VIDEO
    if (
        "pdf" in mime_type
        or "document" in mime_type
        or "sheet" in mime_type
        or "excel" in mime_type
        or "msword" in mime_type
        or mime_type.startswith("text/")
    ):
        return FileType.DOCUMENT
    return FileType.OTHER


def build_filename(original_name: str) -> str:
    """``<slugified stem>-<8 hex chars><lowercased ext>``"""
    stem, ext = os.path.splitext(os.path.basename(original_name))
    safe_stem = generate_slug(stem) or "file"
    return f"{safe_stem}-{uuid.uuid4().hex[:8]}{ext.lower()}"


def _encode(image: Image.Image, image_format: str, options: dict) -> bytes:
    if image_format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format=image_format, **options)
    return buffer.getvalue()


def process_image(data: bytes, mime_type: str) -> ProcessedImage:
    """Optimise a raster image and build its thumbnail. CPU bound."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise BadRequest("Uploaded file is not a valid image") from e

    image_format, options = REENCODE_OPTIONS.get(mime_type, (image.format, {}))

    thumbnail = ImageOps.fit(image, THUMBNAIL_SIZE, Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    thumbnail_bytes = _encode(thumbnail, image_format, options)

    if mime_type not in REENCODE_OPTIONS:
        return ProcessedImage(data, thumbnail_bytes, image.width, image.height)

    if image.width > MAX_IMAGE_WIDTH:
        height = round(image.height * MAX_IMAGE_WIDTH / image.width)
        image = image.resize((MAX_IMAGE_WIDTH, height), Image.Resampling.LANCZOS)

    return ProcessedImage(_encode(image, image_format, options), thumbnail_bytes, image.width, image.height)


async def _write(path: str, content: bytes) -> None:
    async with aiofiles.open(path, "wb") as f:
        await f.write(content)


async def upload_media(
    db: AsyncSession,
    data: bytes,
    original_name: str,
    mime_type: str,
    uploaded_by: int,
    alt_text: Optional[str] = None,
) -> MediaFile:
    settings = get_settings()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise BadRequest(
            f"Invalid file type. Allowed types: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
        )
    if len(data) > settings.max_file_size:
        raise BadRequest(f"File too large. Maximum size is {settings.max_file_size // (1024 * 1024)}MB")
    if not data:
        raise BadRequest("Uploaded file is empty")

    file_type = classify(mime_type)
    filename = build_filename(original_name)
    os.makedirs(settings.upload_dir, exist_ok=True)
    disk_path = os.path.join(settings.upload_dir, filename)

    content = data
    width = height = None
    thumbnail_url = None
    if file_type == FileType.IMAGE and mime_type != "image/svg+xml":
        processed = await run_in_threadpool(process_image, data, mime_type)
        content, width, height = processed.content, processed.width, processed.height
        thumb_name = f"thumb_{filename}"
        await _write(os.path.join(settings.upload_dir, thumb_name), processed.thumbnail)
        thumbnail_url = f"{UPLOAD_URL_PREFIX}/{thumb_name}"

    await _write(disk_path, content)

    media = MediaFile(
        filename=filename,
        original_name=original_name,
        file_path=disk_path,
        file_url=f"{UPLOAD_URL_PREFIX}/{filename}",
        thumbnail_url=thumbnail_url,
        file_type=file_type.value,
        mime_type=mime_type,
        file_size=len(content),
        image_width=width,
        image_height=height,
        alt_text=alt_text or None,
        uploaded_by=uploaded_by,
    )
    db.add(media)
    await db.commit()
    await db.refresh(media)

    logger.info(f"User {uploaded_by} uploaded {filename} ({mime_type}, {len(content)} bytes)")
    return media


async def list_media(
    db: AsyncSession,
    page: int,
    limit: int,
    file_type: Optional[FileType] = None,
    search: Optional[str] = None,
) -> Tuple[Sequence[MediaFile], Pagination]:
    query = not_deleted(select(MediaFile), MediaFile)
    if file_type:
        query = query.where(MediaFile.file_type == FileType(file_type).value)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                MediaFile.original_name.ilike(pattern),
                MediaFile.alt_text.ilike(pattern),
                MediaFile.filename.ilike(pattern),
            )
        )
    query = query.order_by(MediaFile.created_at.desc(), MediaFile.id.desc())
    return await paginate(db, query, page, limit)


async def get_media(db: AsyncSession, media_id: int) -> MediaFile:
    result = await db.execute(
        not_deleted(select(MediaFile), MediaFile).where(MediaFile.id == media_id)
    )
    media = result.scalar_one_or_none()
    if not media:
        raise NotFound("Media file not found")
    return media


async def media_owner(db: AsyncSession, media_id: int) -> Optional[int]:
    result = await db.execute(
        not_deleted(select(MediaFile.uploaded_by), MediaFile).where(MediaFile.id == media_id)
    )
    return result.scalar_one_or_none()


async def update_media(db: AsyncSession, media_id: int, alt_text: Optional[str]) -> MediaFile:
    media = await get_media(db, media_id)
    media.alt_text = alt_text
    await db.commit()
    await db.refresh(media)
    return media


async def delete_media(db: AsyncSession, media_id: int) -> None:
    media = await get_media(db, media_id)
    media.deleted_at = utcnow()
    await db.commit()
    logger.info(f"Media {media_id} deleted")
