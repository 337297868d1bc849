from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.common import PageParams, page_params
from cms.database import get_db
from cms.dependencies import Principal, require_owner_or_admin, require_permission, require_roles
from cms.errors import NotFound
from cms.middleware.metrics import record_upload
from cms.models import FileType
from cms.permissions import CONTENT_MANAGERS, Action, Module
from cms.schemas import DataResponse, ListResponse, MediaResponse, MediaUpdate, MessageResponse
from cms.services import media

# viewers have no media access; the permission map narrows what managers may do
router = APIRouter(dependencies=[Depends(require_roles(*CONTENT_MANAGERS))])

MEDIA_PAGE_SIZE = 20


async def _media_owner(request: Request, db: AsyncSession) -> Optional[int]:
    try:
        media_id = int(request.path_params["media_id"])
    except (KeyError, ValueError):
        raise NotFound("Media file not found")
    return await media.media_owner(db, media_id)


@router.post("/upload", response_model=DataResponse[MediaResponse], status_code=201)
async def upload(
    file: UploadFile = File(...),
    alt_text: Optional[str] = Form(None, alias="altText"),
    principal: Principal = Depends(require_permission(Module.MEDIA, Action.UPLOAD)),
    db: AsyncSession = Depends(get_db),
):
    data = await file.read()
    item = await media.upload_media(
        db,
        data,
        file.filename or "upload",
        file.content_type or "application/octet-stream",
        principal.user_id,
        alt_text,
    )
    record_upload(item.file_type)
    return DataResponse(data=MediaResponse.model_validate(item))


@router.get("", response_model=ListResponse[MediaResponse])
async def list_media(
    type: Optional[FileType] = Query(None),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params(MEDIA_PAGE_SIZE)),
    _: Principal = Depends(require_permission(Module.MEDIA, Action.READ)),
    db: AsyncSession = Depends(get_db),
):
    rows, page = await media.list_media(db, params.page, params.limit, file_type=type, search=search)
    return ListResponse(data=[MediaResponse.model_validate(m) for m in rows], pagination=page)


@router.get("/{media_id}", response_model=DataResponse[MediaResponse])
async def get_media(
    media_id: int,
    _: Principal = Depends(require_permission(Module.MEDIA, Action.READ)),
    db: AsyncSession = Depends(get_db),
):
    item = await media.get_media(db, media_id)
    return DataResponse(data=MediaResponse.model_validate(item))


@router.put(
    "/{media_id}",
    response_model=DataResponse[MediaResponse],
    dependencies=[Depends(require_owner_or_admin(_media_owner))],
)
async def update_media(
    media_id: int,
    data: MediaUpdate,
    _: Principal = Depends(require_permission(Module.MEDIA, Action.UPDATE)),
    db: AsyncSession = Depends(get_db),
):
    item = await media.update_media(db, media_id, data.alt_text)
    return DataResponse(data=MediaResponse.model_validate(item))


@router.delete(
    "/{media_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_owner_or_admin(_media_owner))],
)
async def delete_media(
    media_id: int,
    db: AsyncSession = Depends(get_db),
):
    await media.delete_media(db, media_id)
    return MessageResponse(message="Media file deleted successfully")
