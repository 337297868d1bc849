from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import Principal, require_roles
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import DataResponse, MessageResponse, TagCreate, TagResponse, TagUpdate
from cms.services import tags

router = APIRouter()


@router.get("", response_model=DataResponse[List[TagResponse]])
async def list_tags(search: Optional[str] = Query(None), db: AsyncSession = Depends(get_db)):
    rows = await tags.list_tags(db, search)
    return DataResponse(data=[TagResponse.model_validate(row) for row in rows])


@router.get("/slug/{slug}", response_model=DataResponse[TagResponse])
async def get_tag_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    tag = await tags.get_tag_by_slug(db, slug)
    return DataResponse(data=TagResponse.model_validate(tag))


@router.get("/{tag_id}", response_model=DataResponse[TagResponse])
async def get_tag(tag_id: int, db: AsyncSession = Depends(get_db)):
    tag = await tags.get_tag(db, tag_id)
    return DataResponse(data=TagResponse.model_validate(tag))


@router.post("", response_model=DataResponse[TagResponse], status_code=201)
async def create_tag(
    data: TagCreate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    tag = await tags.create_tag(db, data)
    return DataResponse(data=TagResponse.model_validate(tag))


@router.put("/{tag_id}", response_model=DataResponse[TagResponse])
async def update_tag(
    tag_id: int,
    data: TagUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    tag = await tags.update_tag(db, tag_id, data)
    return DataResponse(data=TagResponse.model_validate(tag))


@router.delete("/{tag_id}", response_model=MessageResponse)
async def delete_tag(
    tag_id: int,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await tags.delete_tag(db, tag_id)
    return MessageResponse(message="Tag deleted successfully")
