from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.common import PageParams, pagination
from cms.database import get_db
from cms.dependencies import Principal, require_roles
from cms.models import PostStatus
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import DataResponse, ListResponse, MessageResponse, PostCreate, PostResponse, PostUpdate
from cms.services import blog

router = APIRouter()

SortField = Literal["created_at", "published_at", "title", "view_count"]


@router.get("", response_model=ListResponse[PostResponse])
async def list_posts(
    status: Optional[PostStatus] = Query(None),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    tag_id: Optional[int] = Query(None, alias="tagId"),
    author_id: Optional[int] = Query(None, alias="authorId"),
    search: Optional[str] = Query(None),
    sort_by: SortField = Query("created_at", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    params: PageParams = Depends(pagination),
    db: AsyncSession = Depends(get_db),
):
    posts, page = await blog.list_posts(
        db,
        params.page,
        params.limit,
        status=status,
        category_id=category_id,
        tag_id=tag_id,
        author_id=author_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ListResponse(data=[PostResponse.model_validate(p) for p in posts], pagination=page)


@router.get("/slug/{slug}", response_model=DataResponse[PostResponse])
async def get_post_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    post = await blog.get_post_by_slug(db, slug)
    return DataResponse(data=PostResponse.model_validate(post))


@router.get("/{post_id}", response_model=DataResponse[PostResponse])
async def get_post(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await blog.get_post(db, post_id)
    return DataResponse(data=PostResponse.model_validate(post))


@router.post("", response_model=DataResponse[PostResponse], status_code=201)
async def create_post(
    data: PostCreate,
    principal: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    post = await blog.create_post(db, data, principal.user_id)
    return DataResponse(data=PostResponse.model_validate(post))


@router.put("/{post_id}", response_model=DataResponse[PostResponse])
async def update_post(
    post_id: int,
    data: PostUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    post = await blog.update_post(db, post_id, data)
    return DataResponse(data=PostResponse.model_validate(post))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await blog.delete_post(db, post_id)
    return MessageResponse(message="Post deleted successfully")
