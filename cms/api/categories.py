from typing import List, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import Principal, require_roles
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryTreeNode,
    CategoryUpdate,
    DataResponse,
    MessageResponse,
)
from cms.services import categories

router = APIRouter()


@router.get("", response_model=DataResponse[Union[List[CategoryResponse], List[CategoryTreeNode]]])
async def list_categories(
    as_tree: bool = Query(False, alias="asTree"),
    db: AsyncSession = Depends(get_db),
):
    if as_tree:
        return DataResponse(data=await categories.get_tree(db))
    rows = await categories.list_categories(db)
    return DataResponse(data=[CategoryResponse.model_validate(row) for row in rows])


@router.get("/slug/{slug}", response_model=DataResponse[CategoryResponse])
async def get_category_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    category = await categories.get_category_by_slug(db, slug)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.get("/{category_id}", response_model=DataResponse[CategoryResponse])
async def get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    category = await categories.get_category(db, category_id)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.post("", response_model=DataResponse[CategoryResponse], status_code=201)
async def create_category(
    data: CategoryCreate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    category = await categories.create_category(db, data)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.api_route("/{category_id}", methods=["PUT", "PATCH"], response_model=DataResponse[CategoryResponse])
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    category = await categories.update_category(db, category_id, data)
    return DataResponse(data=CategoryResponse.model_validate(category))


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await categories.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully")
