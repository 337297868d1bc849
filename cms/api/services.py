from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.common import PageParams, pagination
from cms.database import get_db
from cms.dependencies import Principal, require_roles
from cms.models import ServiceStatus
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import (
    DataResponse,
    ListResponse,
    MessageResponse,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from cms.services import portfolio

router = APIRouter()


@router.get("", response_model=ListResponse[ServiceResponse])
async def list_services(
    status: Optional[ServiceStatus] = Query(None),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(pagination),
    db: AsyncSession = Depends(get_db),
):
    rows, page = await portfolio.list_services(
        db, params.page, params.limit, status=status, featured=featured, search=search
    )
    return ListResponse(data=[ServiceResponse.model_validate(s) for s in rows], pagination=page)


@router.get("/slug/{slug}", response_model=DataResponse[ServiceResponse])
async def get_service_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    service = await portfolio.get_service_by_slug(db, slug)
    return DataResponse(data=ServiceResponse.model_validate(service))


@router.get("/{service_id}", response_model=DataResponse[ServiceResponse])
async def get_service(service_id: int, db: AsyncSession = Depends(get_db)):
    service = await portfolio.get_service(db, service_id)
    return DataResponse(data=ServiceResponse.model_validate(service))


@router.post("", response_model=DataResponse[ServiceResponse], status_code=201)
async def create_service(
    data: ServiceCreate,
    principal: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    service = await portfolio.create_service(db, data, principal.user_id)
    return DataResponse(data=ServiceResponse.model_validate(service))


@router.put("/{service_id}", response_model=DataResponse[ServiceResponse])
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    service = await portfolio.update_service(db, service_id, data)
    return DataResponse(data=ServiceResponse.model_validate(service))


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: int,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await portfolio.delete_service(db, service_id)
    return MessageResponse(message="Service deleted successfully")
