from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.database import get_db
from cms.dependencies import Principal, get_current_principal, require_roles
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import DashboardStats, DataResponse, SearchResult
from cms.services import dashboard

router = APIRouter()


@router.get("/stats", response_model=DataResponse[DashboardStats])
async def get_stats(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    stats = await dashboard.get_stats(db, principal.role)
    return DataResponse(data=stats)


@router.get("/search", response_model=DataResponse[List[SearchResult]])
async def search(
    q: str = Query(..., min_length=1),
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    results = await dashboard.search(db, q)
    return DataResponse(data=results)
