"""
Portfolio services (case studies) and their gallery images.
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms.database import utcnow
from cms.errors import NotFound
from cms.models import Service, ServiceImage, ServiceStatus
from cms.schemas import Pagination, ServiceCreate, ServiceUpdate
from cms.services.base import ensure_slug_available, flush_or_conflict, not_deleted, paginate
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Service with this title already exists"


async def _load(db: AsyncSession, **criteria) -> Service:
    query = (
        not_deleted(select(Service), Service)
        .options(selectinload(Service.images))
        .filter_by(**criteria)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    service = result.scalar_one_or_none()
    if not service:
        raise NotFound("Service not found")
    return service


async def list_services(
    db: AsyncSession,
    page: int,
    limit: int,
    status: Optional[ServiceStatus] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
) -> Tuple[Sequence[Service], Pagination]:
    query = not_deleted(select(Service), Service)
    if status:
        query = query.where(Service.status == ServiceStatus(status).value)
    if featured is not None:
        query = query.where(Service.featured.is_(featured))
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Service.title.ilike(pattern),
                Service.description.ilike(pattern),
                Service.client_name.ilike(pattern),
            )
        )

    query = query.order_by(Service.display_order, Service.created_at.desc(), Service.id.desc())
    return await paginate(db, query.options(selectinload(Service.images)), page, limit)


async def get_service(db: AsyncSession, service_id: int) -> Service:
    return await _load(db, id=service_id)


async def get_service_by_slug(db: AsyncSession, slug: str) -> Service:
    return await _load(db, slug=slug)


async def create_service(db: AsyncSession, data: ServiceCreate, created_by: int) -> Service:
    slug = generate_slug(data.title)
    await ensure_slug_available(db, Service, slug, SLUG_TAKEN)

    fields = data.model_dump(exclude={"images", "status"})
    service = Service(**fields, slug=slug, status=data.status.value, created_by=created_by)
    service.images = [ServiceImage(**image.model_dump()) for image in data.images]

    db.add(service)
    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    logger.info(f"Service {service.id} created by user {created_by}")
    return await _load(db, id=service.id)


async def update_service(db: AsyncSession, service_id: int, data: ServiceUpdate) -> Service:
    service = await _load(db, id=service_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("title") and changes["title"] != service.title:
        slug = generate_slug(changes["title"])
        await ensure_slug_available(db, Service, slug, SLUG_TAKEN, exclude_id=service.id)
        service.slug = slug

    if "images" in changes:
        # Replaces the gallery; orphans are deleted by the cascade
        service.images = [ServiceImage(**image) for image in changes.pop("images") or []]

    for field, value in changes.items():
        if isinstance(value, ServiceStatus):
            value = value.value
        setattr(service, field, value)

    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    return await _load(db, id=service.id)


async def delete_service(db: AsyncSession, service_id: int) -> None:
    service = await _load(db, id=service_id)
    service.deleted_at = utcnow()
    await db.commit()
    logger.info(f"Service {service_id} deleted")
