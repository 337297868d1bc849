"""
Query helpers shared by the domain services.
"""

import enum
from typing import Any, List, Optional, Sequence, Tuple, Type

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.errors import Conflict, is_unique_violation
from cms.schemas.common import Pagination

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def not_deleted(query: Select, model: Type[Any]) -> Select:
    """Hide soft-deleted rows."""
    return query.where(model.deleted_at.is_(None))


def count_of(query: Select) -> Select:
    """COUNT(*) over a filtered select, ignoring its ordering and eager loads."""
    return select(func.count()).select_from(query.order_by(None).subquery())


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int,
    limit: int,
) -> Tuple[Sequence[Any], Pagination]:
    total_result = await db.execute(count_of(query))
    total = total_result.scalar() or 0

    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    rows = result.scalars().unique().all()
    return rows, Pagination.build(total=total, page=page, limit=limit)


async def ensure_slug_available(
    db: AsyncSession,
    model: Type[Any],
    slug: str,
    message: str,
    exclude_id: Optional[int] = None,
) -> None:
    """Raise Conflict when another row (soft-deleted ones included) owns ``slug``.

    The unique index still catches a concurrent insert at flush time, see
    ``flush_or_conflict``.
    """
    query = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        query = query.where(model.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise Conflict(message)


async def flush_or_conflict(db: AsyncSession, message: str) -> None:
    """Flush pending changes, mapping a unique-constraint race to Conflict."""
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        if is_unique_violation(e):
            raise Conflict(message) from e
        raise


def apply_updates(instance: Any, changes: dict, fields: Optional[List[str]] = None) -> None:
    """Copy provided fields onto a model; absent fields stay untouched."""
    for field, value in changes.items():
        if fields is not None and field not in fields:
            continue
        if isinstance(value, enum.Enum):
            value = value.value
        setattr(instance, field, value)
