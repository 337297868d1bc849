import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cms.errors import BadRequest, NotFound
from cms.models import BlogPost, Tag, post_tags
from cms.schemas import TagCreate, TagUpdate
from cms.services.base import ensure_slug_available, flush_or_conflict
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Tag with this name already exists"


async def list_tags(db: AsyncSession, search: Optional[str] = None) -> Sequence[Tag]:
    query = select(Tag).order_by(Tag.usage_count.desc(), Tag.name)
    if search:
        query = query.where(Tag.name.ilike(f"%{search}%"))
    result = await db.execute(query)
    return result.scalars().all()


async def get_tag(db: AsyncSession, tag_id: int) -> Tag:
    tag = await db.get(Tag, tag_id)
    if not tag:
        raise NotFound("Tag not found")
    return tag


async def get_tag_by_slug(db: AsyncSession, slug: str) -> Tag:
    result = await db.execute(select(Tag).where(Tag.slug == slug))
    tag = result.scalar_one_or_none()
    if not tag:
        raise NotFound("Tag not found")
    return tag


async def resolve_tags(db: AsyncSession, tag_ids: Iterable[int]) -> List[Tag]:
    """Load tags by id; any unknown id is a BadRequest."""
    wanted = set(tag_ids)
    if not wanted:
        return []
    result = await db.execute(select(Tag).where(Tag.id.in_(wanted)))
    tags = list(result.scalars().all())
    missing = wanted - {tag.id for tag in tags}
    if missing:
        raise BadRequest(f"Tags not found: {', '.join(str(i) for i in sorted(missing))}")
    return tags


async def recount_usage(db: AsyncSession, tag_ids: Iterable[int]) -> None:
    """Set usage_count to the number of live posts carrying each tag."""
    for tag_id in set(tag_ids):
        live_posts = (
            select(func.count())
            .select_from(post_tags.join(BlogPost, BlogPost.id == post_tags.c.post_id))
            .where(post_tags.c.tag_id == tag_id, BlogPost.deleted_at.is_(None))
            .scalar_subquery()
        )
        await db.execute(
            update(Tag)
            .where(Tag.id == tag_id)
            .values(usage_count=live_posts)
            .execution_options(synchronize_session=False)
        )


async def create_tag(db: AsyncSession, data: TagCreate) -> Tag:
    slug = generate_slug(data.name)
    await ensure_slug_available(db, Tag, slug, SLUG_TAKEN)
    tag = Tag(name=data.name, slug=slug, usage_count=0)
    db.add(tag)
    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    await db.refresh(tag)
    return tag


async def update_tag(db: AsyncSession, tag_id: int, data: TagUpdate) -> Tag:
    tag = await get_tag(db, tag_id)
    if data.name != tag.name:
        slug = generate_slug(data.name)
        await ensure_slug_available(db, Tag, slug, SLUG_TAKEN, exclude_id=tag.id)
        tag.name = data.name
        tag.slug = slug
        await flush_or_conflict(db, SLUG_TAKEN)
        await db.commit()
        await db.refresh(tag)
    return tag


async def delete_tag(db: AsyncSession, tag_id: int) -> None:
    tag = await get_tag(db, tag_id)
    # post_tags rows go with it (ON DELETE CASCADE)
    await db.delete(tag)
    await db.commit()
    logger.info(f"Tag {tag_id} deleted")
