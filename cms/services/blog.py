"""
Blog Post Service

CRUD for blog posts with tag assignment, view counting and scheduled
publishing.

Status Flow:
    draft → scheduled → published → archived

Invariants:
    - ``published_at`` is set the first time a post becomes published
    - ``view_count`` only moves for published posts fetched by slug
    - every tag's ``usage_count`` equals the number of live posts using it
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms.database import utcnow
from cms.errors import BadRequest, NotFound
from cms.models import BlogPost, Category, PostStatus, Tag
from cms.schemas import Pagination, PostCreate, PostUpdate
from cms.services.base import ensure_slug_available, flush_or_conflict, not_deleted, paginate
from cms.services.tags import recount_usage, resolve_tags
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Post with this title already exists"

SORTABLE_COLUMNS = {
    "created_at": BlogPost.created_at,
    "published_at": BlogPost.published_at,
    "title": BlogPost.title,
    "view_count": BlogPost.view_count,
}


def _with_relations(query):
    return query.options(
        selectinload(BlogPost.author),
        selectinload(BlogPost.category),
        selectinload(BlogPost.tags),
    )


async def _load(db: AsyncSession, **criteria) -> BlogPost:
    query = _with_relations(not_deleted(select(BlogPost), BlogPost)).filter_by(**criteria)
    result = await db.execute(query.execution_options(populate_existing=True))
    post = result.scalar_one_or_none()
    if not post:
        raise NotFound("Post not found")
    return post


async def list_posts(
    db: AsyncSession,
    page: int,
    limit: int,
    status: Optional[PostStatus] = None,
    category_id: Optional[int] = None,
    tag_id: Optional[int] = None,
    author_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Tuple[Sequence[BlogPost], Pagination]:
    query = not_deleted(select(BlogPost), BlogPost)

    if status:
        query = query.where(BlogPost.status == PostStatus(status).value)
    if category_id is not None:
        query = query.where(BlogPost.category_id == category_id)
    if author_id is not None:
        query = query.where(BlogPost.author_id == author_id)
    if tag_id is not None:
        query = query.where(BlogPost.tags.any(Tag.id == tag_id))
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                BlogPost.title.ilike(pattern),
                BlogPost.content.ilike(pattern),
                BlogPost.excerpt.ilike(pattern),
            )
        )

    column = SORTABLE_COLUMNS.get(sort_by, BlogPost.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = _with_relations(query.order_by(ordering, BlogPost.id.desc()))
    return await paginate(db, query, page, limit)


async def get_post(db: AsyncSession, post_id: int) -> BlogPost:
    return await _load(db, id=post_id)


async def get_post_by_slug(db: AsyncSession, slug: str) -> BlogPost:
    """Fetch a post for display, counting the view when it is published."""
    post = await _load(db, slug=slug)
    if post.status != PostStatus.PUBLISHED.value:
        return post

    await db.execute(
        update(BlogPost)
        .where(BlogPost.id == post.id)
        .values(view_count=BlogPost.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return await _load(db, id=post.id)


async def _check_category(db: AsyncSession, category_id: Optional[int]) -> None:
    if category_id is not None and not await db.get(Category, category_id):
        raise BadRequest("Category not found")


async def create_post(db: AsyncSession, data: PostCreate, author_id: int) -> BlogPost:
    slug = generate_slug(data.title)
    await ensure_slug_available(db, BlogPost, slug, SLUG_TAKEN)
    await _check_category(db, data.category_id)
    tags = await resolve_tags(db, data.tags)

    fields = data.model_dump(exclude={"tags"})
    post = BlogPost(**fields, slug=slug, author_id=author_id, view_count=0)
    if post.status == PostStatus.PUBLISHED.value and post.published_at is None:
        post.published_at = utcnow()
    post.tags = tags

    db.add(post)
    await flush_or_conflict(db, SLUG_TAKEN)
    await recount_usage(db, [tag.id for tag in tags])
    await db.commit()

    logger.info(f"Post {post.id} created by user {author_id}")
    return await _load(db, id=post.id)


async def update_post(db: AsyncSession, post_id: int, data: PostUpdate) -> BlogPost:
    post = await _load(db, id=post_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("title") and changes["title"] != post.title:
        slug = generate_slug(changes["title"])
        await ensure_slug_available(db, BlogPost, slug, SLUG_TAKEN, exclude_id=post.id)
        post.slug = slug
    if "category_id" in changes:
        await _check_category(db, changes["category_id"])

    touched_tags = set()
    if "tags" in changes:
        new_tags = await resolve_tags(db, changes.pop("tags") or [])
        touched_tags = {tag.id for tag in post.tags} | {tag.id for tag in new_tags}
        post.tags = new_tags

    for field, value in changes.items():
        if isinstance(value, PostStatus):
            value = value.value
        setattr(post, field, value)

    if post.status == PostStatus.SCHEDULED.value and post.scheduled_for is None:
        raise BadRequest("scheduledFor is required for scheduled posts")
    if post.status == PostStatus.PUBLISHED.value and post.published_at is None:
        post.published_at = utcnow()

    await flush_or_conflict(db, SLUG_TAKEN)
    await recount_usage(db, touched_tags)
    await db.commit()
    return await _load(db, id=post.id)


async def delete_post(db: AsyncSession, post_id: int) -> None:
    post = await _load(db, id=post_id)
    post.deleted_at = utcnow()
    await db.flush()
    await recount_usage(db, [tag.id for tag in post.tags])
    await db.commit()
    logger.info(f"Post {post_id} deleted")


async def publish_due_posts(db: AsyncSession) -> int:
    """Publish scheduled posts whose ``scheduled_for`` has passed.

    Returns:
        Number of posts published
    """
    now = utcnow()
    result = await db.execute(
        not_deleted(select(BlogPost), BlogPost).where(
            BlogPost.status == PostStatus.SCHEDULED.value,
            BlogPost.scheduled_for <= now,
        )
    )
    posts = result.scalars().all()
    for post in posts:
        post.status = PostStatus.PUBLISHED.value
        post.published_at = post.scheduled_for or now
    await db.commit()

    if posts:
        logger.info(f"Published {len(posts)} scheduled posts")
    return len(posts)
