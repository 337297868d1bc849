"""
Blog categories.

Categories form a hierarchy through ``parent_id``. The table stays flat and
``build_category_tree`` assembles nested nodes in memory.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.errors import BadRequest, NotFound
from cms.models import Category
from cms.schemas import CategoryCreate, CategoryTreeNode, CategoryUpdate
from cms.services.base import ensure_slug_available, flush_or_conflict
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Category with this name already exists"


def build_category_tree(rows: Sequence[Category]) -> List[CategoryTreeNode]:
    """
    Group flat category rows into a forest.

    Rows whose parent is missing from ``rows`` are treated as roots.
    Siblings keep the order of ``rows``.
    """
    ids = {row.id for row in rows}
    children: Dict[Optional[int], List[Category]] = defaultdict(list)
    for row in rows:
        parent = row.parent_id if row.parent_id in ids else None
        children[parent].append(row)

    def build(parent_id: Optional[int], seen: frozenset) -> List[CategoryTreeNode]:
        nodes = []
        for row in children.get(parent_id, []):
            if row.id in seen:
                continue
            nodes.append(
                CategoryTreeNode(
                    id=row.id,
                    name=row.name,
                    slug=row.slug,
                    description=row.description,
                    display_order=row.display_order,
                    children=build(row.id, seen | {row.id}),
                )
            )
        return nodes

    return build(None, frozenset())


def _ordered():
    return select(Category).order_by(Category.display_order, Category.name)


async def list_categories(db: AsyncSession) -> Sequence[Category]:
    result = await db.execute(_ordered())
    return result.scalars().all()


async def get_tree(db: AsyncSession) -> List[CategoryTreeNode]:
    return build_category_tree(await list_categories(db))


async def get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    return category


async def get_category_by_slug(db: AsyncSession, slug: str) -> Category:
    result = await db.execute(select(Category).where(Category.slug == slug))
    category = result.scalar_one_or_none()
    if not category:
        raise NotFound("Category not found")
    return category


async def _check_parent(db: AsyncSession, parent_id: int, category_id: Optional[int] = None) -> None:
    if category_id is not None and parent_id == category_id:
        raise BadRequest("Category cannot be its own parent")

    parent = await db.get(Category, parent_id)
    if not parent:
        raise BadRequest("Parent category not found")
    if category_id is None:
        return

    # Walk up from the proposed parent; meeting ourselves means a cycle
    seen = {parent.id}
    ancestor_id = parent.parent_id
    while ancestor_id is not None:
        if ancestor_id == category_id:
            raise BadRequest("Category cannot be moved under one of its descendants")
        if ancestor_id in seen:
            break
        seen.add(ancestor_id)
        ancestor = await db.get(Category, ancestor_id)
        ancestor_id = ancestor.parent_id if ancestor else None


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    slug = generate_slug(data.name)
    await ensure_slug_available(db, Category, slug, SLUG_TAKEN)
    if data.parent_id is not None:
        await _check_parent(db, data.parent_id)

    category = Category(
        name=data.name,
        slug=slug,
        description=data.description,
        parent_id=data.parent_id,
        display_order=data.display_order,
    )
    db.add(category)
    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    await db.refresh(category)
    return category


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> Category:
    category = await get_category(db, category_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("name") and changes["name"] != category.name:
        slug = generate_slug(changes["name"])
        await ensure_slug_available(db, Category, slug, SLUG_TAKEN, exclude_id=category.id)
        category.slug = slug
    if changes.get("parent_id") is not None:
        await _check_parent(db, changes["parent_id"], category.id)

    for field, value in changes.items():
        setattr(category, field, value)

    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category_id: int) -> None:
    category = await get_category(db, category_id)
    # Children and posts keep existing; their FKs are set to NULL
    await db.delete(category)
    await db.commit()
    logger.info(f"Category {category_id} deleted")
