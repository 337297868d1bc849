"""
Idempotent seed data: the three roles, a first super-admin and the default
blog categories. Rows that already exist (matched by slug or email) are left
untouched.
"""

import logging
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cms.config import get_settings
from cms.models import Category, Role, User
from cms.permissions import DEFAULT_ROLES, PermissionMap, RoleSlug
from cms.security import hash_password

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Web Development", "web-development", "Articles about web development, frameworks, and best practices"),
    ("Mobile Apps", "mobile-apps", "Mobile application development for iOS and Android"),
    ("Design", "design", "UI/UX design, graphic design, and design systems"),
    ("Technology", "technology", "Latest technology trends and innovations"),
    ("Business", "business", "Business strategy, growth, and entrepreneurship"),
    ("Case Studies", "case-studies", "Real-world project case studies and success stories"),
]


async def seed_roles(session: AsyncSession) -> Dict[str, Role]:
    roles = {}
    for role_def in DEFAULT_ROLES:
        result = await session.execute(select(Role).where(Role.slug == role_def["slug"]))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(
                name=role_def["name"],
                slug=role_def["slug"],
                description=role_def["description"],
                permissions=PermissionMap.load(role_def["permissions"]).to_json(),
            )
            session.add(role)
            logger.info(f"Seeded role: {role_def['slug']}")
        roles[role_def["slug"]] = role
    await session.flush()
    return roles


async def seed_admin(session: AsyncSession, roles: Dict[str, Role]) -> bool:
    settings = get_settings()
    email = settings.default_admin_email.lower()
    result = await session.execute(select(User.id).where(User.email == email))
    if result.first() is not None:
        return False

    session.add(
        User(
            email=email,
            password_hash=hash_password(settings.default_admin_password),
            full_name="Super Admin",
            role_id=roles[RoleSlug.SUPER_ADMIN.value].id,
            is_active=True,
        )
    )
    logger.info(f"Seeded super-admin: {email}")
    return True


async def seed_categories(session: AsyncSession) -> int:
    count = 0
    for order, (name, slug, description) in enumerate(DEFAULT_CATEGORIES, start=1):
        result = await session.execute(select(Category.id).where(Category.slug == slug))
        if result.first() is not None:
            continue
        session.add(Category(name=name, slug=slug, description=description, display_order=order))
        count += 1
    return count


async def seed_all(session: AsyncSession) -> None:
    roles = await seed_roles(session)
    await seed_admin(session, roles)
    added = await seed_categories(session)
    await session.commit()
    logger.info(f"Seeding complete ({added} new categories)")
