"""
Blog post model and the post/tag junction table.

Status Flow:
    draft → scheduled → published → archived
"""

import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from cms.database import Base
from cms.models.base import TimestampMixin, SoftDeleteMixin


class PostStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    ARCHIVED = "archived"


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class BlogPost(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    content = Column(Text, nullable=False)
    excerpt = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=PostStatus.DRAFT.value, index=True)
    featured_image = Column(String(500), nullable=True)
    published_at = Column(DateTime, nullable=True, index=True)
    scheduled_for = Column(DateTime, nullable=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    view_count = Column(Integer, nullable=False, default=0)

    # SEO
    meta_title = Column(String(255), nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(String(255), nullable=True)
    canonical_url = Column(String(500), nullable=True)

    author = relationship("User")
    category = relationship("Category")
    tags = relationship("Tag", secondary=post_tags, order_by="Tag.name")
