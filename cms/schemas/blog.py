from datetime import datetime
from typing import List, Literal, Optional

from pydantic import model_validator

from cms.models import PostStatus
from cms.schemas.common import CamelModel, NonEmptyStr, UtcDateTime

CreatableStatus = Literal["draft", "published", "scheduled"]


class AuthorSummary(CamelModel):
    id: int
    full_name: str


class CategorySummary(CamelModel):
    id: int
    name: str
    slug: str


class TagSummary(CamelModel):
    id: int
    name: str
    slug: str


class PostCreate(CamelModel):
    title: NonEmptyStr
    content: NonEmptyStr
    excerpt: Optional[str] = None
    status: CreatableStatus = "draft"
    category_id: Optional[int] = None
    tags: List[int] = []
    featured_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    published_at: Optional[UtcDateTime] = None
    scheduled_for: Optional[UtcDateTime] = None

    @model_validator(mode="after")
    def scheduled_needs_date(self):
        if self.status == PostStatus.SCHEDULED.value and self.scheduled_for is None:
            raise ValueError("scheduledFor is required for scheduled posts")
        return self


class PostUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    excerpt: Optional[str] = None
    status: Optional[PostStatus] = None
    category_id: Optional[int] = None
    tags: Optional[List[int]] = None
    featured_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    published_at: Optional[UtcDateTime] = None
    scheduled_for: Optional[UtcDateTime] = None


class PostResponse(CamelModel):
    id: int
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    status: str
    featured_image: Optional[str] = None
    published_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None
    view_count: int
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None
    canonical_url: Optional[str] = None
    author_id: int
    category_id: Optional[int] = None
    author: Optional[AuthorSummary] = None
    category: Optional[CategorySummary] = None
    tags: List[TagSummary] = []
    created_at: datetime
    updated_at: datetime
