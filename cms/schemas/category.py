from datetime import datetime
from typing import List, Optional

from cms.schemas.common import CamelModel, NonEmptyStr


class CategoryCreate(CamelModel):
    name: NonEmptyStr
    description: Optional[str] = None
    parent_id: Optional[int] = None
    display_order: int = 0


class CategoryUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    display_order: Optional[int] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    display_order: int
    created_at: datetime
    updated_at: datetime


class CategoryTreeNode(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    display_order: int
    children: List["CategoryTreeNode"] = []
