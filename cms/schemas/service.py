from datetime import date, datetime
from typing import Any, Dict, List, Optional

from cms.models import ServiceStatus
from cms.schemas.common import CamelModel, NonEmptyStr


class ServiceImageIn(CamelModel):
    image_url: NonEmptyStr
    caption: Optional[str] = None
    is_primary: bool = False
    display_order: int = 0


class ServiceImageResponse(ServiceImageIn):
    id: int


class ServiceCreate(CamelModel):
    title: NonEmptyStr
    description: NonEmptyStr
    client_name: Optional[str] = None
    project_url: Optional[str] = None
    project_date: Optional[date] = None
    project_duration: Optional[str] = None
    status: ServiceStatus = ServiceStatus.ONGOING
    featured: bool = False
    category: Optional[str] = None
    technologies: List[str] = []
    industry: Optional[str] = None
    challenge: Optional[str] = None
    solution: Optional[str] = None
    results: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None
    display_order: int = 0
    images: List[ServiceImageIn] = []


class ServiceUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None
    client_name: Optional[str] = None
    project_url: Optional[str] = None
    project_date: Optional[date] = None
    project_duration: Optional[str] = None
    status: Optional[ServiceStatus] = None
    featured: Optional[bool] = None
    category: Optional[str] = None
    technologies: Optional[List[str]] = None
    industry: Optional[str] = None
    challenge: Optional[str] = None
    solution: Optional[str] = None
    results: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None
    display_order: Optional[int] = None
    images: Optional[List[ServiceImageIn]] = None


class ServiceResponse(CamelModel):
    id: int
    title: str
    slug: str
    description: str
    client_name: Optional[str] = None
    project_url: Optional[str] = None
    project_date: Optional[date] = None
    project_duration: Optional[str] = None
    status: str
    featured: bool
    category: Optional[str] = None
    technologies: List[str] = []
    industry: Optional[str] = None
    challenge: Optional[str] = None
    solution: Optional[str] = None
    results: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None
    display_order: int
    created_by: int
    images: List[ServiceImageResponse] = []
    created_at: datetime
    updated_at: datetime
