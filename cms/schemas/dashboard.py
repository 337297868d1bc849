from datetime import datetime
from typing import Dict, List, Optional

from cms.schemas.common import CamelModel


class ActivityItem(CamelModel):
    type: str
    id: int
    title: str
    status: str
    date: datetime
    detail: str


class DashboardStats(CamelModel):
    overview: Dict[str, int]
    breakdown: Dict[str, Dict[str, int]]
    recent_activity: List[ActivityItem]


class SearchResult(CamelModel):
    type: str
    id: int
    title: str
    status: Optional[str] = None
    link: str
