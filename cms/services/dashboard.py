"""
Dashboard Service

Aggregate counts, status breakdowns, recent activity and a cross-entity
search for the admin dashboard.

Role Scoping:
    super-admin, editor → every live row
    viewer              → published posts, non-archived services and active
                          jobs only; users and applications are hidden
"""

import logging
from typing import Dict, List

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms.models import (
    BlogPost,
    JobApplication,
    JobListing,
    JobStatus,
    MediaFile,
    PostStatus,
    Service,
    ServiceStatus,
    User,
)
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import ActivityItem, DashboardStats, SearchResult
from cms.services.base import count_of, not_deleted

logger = logging.getLogger(__name__)

RECENT_PER_TYPE = 5
SEARCH_PER_TYPE = 5


def _scoped(model, full_access: bool):
    query = not_deleted(select(model), model)
    if full_access:
        return query
    if model is BlogPost:
        return query.where(BlogPost.status == PostStatus.PUBLISHED.value)
    if model is Service:
        return query.where(Service.status != ServiceStatus.ARCHIVED.value)
    if model is JobListing:
        return query.where(JobListing.status == JobStatus.ACTIVE.value)
    return query


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(count_of(query))
    return result.scalar() or 0


async def _status_breakdown(db: AsyncSession, query, column, statuses) -> Dict[str, int]:
    subquery = query.subquery()
    grouped = select(subquery.c[column.key], func.count()).group_by(subquery.c[column.key])
    result = await db.execute(grouped)
    counts = {status.value: 0 for status in statuses}
    for status, count in result.all():
        counts[status] = count
    return counts


async def get_stats(db: AsyncSession, role: str) -> DashboardStats:
    full_access = role in CONTENT_MANAGERS

    posts = _scoped(BlogPost, full_access)
    services = _scoped(Service, full_access)
    jobs = _scoped(JobListing, full_access)

    overview = {
        "totalUsers": await _count(db, not_deleted(select(User), User)) if full_access else 0,
        "totalPosts": await _count(db, posts),
        "totalServices": await _count(db, services),
        "totalJobs": await _count(db, jobs),
        "totalApplications": await _count(db, select(JobApplication)) if full_access else 0,
        "totalMedia": await _count(db, not_deleted(select(MediaFile), MediaFile)),
    }
    breakdown = {
        "posts": await _status_breakdown(db, posts, BlogPost.status, PostStatus),
        "services": await _status_breakdown(db, services, Service.status, ServiceStatus),
        "jobs": await _status_breakdown(db, jobs, JobListing.status, JobStatus),
    }

    activity: List[ActivityItem] = []

    result = await db.execute(
        posts.options(selectinload(BlogPost.author))
        .order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
        .limit(RECENT_PER_TYPE)
    )
    for post in result.scalars().all():
        activity.append(
            ActivityItem(
                type="post",
                id=post.id,
                title=post.title,
                status=post.status,
                date=post.created_at,
                detail=post.author.full_name if post.author else "",
            )
        )

    result = await db.execute(
        jobs.order_by(JobListing.created_at.desc(), JobListing.id.desc()).limit(RECENT_PER_TYPE)
    )
    for job in result.scalars().all():
        activity.append(
            ActivityItem(
                type="job",
                id=job.id,
                title=job.title,
                status=job.status,
                date=job.created_at,
                detail=job.department,
            )
        )

    if full_access:
        result = await db.execute(
            select(JobApplication)
            .options(selectinload(JobApplication.job))
            .order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
            .limit(RECENT_PER_TYPE)
        )
        for application in result.scalars().all():
            activity.append(
                ActivityItem(
                    type="application",
                    id=application.id,
                    title=application.applicant_name,
                    status=application.status,
                    date=application.applied_at,
                    detail=application.job.title if application.job else "",
                )
            )

    activity.sort(key=lambda item: item.date, reverse=True)
    return DashboardStats(overview=overview, breakdown=breakdown, recent_activity=activity)


async def search(db: AsyncSession, q: str) -> List[SearchResult]:
    """Case-insensitive substring search over posts, services and jobs."""
    term = q.strip()
    if not term:
        return []
    pattern = f"%{term}%"
    results: List[SearchResult] = []

    result = await db.execute(
        not_deleted(select(BlogPost), BlogPost)
        .where(or_(BlogPost.title.ilike(pattern), BlogPost.content.ilike(pattern)))
        .order_by(BlogPost.created_at.desc())
        .limit(SEARCH_PER_TYPE)
    )
    results.extend(
        SearchResult(type="post", id=p.id, title=p.title, status=p.status, link=f"/posts/{p.id}")
        for p in result.scalars().all()
    )

    result = await db.execute(
        not_deleted(select(Service), Service)
        .where(or_(Service.title.ilike(pattern), Service.description.ilike(pattern)))
        .order_by(Service.created_at.desc())
        .limit(SEARCH_PER_TYPE)
    )
    results.extend(
        SearchResult(type="service", id=s.id, title=s.title, status=s.status, link=f"/services/{s.id}")
        for s in result.scalars().all()
    )

    result = await db.execute(
        not_deleted(select(JobListing), JobListing)
        .where(or_(JobListing.title.ilike(pattern), JobListing.description.ilike(pattern)))
        .order_by(JobListing.created_at.desc())
        .limit(SEARCH_PER_TYPE)
    )
    results.extend(
        SearchResult(type="job", id=j.id, title=j.title, status=j.status, link=f"/jobs/{j.id}")
        for j in result.scalars().all()
    )

    return results
