"""
Careers: job listings and the applications submitted against them.

Listing Status Flow:
    draft → active → closed → archived

Only ``active`` listings accept applications, and each email address may
apply to a listing once.
"""

import logging
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cms.database import utcnow
from cms.errors import BadRequest, Conflict, NotFound
from cms.models import (
    ApplicationStatus,
    EmploymentType,
    JobApplication,
    JobListing,
    JobStatus,
    LocationType,
)
from cms.schemas import ApplicationCreate, ApplicationStatusUpdate, JobCreate, JobUpdate, Pagination
from cms.services.base import apply_updates, ensure_slug_available, flush_or_conflict, not_deleted, paginate
from cms.utils.slug import generate_slug

logger = logging.getLogger(__name__)

SLUG_TAKEN = "Job with this title already exists"
ALREADY_APPLIED = "You have already applied for this position"


async def list_jobs(
    db: AsyncSession,
    page: int,
    limit: int,
    status: Optional[JobStatus] = None,
    department: Optional[str] = None,
    employment_type: Optional[EmploymentType] = None,
    location_type: Optional[LocationType] = None,
    search: Optional[str] = None,
) -> Tuple[Sequence[JobListing], Pagination]:
    query = not_deleted(select(JobListing), JobListing)
    if status:
        query = query.where(JobListing.status == JobStatus(status).value)
    if department:
        query = query.where(JobListing.department == department)
    if employment_type:
        query = query.where(JobListing.employment_type == EmploymentType(employment_type).value)
    if location_type:
        query = query.where(JobListing.location_type == LocationType(location_type).value)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                JobListing.title.ilike(pattern),
                JobListing.description.ilike(pattern),
                JobListing.department.ilike(pattern),
            )
        )

    query = query.order_by(JobListing.created_at.desc(), JobListing.id.desc())
    return await paginate(db, query, page, limit)


async def get_job(db: AsyncSession, job_id: int) -> JobListing:
    result = await db.execute(
        not_deleted(select(JobListing), JobListing).where(JobListing.id == job_id)
    )
    job = result.scalar_one_or_none()
    if not job:
        raise NotFound("Job not found")
    return job


async def get_job_by_slug(db: AsyncSession, slug: str) -> JobListing:
    result = await db.execute(
        not_deleted(select(JobListing), JobListing).where(JobListing.slug == slug)
    )
    job = result.scalar_one_or_none()
    if not job:
        raise NotFound("Job not found")
    return job


async def create_job(db: AsyncSession, data: JobCreate, posted_by: int) -> JobListing:
    slug = generate_slug(data.title)
    await ensure_slug_available(db, JobListing, slug, SLUG_TAKEN)

    job = JobListing(slug=slug, posted_by=posted_by)
    apply_updates(job, data.model_dump())
    db.add(job)
    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    await db.refresh(job)
    logger.info(f"Job {job.id} created by user {posted_by}")
    return job


async def update_job(db: AsyncSession, job_id: int, data: JobUpdate) -> JobListing:
    job = await get_job(db, job_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("title") and changes["title"] != job.title:
        slug = generate_slug(changes["title"])
        await ensure_slug_available(db, JobListing, slug, SLUG_TAKEN, exclude_id=job.id)
        job.slug = slug

    apply_updates(job, changes)
    if job.salary_min is not None and job.salary_max is not None and job.salary_min > job.salary_max:
        raise BadRequest("salaryMin cannot exceed salaryMax")

    await flush_or_conflict(db, SLUG_TAKEN)
    await db.commit()
    await db.refresh(job)
    return job


async def delete_job(db: AsyncSession, job_id: int) -> None:
    job = await get_job(db, job_id)
    job.deleted_at = utcnow()
    await db.commit()
    logger.info(f"Job {job_id} deleted")


async def apply_to_job(db: AsyncSession, job_id: int, data: ApplicationCreate) -> JobApplication:
    job = await get_job(db, job_id)
    if job.status != JobStatus.ACTIVE.value:
        raise BadRequest("This job is not accepting applications")

    email = data.applicant_email.lower()
    existing = await db.execute(
        select(JobApplication.id).where(
            JobApplication.job_id == job.id,
            JobApplication.applicant_email == email,
        )
    )
    if existing.first() is not None:
        raise Conflict(ALREADY_APPLIED)

    resume_url = str(data.resume_url)
    application = JobApplication(
        job_id=job.id,
        applicant_name=data.applicant_name,
        applicant_email=email,
        applicant_phone=data.applicant_phone,
        resume_url=resume_url,
        resume_filename=data.resume_filename or resume_url.rstrip("/").rsplit("/", 1)[-1],
        cover_letter=data.cover_letter,
        linkedin_url=str(data.linkedin_url) if data.linkedin_url else None,
        portfolio_url=str(data.portfolio_url) if data.portfolio_url else None,
        status=ApplicationStatus.NEW.value,
        applied_at=utcnow(),
    )
    db.add(application)
    await flush_or_conflict(db, ALREADY_APPLIED)
    await db.commit()

    logger.info(f"Application {application.id} received for job {job.id}")
    return await get_application(db, application.id)


async def list_applications(
    db: AsyncSession,
    page: int,
    limit: int,
    job_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None,
) -> Tuple[Sequence[JobApplication], Pagination]:
    query = select(JobApplication).options(selectinload(JobApplication.job))
    if job_id is not None:
        query = query.where(JobApplication.job_id == job_id)
    if status:
        query = query.where(JobApplication.status == ApplicationStatus(status).value)
    query = query.order_by(JobApplication.applied_at.desc(), JobApplication.id.desc())
    return await paginate(db, query, page, limit)


async def get_application(db: AsyncSession, application_id: int) -> JobApplication:
    result = await db.execute(
        select(JobApplication)
        .options(selectinload(JobApplication.job))
        .where(JobApplication.id == application_id)
        .execution_options(populate_existing=True)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise NotFound("Application not found")
    return application


async def update_application_status(
    db: AsyncSession, application_id: int, data: ApplicationStatusUpdate
) -> JobApplication:
    application = await get_application(db, application_id)
    application.status = data.status.value
    if data.notes is not None:
        application.notes = data.notes
    await db.commit()
    return await get_application(db, application.id)
