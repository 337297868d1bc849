from typing import Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cms.api.common import PageParams, pagination
from cms.database import get_db
from cms.dependencies import Principal, get_optional_principal, require_roles
from cms.models import ApplicationStatus, EmploymentType, JobStatus, LocationType
from cms.permissions import CONTENT_MANAGERS
from cms.schemas import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    DataResponse,
    JobCreate,
    JobPublicResponse,
    JobResponse,
    JobUpdate,
    ListResponse,
    MessageResponse,
)
from cms.services import jobs
from cms.services.email import send_application_notification

router = APIRouter()

AnyJobResponse = Union[JobResponse, JobPublicResponse]


def _serialize(job, principal: Optional[Principal]):
    # Internal notes and hidden salaries are staff-only
    if principal and principal.role in CONTENT_MANAGERS:
        return JobResponse.model_validate(job)
    return JobPublicResponse.model_validate(job)


@router.get("", response_model=ListResponse[AnyJobResponse])
async def list_jobs(
    status: Optional[JobStatus] = Query(None),
    department: Optional[str] = Query(None),
    employment_type: Optional[EmploymentType] = Query(None, alias="employmentType"),
    location_type: Optional[LocationType] = Query(None, alias="locationType"),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(pagination),
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: AsyncSession = Depends(get_db),
):
    rows, page = await jobs.list_jobs(
        db,
        params.page,
        params.limit,
        status=status,
        department=department,
        employment_type=employment_type,
        location_type=location_type,
        search=search,
    )
    return ListResponse(data=[_serialize(job, principal) for job in rows], pagination=page)


@router.get("/all/applications", response_model=ListResponse[ApplicationResponse])
async def list_all_applications(
    status: Optional[ApplicationStatus] = Query(None),
    job_id: Optional[int] = Query(None, alias="jobId"),
    params: PageParams = Depends(pagination),
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    rows, page = await jobs.list_applications(db, params.page, params.limit, job_id=job_id, status=status)
    return ListResponse(data=[ApplicationResponse.model_validate(a) for a in rows], pagination=page)


@router.patch("/applications/{application_id}/status", response_model=DataResponse[ApplicationResponse])
async def update_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    application = await jobs.update_application_status(db, application_id, data)
    return DataResponse(data=ApplicationResponse.model_validate(application))


@router.get("/slug/{slug}", response_model=DataResponse[AnyJobResponse])
async def get_job_by_slug(
    slug: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: AsyncSession = Depends(get_db),
):
    job = await jobs.get_job_by_slug(db, slug)
    return DataResponse(data=_serialize(job, principal))


@router.get("/{job_id}", response_model=DataResponse[AnyJobResponse])
async def get_job(
    job_id: int,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db: AsyncSession = Depends(get_db),
):
    job = await jobs.get_job(db, job_id)
    return DataResponse(data=_serialize(job, principal))


@router.post("/{job_id}/apply", response_model=DataResponse[ApplicationResponse], status_code=201)
async def apply(
    job_id: int,
    data: ApplicationCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    application = await jobs.apply_to_job(db, job_id, data)
    background_tasks.add_task(
        send_application_notification,
        application.job.title,
        application.applicant_name,
        application.applicant_email,
    )
    return DataResponse(data=ApplicationResponse.model_validate(application))


@router.get("/{job_id}/applications", response_model=ListResponse[ApplicationResponse])
async def list_job_applications(
    job_id: int,
    status: Optional[ApplicationStatus] = Query(None),
    params: PageParams = Depends(pagination),
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await jobs.get_job(db, job_id)
    rows, page = await jobs.list_applications(db, params.page, params.limit, job_id=job_id, status=status)
    return ListResponse(data=[ApplicationResponse.model_validate(a) for a in rows], pagination=page)


@router.post("", response_model=DataResponse[JobResponse], status_code=201)
async def create_job(
    data: JobCreate,
    principal: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    job = await jobs.create_job(db, data, principal.user_id)
    return DataResponse(data=JobResponse.model_validate(job))


@router.put("/{job_id}", response_model=DataResponse[JobResponse])
async def update_job(
    job_id: int,
    data: JobUpdate,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    job = await jobs.update_job(db, job_id, data)
    return DataResponse(data=JobResponse.model_validate(job))


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: int,
    _: Principal = Depends(require_roles(*CONTENT_MANAGERS)),
    db: AsyncSession = Depends(get_db),
):
    await jobs.delete_job(db, job_id)
    return MessageResponse(message="Job deleted successfully")
