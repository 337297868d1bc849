from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field, HttpUrl, model_validator

from cms.models import ApplicationStatus, EmploymentType, JobStatus, LocationType
from cms.schemas.common import CamelModel, NonEmptyStr, UtcDateTime


class JobCreate(CamelModel):
    title: NonEmptyStr
    department: NonEmptyStr
    location_type: LocationType = LocationType.ONSITE
    location_city: Optional[str] = None
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    description: NonEmptyStr
    responsibilities: List[str] = []
    qualifications_required: List[str] = []
    qualifications_preferred: List[str] = []
    benefits: List[str] = []
    salary_min: Optional[Decimal] = Field(None, ge=0)
    salary_max: Optional[Decimal] = Field(None, ge=0)
    salary_currency: str = Field("USD", min_length=3, max_length=3)
    salary_visible: bool = True
    application_deadline: Optional[UtcDateTime] = None
    status: JobStatus = JobStatus.DRAFT
    internal_notes: Optional[str] = None

    @model_validator(mode="after")
    def salary_range_ordered(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salaryMin cannot exceed salaryMax")
        return self


class JobUpdate(CamelModel):
    title: Optional[NonEmptyStr] = None
    department: Optional[NonEmptyStr] = None
    location_type: Optional[LocationType] = None
    location_city: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    description: Optional[NonEmptyStr] = None
    responsibilities: Optional[List[str]] = None
    qualifications_required: Optional[List[str]] = None
    qualifications_preferred: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    salary_min: Optional[Decimal] = Field(None, ge=0)
    salary_max: Optional[Decimal] = Field(None, ge=0)
    salary_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    salary_visible: Optional[bool] = None
    application_deadline: Optional[UtcDateTime] = None
    status: Optional[JobStatus] = None
    internal_notes: Optional[str] = None


class JobPublicResponse(CamelModel):
    id: int
    title: str
    slug: str
    department: str
    location_type: str
    location_city: Optional[str] = None
    employment_type: str
    description: str
    responsibilities: List[str] = []
    qualifications_required: List[str] = []
    qualifications_preferred: List[str] = []
    benefits: List[str] = []
    salary_min: Optional[Decimal] = None
    salary_max: Optional[Decimal] = None
    salary_currency: str
    salary_visible: bool
    application_deadline: Optional[datetime] = None
    status: str
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def hide_salary(self):
        if not self.salary_visible:
            self.salary_min = None
            self.salary_max = None
        return self


class JobResponse(JobPublicResponse):
    internal_notes: Optional[str] = None
    posted_by: int

    @model_validator(mode="after")
    def hide_salary(self):
        # Staff always see the salary range
        return self


class JobSummary(CamelModel):
    id: int
    title: str
    slug: str


class ApplicationCreate(CamelModel):
    applicant_name: NonEmptyStr
    applicant_email: EmailStr
    applicant_phone: Optional[str] = None
    resume_url: HttpUrl
    resume_filename: Optional[str] = None
    cover_letter: Optional[str] = None
    linkedin_url: Optional[HttpUrl] = None
    portfolio_url: Optional[HttpUrl] = None


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class ApplicationResponse(CamelModel):
    id: int
    job_id: int
    job: Optional[JobSummary] = None
    applicant_name: str
    applicant_email: str
    applicant_phone: Optional[str] = None
    resume_url: str
    resume_filename: str
    cover_letter: Optional[str] = None
    linkedin_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    status: str
    notes: Optional[str] = None
    applied_at: datetime
