"""
Job listings and applications.

Listing Status Flow:
    draft → active → closed → archived

Application Status Flow:
    new → reviewing → shortlisted → interviewing → offered/rejected/withdrawn

Applications are only accepted while the listing is ``active`` and an email
address may apply to a given listing once (unique (job_id, applicant_email)).
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, DateTime, Numeric, ForeignKey, JSON, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cms.database import Base, utcnow
from cms.models.base import TimestampMixin, SoftDeleteMixin


class JobStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"


class LocationType(str, enum.Enum):
    ONSITE = "onsite"
    REMOTE = "remote"
    HYBRID = "hybrid"


class EmploymentType(str, enum.Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ApplicationStatus(str, enum.Enum):
    NEW = "new"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobListing(TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "job_listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    department = Column(String(100), nullable=False)
    location_type = Column(String(20), nullable=False, default=LocationType.ONSITE.value)
    location_city = Column(String(100), nullable=True)
    employment_type = Column(String(20), nullable=False, default=EmploymentType.FULL_TIME.value)
    description = Column(Text, nullable=False)
    responsibilities = Column(JSON, nullable=False, default=list)
    qualifications_required = Column(JSON, nullable=False, default=list)
    qualifications_preferred = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    salary_min = Column(Numeric(10, 2), nullable=True)
    salary_max = Column(Numeric(10, 2), nullable=True)
    salary_currency = Column(String(3), nullable=False, default="USD")
    salary_visible = Column(Boolean, nullable=False, default=True)
    application_deadline = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default=JobStatus.DRAFT.value, index=True)
    internal_notes = Column(Text, nullable=True)
    posted_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    applications = relationship("JobApplication", back_populates="job")


class JobApplication(TimestampMixin, Base):
    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_email", name="uq_job_applications_job_email"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("job_listings.id"), nullable=False, index=True)
    applicant_name = Column(String(255), nullable=False)
    applicant_email = Column(String(255), nullable=False)
    applicant_phone = Column(String(50), nullable=True)
    resume_url = Column(String(500), nullable=False)
    resume_filename = Column(String(255), nullable=False)
    cover_letter = Column(Text, nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    portfolio_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.NEW.value, index=True)
    notes = Column(Text, nullable=True)
    applied_at = Column(DateTime, nullable=False, default=utcnow)

    job = relationship("JobListing", back_populates="applications")
