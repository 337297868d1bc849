from cms.models.user import User, Role
from cms.models.category import Category
from cms.models.tag import Tag
from cms.models.blog import BlogPost, PostStatus, post_tags
from cms.models.service import Service, ServiceImage, ServiceStatus
from cms.models.job import (
    JobListing,
    JobApplication,
    JobStatus,
    LocationType,
    EmploymentType,
    ApplicationStatus,
)
from cms.models.media import MediaFile, FileType

__all__ = [
    "User",
    "Role",
    "Category",
    "Tag",
    "BlogPost",
    "PostStatus",
    "post_tags",
    "Service",
    "ServiceImage",
    "ServiceStatus",
    "JobListing",
    "JobApplication",
    "JobStatus",
    "LocationType",
    "EmploymentType",
    "ApplicationStatus",
    "MediaFile",
    "FileType",
]
