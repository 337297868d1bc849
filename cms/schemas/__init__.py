from cms.schemas.common import (
    CamelModel,
    DataResponse,
    ListResponse,
    MessageResponse,
    Pagination,
)
from cms.schemas.auth import (
    LoginRequest,
    LoginData,
    AuthUser,
    RefreshRequest,
    AccessTokenData,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from cms.schemas.user import RoleResponse, RoleSummary, UserCreate, UserResponse, UserUpdate
from cms.schemas.category import CategoryCreate, CategoryResponse, CategoryTreeNode, CategoryUpdate
from cms.schemas.tag import TagCreate, TagResponse, TagUpdate
from cms.schemas.blog import PostCreate, PostResponse, PostUpdate
from cms.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate, ServiceImageIn
from cms.schemas.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobPublicResponse,
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
)
from cms.schemas.media import MediaResponse, MediaUpdate
from cms.schemas.dashboard import ActivityItem, DashboardStats, SearchResult

__all__ = [
    "CamelModel",
    "DataResponse",
    "ListResponse",
    "MessageResponse",
    "Pagination",
    "LoginRequest",
    "LoginData",
    "AuthUser",
    "RefreshRequest",
    "AccessTokenData",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "RoleResponse",
    "RoleSummary",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryTreeNode",
    "CategoryUpdate",
    "TagCreate",
    "TagResponse",
    "TagUpdate",
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "ServiceCreate",
    "ServiceResponse",
    "ServiceUpdate",
    "ServiceImageIn",
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "JobPublicResponse",
    "ApplicationCreate",
    "ApplicationResponse",
    "ApplicationStatusUpdate",
    "MediaResponse",
    "MediaUpdate",
    "ActivityItem",
    "DashboardStats",
    "SearchResult",
]
