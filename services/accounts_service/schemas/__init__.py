"""Accounts service schemas.

Re-exports every request/response model so routers import from one place.
"""

from services.accounts_service.schemas.access import (  # noqa: F401
    AccessCheckResponse,
    AdminStatsResponse,
)
from services.accounts_service.schemas.agreement import (  # noqa: F401
    AgreementAcceptRequest,
    AgreementResponse,
    AgreementStatusResponse,
    ExpiringAgreementItem,
)
from services.accounts_service.schemas.dashboard import (  # noqa: F401
    ActivityItem,
    AdminDashboardStats,
    HandlerDashboardStats,
    OrganizationResponse,
    QuickAction,
    TrainerDashboardStats,
)
from services.accounts_service.schemas.dog import (  # noqa: F401
    DogCreate,
    DogDetailResponse,
    DogOwnerResponse,
    DogPermissions,
    DogResponse,
    DogStatsResponse,
    DogStatusUpdate,
    DogSummaryResponse,
    TeamMemberResponse,
)
from services.accounts_service.schemas.user import (  # noqa: F401
    Address,
    ChecklistItemResponse,
    CompletionResponse,
    TrainerListResponse,
    UserProfileResponse,
    UserPublicResponse,
    UserRegister,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "AccessCheckResponse",
    "ActivityItem",
    "Address",
    "AdminDashboardStats",
    "AdminStatsResponse",
    "AgreementAcceptRequest",
    "AgreementResponse",
    "AgreementStatusResponse",
    "ChecklistItemResponse",
    "CompletionResponse",
    "DogCreate",
    "DogDetailResponse",
    "DogOwnerResponse",
    "DogPermissions",
    "DogResponse",
    "DogStatsResponse",
    "DogStatusUpdate",
    "DogSummaryResponse",
    "ExpiringAgreementItem",
    "HandlerDashboardStats",
    "OrganizationResponse",
    "QuickAction",
    "TeamMemberResponse",
    "TrainerDashboardStats",
    "TrainerListResponse",
    "UserProfileResponse",
    "UserPublicResponse",
    "UserRegister",
    "UserResponse",
    "UserUpdate",
]
