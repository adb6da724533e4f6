"""User, profile and completion schemas."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional, Union

from libs.auth.roles import REGISTRABLE_ROLES, Role
from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator
from services.accounts_service.models.enums import AccountType
from services.accounts_service.schemas.agreement import AgreementResponse

# ============================================================================
# PROFILE PARTS
# ============================================================================


class Address(BaseModel):
    """Postal address stored as a document on the user."""

    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=2)
    zip_code: str = Field(..., min_length=5)
    country: str = Field("US", min_length=2)


# ============================================================================
# REGISTRATION / UPDATE
# ============================================================================


class UserRegister(BaseModel):
    """Registration of the authenticated caller."""

    email: Optional[EmailStr] = None  # defaults to the token's email
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    role: Role
    account_type: AccountType = AccountType.INDIVIDUAL

    @field_validator("role")
    @classmethod
    def role_must_be_registrable(cls, v: Role) -> Role:
        if v not in REGISTRABLE_ROLES:
            raise ValueError("Please select your role: HANDLER, TRAINER or AIDE")
        return v


class UserUpdate(BaseModel):
    """Partial profile update. Only the fields sent are changed."""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    profile_image: Optional[str] = None
    address: Optional[Address] = None
    business_name: Optional[str] = None
    title: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[Union[HttpUrl, Literal[""]]] = None

    # Privacy
    public_profile: Optional[bool] = None
    public_email: Optional[bool] = None
    public_phone: Optional[bool] = None
    show_in_directory: Optional[bool] = None


# ============================================================================
# COMPLETION
# ============================================================================


class ChecklistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    completed: bool


class CompletionResponse(BaseModel):
    profile_complete: int
    message: str
    checklist: list[ChecklistItemResponse]
    next_actions: list[ChecklistItemResponse]


# ============================================================================
# RESPONSES
# ============================================================================


class UserResponse(BaseModel):
    """The caller's own account."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    auth_id: str
    email: str
    member_number: Optional[str] = None
    organization_id: Optional[uuid.UUID] = None
    role: Role
    account_type: AccountType

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    profile_image: Optional[str] = None
    address: Optional[dict[str, Any]] = None
    bio: Optional[str] = None
    email_verified: Optional[datetime] = None
    profile_complete: int = 0

    business_name: Optional[str] = None
    title: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool = False

    public_profile: bool = True
    public_email: bool = False
    public_phone: bool = False
    show_in_directory: bool = True

    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    agreements: list[AgreementResponse] = []


class UserProfileResponse(UserResponse):
    checklist: list[ChecklistItemResponse] = []


class UserPublicResponse(BaseModel):
    """Public profile; contact details only when the user opted in."""

    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role
    account_type: AccountType
    member_number: Optional[str] = None
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    business_name: Optional[str] = None
    title: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[str] = None
    is_verified: bool = False
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime


class TrainerListResponse(BaseModel):
    items: list[UserPublicResponse]
    total: int
    page: int
    limit: int
