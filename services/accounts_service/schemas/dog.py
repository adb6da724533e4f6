"""Dog registration, status and team schemas."""

import uuid
from datetime import date, datetime
from typing import Optional

from libs.auth.roles import Role
from pydantic import BaseModel, ConfigDict, Field, model_validator
from services.accounts_service.models.enums import (
    DogGender,
    DogRelationshipType,
    DogStatus,
    RelationshipStatus,
)

# ============================================================================
# REQUESTS
# ============================================================================


class DogCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    breed: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[DogGender] = None
    weight: Optional[float] = Field(None, gt=0)
    color: Optional[str] = None
    microchip_id: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=1000)
    profile_image: Optional[str] = None
    training_start_date: Optional[date] = None
    training_end_date: Optional[date] = None
    public_profile: bool = True
    show_in_directory: bool = True

    @model_validator(mode="after")
    def training_dates_in_order(self) -> "DogCreate":
        if (
            self.training_start_date
            and self.training_end_date
            and self.training_end_date < self.training_start_date
        ):
            raise ValueError("Training end date must be after the start date")
        return self


class DogStatusUpdate(BaseModel):
    status: DogStatus
    status_reason: Optional[str] = Field(None, max_length=500)


# ============================================================================
# RESPONSES
# ============================================================================


class DogPermissions(BaseModel):
    can_view: bool
    can_edit: bool
    can_manage: bool


class TeamMemberResponse(BaseModel):
    """A user attached to a dog, as listed on the owner's dashboard."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    relationship: DogRelationshipType
    status: RelationshipStatus
    permissions: DogPermissions


class DogOwnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    profile_image: Optional[str] = None


class DogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    registration_num: str
    owner_id: uuid.UUID
    name: str
    breed: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[DogGender] = None
    weight: Optional[float] = None
    color: Optional[str] = None
    microchip_id: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    status: DogStatus
    status_reason: Optional[str] = None
    status_date: Optional[datetime] = None
    training_start_date: Optional[date] = None
    training_end_date: Optional[date] = None
    public_profile: bool
    show_in_directory: bool
    created_at: datetime
    updated_at: datetime


class DogSummaryResponse(DogResponse):
    team_members: list[TeamMemberResponse] = []


class DogDetailResponse(DogSummaryResponse):
    owner: DogOwnerResponse


class DogStatsResponse(BaseModel):
    total: int = 0
    active: int = 0
    in_training: int = 0
    retired: int = 0
    washed_out: int = 0
    in_memoriam: int = 0
