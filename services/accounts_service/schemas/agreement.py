"""Agreement schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.accounts_service.models.enums import AgreementType


class AgreementAcceptRequest(BaseModel):
    type: AgreementType
    version: str = Field(..., min_length=1, max_length=20)
    # Opaque document; shape differs per agreement type and version
    content: dict[str, Any] = Field(default_factory=dict)


class AgreementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    type: AgreementType
    version: str
    content: dict[str, Any] = {}
    accepted_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool
    superseded_by_id: Optional[uuid.UUID] = None
    superseded_at: Optional[datetime] = None


class AgreementStatusResponse(BaseModel):
    """Status of the caller's active agreement, with dashboard banner copy."""

    type: AgreementType
    status: str
    title: str
    description: str
    action: str
    urgent: bool
    days_until_expiry: Optional[int] = None
    elapsed_fraction: float = 0.0
    agreement: Optional[AgreementResponse] = None


class ExpiringAgreementItem(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    user_email: str
    type: AgreementType
    version: str
    expires_at: datetime
    days_until_expiry: int
    status: str
