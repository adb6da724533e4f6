"""Dashboard and organization schemas."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict


class AdminDashboardStats(BaseModel):
    scope: Literal["admin"] = "admin"
    total_users: int
    total_dogs: int
    pending_reviews: int  # profiles below 100%
    agreements_expiring_soon: int


class TrainerDashboardStats(BaseModel):
    scope: Literal["trainer"] = "trainer"
    active_clients: int
    dogs_in_training: int


class HandlerDashboardStats(BaseModel):
    scope: Literal["handler"] = "handler"
    active_dogs: int
    profile_complete: int
    team_members: int


class ActivityItem(BaseModel):
    id: str  # "<kind>-<uuid>"
    type: Literal["registration", "agreement", "training"]
    title: str
    description: str
    time: datetime
    status: Literal["approved", "pending", "complete"]


class QuickAction(BaseModel):
    title: str
    description: str
    href: str
    icon: str


class OrganizationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    subdomain: str
    theme: Optional[dict[str, Any]] = None
    settings: Optional[dict[str, Any]] = None
