"""Access-check and admin schemas."""

from typing import Optional

from pydantic import BaseModel


class AccessCheckResponse(BaseModel):
    resource: str
    outcome: str
    allowed: bool
    required_roles: list[str] = []
    actual_role: Optional[str] = None
    message: Optional[str] = None
    redirect_to: Optional[str] = None


class AdminStatsResponse(BaseModel):
    total_users: int
    users_by_role: dict[str, int]
    incomplete_profiles: int
    agreements_expiring_soon: int
