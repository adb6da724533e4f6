from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

SERVICE_ROLE = "service_role"


class AuthUser(BaseModel):
    """
    Represents an authenticated caller decoded from the bearer JWT.

    ``role`` is the raw provider claim ("authenticated" for end users,
    ``service_role`` for backend-to-backend calls). It only identifies
    service calls; application roles come from the stored account.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: Optional[str] = None

    @property
    def is_service_role(self) -> bool:
        return self.role == SERVICE_ROLE
