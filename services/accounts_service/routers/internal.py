"""Internal service-to-service endpoints for accounts-service.

These endpoints are authenticated with service_role JWT only. The auth
provider's hooks call them after a sign-in or an email confirmation.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.dependencies import require_service_role
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from pydantic import BaseModel
from services.accounts_service.errors import UserNotFoundError
from services.accounts_service.services import users as user_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/internal", tags=["internal"])


class CompletionUpdate(BaseModel):
    user_id: str
    profile_complete: int


@router.post("/users/{auth_id}/login", response_model=CompletionUpdate)
async def record_login(
    auth_id: str,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    try:
        user = await user_service.record_login(db, auth_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return CompletionUpdate(user_id=str(user.id), profile_complete=user.profile_complete)


@router.post("/users/{auth_id}/email-verified", response_model=CompletionUpdate)
async def mark_email_verified(
    auth_id: str,
    _service: AuthUser = Depends(require_service_role),
    db: AsyncSession = Depends(get_async_db),
):
    try:
        user = await user_service.mark_email_verified(db, auth_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return CompletionUpdate(user_id=str(user.id), profile_complete=user.profile_complete)
