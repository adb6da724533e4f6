"""Users router - registration and the caller's own profile."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.accounts_service.errors import UserAlreadyRegisteredError
from services.accounts_service.models import User
from services.accounts_service.routers._helpers import (
    get_account_or_404,
    profile_response,
    public_profile,
)
from services.accounts_service.schemas import (
    ChecklistItemResponse,
    CompletionResponse,
    OrganizationResponse,
    UserProfileResponse,
    UserPublicResponse,
    UserRegister,
    UserUpdate,
)
from services.accounts_service.services import users as user_service
from services.accounts_service.services.completion import (
    completion_checklist,
    completion_message,
    next_actions,
    refresh_profile_completion,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/register",
    response_model=UserProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    user_in: UserRegister,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Create the account for the authenticated caller."""
    email = user_in.email or current_user.email
    if not email:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Email is required",
        )

    try:
        user = await user_service.register_user(
            db,
            auth_id=current_user.user_id,
            email=str(email),
            first_name=user_in.first_name,
            last_name=user_in.last_name,
            role=user_in.role,
            account_type=user_in.account_type,
        )
    except UserAlreadyRegisteredError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    return profile_response(user)


@router.get("/me", response_model=UserProfileResponse)
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Get the caller's profile.
    The cached completion is recomputed on read and persisted if it drifted.
    """
    user = await get_account_or_404(db, current_user)
    cached = user.profile_complete
    if refresh_profile_completion(user) != cached:
        await db.commit()
    return profile_response(user)


@router.patch("/me", response_model=UserProfileResponse)
async def update_me(
    user_in: UserUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user = await get_account_or_404(db, current_user)
    changes = user_in.model_dump(mode="json", exclude_unset=True)
    if user_in.address is not None:
        # Whole document is replaced, defaults included
        changes["address"] = user_in.address.model_dump()
    if changes.get("website") == "":
        changes["website"] = None

    user = await user_service.update_profile(db, user, changes)
    logger.info(
        f"Profile updated for user {user.id}: {sorted(changes)}",
        extra={"extra_fields": {"user_id": str(user.id)}},
    )
    return profile_response(user)


@router.get("/me/completion", response_model=CompletionResponse)
async def get_my_completion(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user = await get_account_or_404(db, current_user)
    value = refresh_profile_completion(user)
    return CompletionResponse(
        profile_complete=value,
        message=completion_message(value),
        checklist=[
            ChecklistItemResponse.model_validate(item)
            for item in completion_checklist(user)
        ],
        next_actions=[
            ChecklistItemResponse.model_validate(item) for item in next_actions(user)
        ],
    )


@router.get("/me/organization", response_model=OrganizationResponse)
async def get_my_organization(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """The organization the caller belongs to."""
    user = await get_account_or_404(db, current_user)
    if user.organization is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found",
        )
    return user.organization


@router.get("/{user_id}", response_model=UserPublicResponse)
async def get_public_user(
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    """Public profile of any user who keeps their profile public."""
    result = await db.execute(
        select(User).where(User.id == user_id, User.public_profile.is_(True))
    )
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return public_profile(user)
