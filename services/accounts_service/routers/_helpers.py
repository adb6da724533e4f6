"""Shared dependencies and helper functions for accounts service routers."""

from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, status
from libs.auth.access import Identity, SessionState
from libs.auth.dependencies import enforce_access, get_current_user, get_optional_user
from libs.auth.models import AuthUser
from libs.auth.roles import ADMIN_ROLES
from libs.db.session import get_async_db
from services.accounts_service.errors import UserNotFoundError
from services.accounts_service.models import User
from services.accounts_service.schemas import (
    ChecklistItemResponse,
    UserProfileResponse,
    UserPublicResponse,
)
from services.accounts_service.services.completion import completion_checklist
from services.accounts_service.services.users import (
    get_user_by_auth_id,
    require_user_by_auth_id,
)
from sqlalchemy.ext.asyncio import AsyncSession


def _unregistered(current_user: AuthUser) -> AuthUser:
    # Signed in but no account yet: no application role
    return current_user.model_copy(update={"role": None})


async def get_caller_identity(
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
) -> Identity:
    """
    Resolve the caller for the access gate. The role is read from the stored
    account, never from the token.
    """
    if current_user is None:
        return SessionState.ANONYMOUS
    account = await get_user_by_auth_id(db, current_user.user_id)
    return account if account is not None else _unregistered(current_user)


def require_roles(*roles: Any) -> Callable:
    """
    Build a dependency admitting only callers whose stored role is one of
    ``roles``. With no roles it admits any authenticated caller.
    Returns the caller's account, or ``None`` for an unregistered caller when
    no role is required.
    """
    required = tuple(roles)

    async def dependency(
        current_user: AuthUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_async_db),
    ) -> Optional[User]:
        account = await get_user_by_auth_id(db, current_user.user_id)
        enforce_access(
            account if account is not None else _unregistered(current_user),
            required,
        )
        return account

    return dependency


require_admin = require_roles(*ADMIN_ROLES)


async def get_current_account(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> User:
    """Resolve the authenticated caller to their account, 404 if unregistered."""
    return await get_account_or_404(db, current_user)


async def get_account_or_404(db: AsyncSession, current_user: AuthUser) -> User:
    """Load the caller's account, 404 when they have not registered yet."""
    try:
        return await require_user_by_auth_id(db, current_user.user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User profile not found. Please complete registration.",
        )


def profile_response(user: User) -> UserProfileResponse:
    response = UserProfileResponse.model_validate(user)
    response.checklist = [
        ChecklistItemResponse.model_validate(item)
        for item in completion_checklist(user)
    ]
    return response


def public_profile(user: User) -> UserPublicResponse:
    """Public view of ``user``; email and phone only when the user opted in."""
    return UserPublicResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        account_type=user.account_type,
        member_number=user.member_number,
        profile_image=user.profile_image,
        bio=user.bio,
        business_name=user.business_name,
        title=user.title,
        city=user.city,
        state=user.state,
        website=user.website,
        is_verified=user.is_verified,
        email=user.email if user.public_email else None,
        phone=user.phone if user.public_phone else None,
        created_at=user.created_at,
    )
