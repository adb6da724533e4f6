"""
User registration and profile writes.

Every write path that can change a checklist field ends with
``refresh_profile_completion`` before the commit, so the cached percentage
is recomputed on each profile update, login, and email verification.
"""

import secrets
from datetime import datetime
from typing import Any, Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.accounts_service.errors import (
    UserAlreadyRegisteredError,
    UserNotFoundError,
)
from services.accounts_service.models import AccountType, Organization, Role, User
from services.accounts_service.services.completion import refresh_profile_completion
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

MEMBER_NUMBER_ATTEMPTS = 5

DEFAULT_ORGANIZATION_THEME = {
    "primary": "#3b82f6",
    "secondary": "#1e40af",
    "accent": "#10b981",
}
DEFAULT_ORGANIZATION_SETTINGS = {
    "allowRegistration": True,
    "requireEmailVerification": True,
}


def generate_member_number(now: Optional[datetime] = None) -> str:
    """Member number in the ``SDS-<year>-<4 digits>`` format."""
    year = (now or utc_now()).year
    return f"SDS-{year}-{secrets.randbelow(10000):04d}"


async def get_user_by_auth_id(db: AsyncSession, auth_id: str) -> Optional[User]:
    result = await db.execute(
        select(User)
        .where(User.auth_id == auth_id)
        .options(selectinload(User.agreements))
    )
    return result.scalar_one_or_none()


async def require_user_by_auth_id(db: AsyncSession, auth_id: str) -> User:
    user = await get_user_by_auth_id(db, auth_id)
    if user is None:
        raise UserNotFoundError(auth_id)
    return user


async def get_or_create_default_organization(db: AsyncSession) -> Organization:
    settings = get_settings()
    result = await db.execute(
        select(Organization).where(
            Organization.subdomain == settings.DEFAULT_ORGANIZATION_SUBDOMAIN
        )
    )
    organization = result.scalar_one_or_none()
    if organization:
        return organization

    organization = Organization(
        name=settings.DEFAULT_ORGANIZATION_NAME,
        subdomain=settings.DEFAULT_ORGANIZATION_SUBDOMAIN,
        theme=dict(DEFAULT_ORGANIZATION_THEME),
        settings=dict(DEFAULT_ORGANIZATION_SETTINGS),
    )
    db.add(organization)
    await db.flush()
    logger.info(f"Created default organization '{organization.subdomain}'")
    return organization


async def _unique_member_number(db: AsyncSession) -> str:
    for _ in range(MEMBER_NUMBER_ATTEMPTS):
        candidate = generate_member_number()
        result = await db.execute(
            select(User.id).where(User.member_number == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate
    raise RuntimeError("Could not allocate a unique member number")


async def _is_registered(db: AsyncSession, auth_id: str, email: str) -> bool:
    result = await db.execute(
        select(User.id).where(or_(User.auth_id == auth_id, User.email == email))
    )
    return result.first() is not None


async def register_user(
    db: AsyncSession,
    *,
    auth_id: str,
    email: str,
    first_name: str,
    last_name: str,
    role: Role,
    account_type: AccountType = AccountType.INDIVIDUAL,
) -> User:
    """Create the account for an authenticated identity.

    A concurrent registration of the same identity loses on the unique
    constraints and is reported as ``UserAlreadyRegisteredError`` too.
    """
    if await _is_registered(db, auth_id, email):
        raise UserAlreadyRegisteredError(f"User with email {email} already exists")

    try:
        organization = await get_or_create_default_organization(db)

        user = User(
            auth_id=auth_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            account_type=account_type,
            member_number=await _unique_member_number(db),
            organization=organization,
            agreements=[],
        )
        refresh_profile_completion(user)
        db.add(user)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await _is_registered(db, auth_id, email):
            logger.info(f"Concurrent registration lost for {auth_id}")
            raise UserAlreadyRegisteredError(
                f"User with email {email} already exists"
            )
        raise

    logger.info(
        f"User registered: {user.id} ({role.value})",
        extra={
            "extra_fields": {
                "user_id": str(user.id),
                "role": role.value,
                "organization_id": str(organization.id),
            }
        },
    )
    return user


async def update_profile(
    db: AsyncSession, user: User, changes: dict[str, Any]
) -> User:
    """Apply profile ``changes`` to ``user`` and recompute completion."""
    for field, value in changes.items():
        if hasattr(user, field):
            setattr(user, field, value)

    refresh_profile_completion(user)
    db.add(user)
    await db.commit()
    return user


async def record_login(
    db: AsyncSession, auth_id: str, now: Optional[datetime] = None
) -> User:
    """Stamp the login time and recompute the cached completion."""
    user = await require_user_by_auth_id(db, auth_id)
    user.last_login_at = now or utc_now()
    value = refresh_profile_completion(user)
    await db.commit()
    logger.info(f"Login recorded for user {user.id}; profile {value}% complete")
    return user


async def mark_email_verified(
    db: AsyncSession, auth_id: str, now: Optional[datetime] = None
) -> User:
    user = await require_user_by_auth_id(db, auth_id)
    if user.email_verified is None:
        user.email_verified = now or utc_now()
    refresh_profile_completion(user)
    await db.commit()
    return user
