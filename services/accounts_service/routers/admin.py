"""Admin router - account stats and agreement renewals."""

from typing import List

from fastapi import APIRouter, Depends, Query
from libs.common.datetime_utils import utc_now
from libs.db.session import get_async_db
from services.accounts_service.models import User
from services.accounts_service.routers._helpers import require_admin
from services.accounts_service.schemas import AdminStatsResponse, ExpiringAgreementItem
from services.accounts_service.services.agreements import (
    EXPIRING_MONTH_DAYS,
    days_until,
    find_expiring_agreements,
    get_agreement_status,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(select(User.role, func.count(User.id)).group_by(User.role))
    users_by_role = {role.value: count for role, count in result.all()}

    incomplete = await db.scalar(
        select(func.count(User.id)).where(User.profile_complete < 100)
    )
    expiring = await find_expiring_agreements(db, EXPIRING_MONTH_DAYS)

    return AdminStatsResponse(
        total_users=sum(users_by_role.values()),
        users_by_role=users_by_role,
        incomplete_profiles=incomplete or 0,
        agreements_expiring_soon=len(expiring),
    )


@router.get("/agreements/expiring", response_model=List[ExpiringAgreementItem])
async def list_expiring_agreements(
    days: int = Query(EXPIRING_MONTH_DAYS, ge=1, le=366),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Active agreements expiring within ``days``, soonest first."""
    now = utc_now()
    agreements = await find_expiring_agreements(db, days, now=now)
    return [
        ExpiringAgreementItem(
            id=agreement.id,
            user_id=agreement.user_id,
            user_name=agreement.user.full_name,
            user_email=agreement.user.email,
            type=agreement.type,
            version=agreement.version,
            expires_at=agreement.expires_at,
            days_until_expiry=days_until(agreement.expires_at, now),
            status=get_agreement_status(agreement, now).value,
        )
        for agreement in agreements
    ]
