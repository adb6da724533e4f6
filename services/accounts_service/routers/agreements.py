"""Agreements router - acceptance, status and history for the caller."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.datetime_utils import ensure_utc
from libs.db.session import get_async_db
from services.accounts_service.errors import AgreementConflictError, UserNotFoundError
from services.accounts_service.models import AgreementType
from services.accounts_service.routers._helpers import get_account_or_404
from services.accounts_service.schemas import (
    AgreementAcceptRequest,
    AgreementResponse,
    AgreementStatusResponse,
)
from services.accounts_service.services.agreements import (
    accept_agreement,
    agreement_status_report,
    select_active_agreement,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/agreements", tags=["agreements"])


@router.post(
    "/accept",
    response_model=AgreementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def accept(
    agreement_in: AgreementAcceptRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Accept an agreement version.
    Replaces the caller's active agreement of the same type.
    """
    user = await get_account_or_404(db, current_user)
    try:
        agreement = await accept_agreement(
            db,
            user.id,
            agreement_in.type,
            agreement_in.version,
            content=agreement_in.content,
        )
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User profile not found",
        )
    except AgreementConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        )
    return agreement


@router.get("/status", response_model=AgreementStatusResponse)
async def get_status(
    type: AgreementType = Query(AgreementType.TRAINING_BEHAVIOR_STANDARDS),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    user = await get_account_or_404(db, current_user)
    agreement = select_active_agreement(user.agreements, type)
    report = agreement_status_report(agreement, agreement_type=type)
    return AgreementStatusResponse(
        type=type,
        status=report.status.value,
        title=report.banner.title,
        description=report.banner.description,
        action=report.banner.action,
        urgent=report.banner.urgent,
        days_until_expiry=report.days_until_expiry,
        elapsed_fraction=report.elapsed_fraction,
        agreement=(
            AgreementResponse.model_validate(agreement) if agreement else None
        ),
    )


@router.get("/history", response_model=List[AgreementResponse])
async def get_history(
    type: AgreementType = Query(AgreementType.TRAINING_BEHAVIOR_STANDARDS),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Every record of ``type`` for the caller, newest first."""
    user = await get_account_or_404(db, current_user)
    history = [agreement for agreement in user.agreements if agreement.type == type]
    return sorted(
        history, key=lambda a: (ensure_utc(a.accepted_at), str(a.id)), reverse=True
    )
