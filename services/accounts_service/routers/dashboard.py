"""Dashboard router - stats, activity and quick actions for the caller's role."""

from typing import List, Union

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.accounts_service.models import User
from services.accounts_service.routers._helpers import get_current_account
from services.accounts_service.schemas import (
    ActivityItem,
    AdminDashboardStats,
    HandlerDashboardStats,
    QuickAction,
    TrainerDashboardStats,
)
from services.accounts_service.services import dashboard as dashboard_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

DashboardStats = Union[AdminDashboardStats, TrainerDashboardStats, HandlerDashboardStats]

_STATS_MODELS = {
    "admin": AdminDashboardStats,
    "trainer": TrainerDashboardStats,
    "handler": HandlerDashboardStats,
}


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Headline numbers; which ones depends on the caller's role."""
    stats = await dashboard_service.get_dashboard_stats(db, account)
    return _STATS_MODELS[stats["scope"]](**stats)


@router.get("/activity", response_model=List[ActivityItem])
async def get_recent_activity(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await dashboard_service.get_recent_activity(db, account)


@router.get("/quick-actions", response_model=List[QuickAction])
async def get_quick_actions(account: User = Depends(get_current_account)):
    return dashboard_service.quick_actions(account.role)
