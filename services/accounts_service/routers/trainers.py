"""Public trainer directory."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.roles import Role
from libs.db.session import get_async_db
from services.accounts_service.models import User
from services.accounts_service.routers._helpers import public_profile
from services.accounts_service.schemas import TrainerListResponse, UserPublicResponse
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/trainers", tags=["trainers"])


def _directory_filters():
    return (
        User.role == Role.TRAINER,
        User.show_in_directory.is_(True),
        User.public_profile.is_(True),
    )


@router.get("/", response_model=TrainerListResponse)
async def list_trainers(
    search: Optional[str] = Query(None, description="Name, business or city"),
    state: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    filters = list(_directory_filters())
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.business_name.ilike(pattern),
                User.city.ilike(pattern),
            )
        )
    if state:
        filters.append(User.state == state)

    total = await db.scalar(select(func.count(User.id)).where(*filters))
    result = await db.execute(
        select(User)
        .where(*filters)
        .order_by(User.is_verified.desc(), User.last_name, User.first_name)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    trainers = result.scalars().all()

    return TrainerListResponse(
        items=[public_profile(trainer) for trainer in trainers],
        total=total or 0,
        page=page,
        limit=limit,
    )


@router.get("/{trainer_id}", response_model=UserPublicResponse)
async def get_trainer(
    trainer_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    result = await db.execute(
        select(User).where(User.id == trainer_id, *_directory_filters())
    )
    trainer = result.scalar_one_or_none()
    if not trainer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trainer not found",
        )
    return public_profile(trainer)
