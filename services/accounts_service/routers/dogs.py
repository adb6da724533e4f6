"""Dogs router - the caller's dogs, their teams and status changes."""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from libs.db.session import get_async_db
from services.accounts_service.models import Dog, User
from services.accounts_service.routers._helpers import get_current_account
from services.accounts_service.schemas import (
    DogCreate,
    DogDetailResponse,
    DogResponse,
    DogStatsResponse,
    DogStatusUpdate,
    DogSummaryResponse,
    TeamMemberResponse,
)
from services.accounts_service.services import dogs as dog_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/dogs", tags=["dogs"])


def _team(dog: Dog) -> list[TeamMemberResponse]:
    return [TeamMemberResponse(**member) for member in dog_service.team_members(dog)]


def _summary(dog: Dog) -> DogSummaryResponse:
    response = DogSummaryResponse.model_validate(dog)
    response.team_members = _team(dog)
    return response


@router.get("/", response_model=List[DogSummaryResponse])
async def list_my_dogs(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """Dogs the caller owns, newest first, with their team members."""
    dogs = await dog_service.list_owned_dogs(db, account.id)
    return [_summary(dog) for dog in dogs]


@router.post("/", response_model=DogResponse, status_code=status.HTTP_201_CREATED)
async def register_dog(
    dog_in: DogCreate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    return await dog_service.register_dog(db, account, dog_in.model_dump())


@router.get("/stats", response_model=DogStatsResponse)
async def get_dog_stats(
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    counts = await dog_service.get_dog_stats(db, account.id)
    return DogStatsResponse(
        total=sum(counts.values()),
        **{dog_status.value.lower(): count for dog_status, count in counts.items()},
    )


@router.get("/{dog_id}", response_model=DogDetailResponse)
async def get_dog(
    dog_id: uuid.UUID,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    """A dog the caller owns or may view through its team."""
    dog = await dog_service.get_viewable_dog(db, dog_id, account.id)
    if dog is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dog not found or you don't have permission to view it",
        )
    response = DogDetailResponse.model_validate(dog)
    response.team_members = _team(dog)
    return response


@router.patch("/{dog_id}/status", response_model=DogResponse)
async def update_dog_status(
    dog_id: uuid.UUID,
    status_in: DogStatusUpdate,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_async_db),
):
    dog = await dog_service.get_manageable_dog(db, dog_id, account.id)
    if dog is None:
        # Missing dogs and forbidden ones look the same to the caller
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to update this dog",
        )
    return await dog_service.update_dog_status(
        db, dog, status_in.status, status_in.status_reason
    )
