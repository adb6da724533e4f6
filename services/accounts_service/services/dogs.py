"""
Dog registration, team permissions and status changes.

Owners can do everything with their dogs. Other users act through a
``DogUserRelationship``: ``can_view_profile`` to read the full record,
``can_manage_dogs`` to change the status. A declined relationship grants
nothing.
"""

import secrets
import uuid
from datetime import datetime
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.accounts_service.models import (
    Dog,
    DogStatus,
    DogUserRelationship,
    RelationshipStatus,
    User,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

REGISTRATION_NUMBER_ATTEMPTS = 5


def generate_registration_number(now: Optional[datetime] = None) -> str:
    """Dog registration number in the ``DOG-<year>-<5 digits>`` format."""
    year = (now or utc_now()).year
    return f"DOG-{year}-{secrets.randbelow(100000):05d}"


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def _relationships_for(dog: Dog, user_id: uuid.UUID) -> list[DogUserRelationship]:
    return [
        rel
        for rel in dog.relationships or []
        if rel.user_id == user_id and rel.status != RelationshipStatus.DECLINED
    ]


def can_view_dog(dog: Dog, user_id: uuid.UUID) -> bool:
    if dog.owner_id == user_id:
        return True
    return any(rel.can_view_profile for rel in _relationships_for(dog, user_id))


def can_manage_dog(dog: Dog, user_id: uuid.UUID) -> bool:
    if dog.owner_id == user_id:
        return True
    return any(rel.can_manage_dogs for rel in _relationships_for(dog, user_id))


def team_members(dog: Dog) -> list[dict[str, Any]]:
    """Users attached to ``dog`` with their permissions, for dashboard cards."""
    return [
        {
            "id": rel.user.id,
            "name": rel.user.full_name,
            "email": rel.user.email,
            "role": rel.user.role,
            "relationship": rel.relationship_type,
            "status": rel.status,
            "permissions": {
                "can_view": rel.can_view_profile,
                "can_edit": rel.can_edit_profile,
                "can_manage": rel.can_manage_dogs,
            },
        }
        for rel in dog.relationships or []
    ]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def _with_team():
    return selectinload(Dog.relationships).selectinload(DogUserRelationship.user)


async def list_owned_dogs(db: AsyncSession, owner_id: uuid.UUID) -> list[Dog]:
    """Dogs owned by ``owner_id``, newest registration first."""
    result = await db.execute(
        select(Dog)
        .where(Dog.owner_id == owner_id)
        .options(_with_team())
        .order_by(Dog.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def _get_dog(db: AsyncSession, dog_id: uuid.UUID) -> Optional[Dog]:
    result = await db.execute(
        select(Dog)
        .where(Dog.id == dog_id)
        .options(_with_team(), selectinload(Dog.owner))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_viewable_dog(
    db: AsyncSession, dog_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[Dog]:
    """The dog when ``user_id`` may read it; ``None`` when missing or hidden."""
    dog = await _get_dog(db, dog_id)
    if dog is None or not can_view_dog(dog, user_id):
        return None
    return dog


async def get_manageable_dog(
    db: AsyncSession, dog_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[Dog]:
    dog = await _get_dog(db, dog_id)
    if dog is None or not can_manage_dog(dog, user_id):
        return None
    return dog


async def get_dog_stats(db: AsyncSession, owner_id: uuid.UUID) -> dict[DogStatus, int]:
    """Count of ``owner_id``'s dogs per status; every status is present."""
    result = await db.execute(
        select(Dog.status, func.count(Dog.id))
        .where(Dog.owner_id == owner_id)
        .group_by(Dog.status)
    )
    counts = {status: 0 for status in DogStatus}
    for status, count in result.all():
        counts[DogStatus(status)] = count
    return counts


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def _unique_registration_number(db: AsyncSession) -> str:
    for _ in range(REGISTRATION_NUMBER_ATTEMPTS):
        candidate = generate_registration_number()
        result = await db.execute(
            select(Dog.id).where(Dog.registration_num == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate
    raise RuntimeError("Could not allocate a unique dog registration number")


async def register_dog(db: AsyncSession, owner: User, data: dict[str, Any]) -> Dog:
    """Register a dog owned by ``owner`` in the owner's organization."""
    dog = Dog(
        **data,
        owner_id=owner.id,
        organization_id=owner.organization_id,
        registration_num=await _unique_registration_number(db),
        relationships=[],
    )
    db.add(dog)
    await db.commit()

    logger.info(
        f"Dog registered: {dog.registration_num} ({dog.name})",
        extra={
            "extra_fields": {
                "dog_id": str(dog.id),
                "owner_id": str(owner.id),
            }
        },
    )
    return dog


async def update_dog_status(
    db: AsyncSession,
    dog: Dog,
    status: DogStatus,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dog:
    previous = DogStatus(dog.status)
    dog.status = DogStatus(status)
    dog.status_reason = reason
    dog.status_date = now or utc_now()
    await db.commit()

    logger.info(
        f"Dog {dog.registration_num} status {previous.value} -> {dog.status.value}",
        extra={"extra_fields": {"dog_id": str(dog.id), "status": dog.status.value}},
    )
    return dog
