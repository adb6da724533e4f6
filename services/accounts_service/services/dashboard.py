"""
Role-dependent dashboard content: headline stats, recent activity and quick
actions.

The caller's stored role picks the view. ADMIN and SUPER_ADMIN get the
system view, TRAINER the client view, and everyone else the handler view.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from libs.auth.roles import ADMIN_ROLES, Role, parse_role
from libs.common.datetime_utils import ensure_utc, utc_now
from services.accounts_service.models import (
    Agreement,
    Dog,
    DogRelationshipType,
    DogStatus,
    DogUserRelationship,
    RelationshipStatus,
    User,
)
from services.accounts_service.services.agreements import (
    AGREEMENT_TITLES,
    EXPIRING_MONTH_DAYS,
    find_expiring_agreements,
)
from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

ACTIVITY_LIMIT = 5

QUICK_ACTIONS: dict[str, list[dict[str, str]]] = {
    "admin": [
        {
            "title": "User Management",
            "description": "Manage users and permissions",
            "href": "/dashboard/admin/users",
            "icon": "Users",
        },
        {
            "title": "Organizations",
            "description": "Manage organizations and branding",
            "href": "/dashboard/admin/organizations",
            "icon": "Building",
        },
        {
            "title": "Agreement Renewals",
            "description": "Review agreements expiring soon",
            "href": "/dashboard/admin",
            "icon": "AlertCircle",
        },
        {
            "title": "Analytics",
            "description": "View system analytics",
            "href": "/dashboard/analytics",
            "icon": "BarChart",
        },
    ],
    "trainer": [
        {
            "title": "My Clients",
            "description": "Dogs and handlers you train",
            "href": "/dashboard/clients",
            "icon": "UserPlus",
        },
        {
            "title": "Analytics",
            "description": "Training progress across clients",
            "href": "/dashboard/analytics",
            "icon": "BarChart",
        },
        {
            "title": "View Agreements",
            "description": "View and manage agreements",
            "href": "/dashboard/agreements",
            "icon": "FileText",
        },
        {
            "title": "My Profile",
            "description": "Update trainer profile",
            "href": "/dashboard/profile",
            "icon": "User",
        },
    ],
    "handler": [
        {
            "title": "Register Dog",
            "description": "Register a new service dog",
            "href": "/dashboard/dogs/register",
            "icon": "Plus",
        },
        {
            "title": "View Agreements",
            "description": "View and manage agreements",
            "href": "/dashboard/agreements",
            "icon": "FileText",
        },
        {
            "title": "Find Trainers",
            "description": "Connect with trainers",
            "href": "/trainers",
            "icon": "Users",
        },
        {
            "title": "My Dogs",
            "description": "Manage your dogs",
            "href": "/dashboard/dogs",
            "icon": "Heart",
        },
    ],
}


def dashboard_scope(role: Any) -> str:
    """``"admin"``, ``"trainer"`` or ``"handler"`` for a stored role."""
    parsed = parse_role(role)
    if parsed in ADMIN_ROLES:
        return "admin"
    if parsed is Role.TRAINER:
        return "trainer"
    return "handler"


def quick_actions(role: Any) -> list[dict[str, str]]:
    return [dict(action) for action in QUICK_ACTIONS[dashboard_scope(role)]]


def _trained_by(user: User):
    # Relationships that make ``user`` a dog's trainer
    return and_(
        DogUserRelationship.user_id == user.id,
        DogUserRelationship.relationship_type == DogRelationshipType.TRAINER,
        DogUserRelationship.status != RelationshipStatus.DECLINED,
    )


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


async def get_dashboard_stats(
    db: AsyncSession, user: User, now: Optional[datetime] = None
) -> dict[str, Any]:
    scope = dashboard_scope(user.role)

    if scope == "admin":
        total_users = await db.scalar(select(func.count(User.id)))
        total_dogs = await db.scalar(select(func.count(Dog.id)))
        pending = await db.scalar(
            select(func.count(User.id)).where(User.profile_complete < 100)
        )
        expiring = await find_expiring_agreements(db, EXPIRING_MONTH_DAYS, now=now)
        return {
            "scope": scope,
            "total_users": total_users or 0,
            "total_dogs": total_dogs or 0,
            "pending_reviews": pending or 0,
            "agreements_expiring_soon": len(expiring),
        }

    if scope == "trainer":
        clients = await db.scalar(
            select(func.count(DogUserRelationship.id)).where(_trained_by(user))
        )
        in_training = await db.scalar(
            select(func.count(distinct(Dog.id)))
            .join(DogUserRelationship, DogUserRelationship.dog_id == Dog.id)
            .where(_trained_by(user), Dog.status == DogStatus.IN_TRAINING)
        )
        return {
            "scope": scope,
            "active_clients": clients or 0,
            "dogs_in_training": in_training or 0,
        }

    dogs = await db.scalar(select(func.count(Dog.id)).where(Dog.owner_id == user.id))
    team = await db.scalar(
        select(func.count(distinct(DogUserRelationship.user_id)))
        .join(Dog, DogUserRelationship.dog_id == Dog.id)
        .where(
            Dog.owner_id == user.id,
            DogUserRelationship.status != RelationshipStatus.DECLINED,
        )
    )
    return {
        "scope": scope,
        "active_dogs": dogs or 0,
        "profile_complete": user.profile_complete or 0,
        "team_members": team or 0,
    }


# ---------------------------------------------------------------------------
# Recent activity
# ---------------------------------------------------------------------------


def _dog_registration(dog: Dog, title: str) -> dict[str, Any]:
    return {
        "id": f"dog-{dog.id}",
        "type": "registration",
        "title": title,
        "description": f"Service dog registration #{dog.registration_num}",
        "status": "approved" if dog.status == DogStatus.ACTIVE else "pending",
    }


async def _admin_activity(db: AsyncSession, now: datetime) -> list[dict[str, Any]]:
    users = await db.execute(select(User).order_by(User.created_at.desc()).limit(3))
    dogs = await db.execute(select(Dog).order_by(Dog.created_at.desc()).limit(2))
    agreements = await db.execute(
        select(Agreement)
        .options(selectinload(Agreement.user))
        .where(Agreement.is_active.is_(True), Agreement.expires_at >= now)
        .order_by(Agreement.expires_at.asc())
        .limit(2)
    )

    items = [
        {
            "id": f"user-{user.id}",
            "type": "registration",
            "title": f"{user.full_name} joined",
            "description": f"New {user.role.value.lower()} registration",
            "time": user.created_at,
            "status": "approved",
        }
        for user in users.scalars()
    ]
    items += [
        {**_dog_registration(dog, f"{dog.name} registered"), "time": dog.created_at}
        for dog in dogs.scalars()
    ]
    items += [
        {
            "id": f"agreement-{agreement.id}",
            "type": "agreement",
            "title": "Agreement expiring soon",
            "description": (
                f"{agreement.user.full_name} - {AGREEMENT_TITLES[agreement.type]}"
            ),
            "time": agreement.expires_at,
            "status": "pending",
        }
        for agreement in agreements.scalars()
    ]
    return items


async def _trainer_activity(db: AsyncSession, user: User) -> list[dict[str, Any]]:
    dogs = await db.execute(
        select(Dog)
        .join(DogUserRelationship, DogUserRelationship.dog_id == Dog.id)
        .where(_trained_by(user))
        .options(selectinload(Dog.owner))
        .order_by(Dog.updated_at.desc())
        .limit(3)
    )
    return [
        {
            "id": f"dog-{dog.id}",
            "type": "training",
            "title": f"{dog.name} progress updated",
            "description": f"Training with {dog.owner.full_name}",
            "time": dog.updated_at,
            "status": "complete" if dog.status == DogStatus.ACTIVE else "pending",
        }
        for dog in dogs.scalars().unique()
    ]


async def _handler_activity(
    db: AsyncSession, user: User, now: datetime
) -> list[dict[str, Any]]:
    dogs = await db.execute(
        select(Dog)
        .where(Dog.owner_id == user.id)
        .order_by(Dog.updated_at.desc())
        .limit(3)
    )
    agreements = await db.execute(
        select(Agreement)
        .where(Agreement.user_id == user.id)
        .order_by(Agreement.created_at.desc())
        .limit(2)
    )
    renewal_cutoff = now + timedelta(days=EXPIRING_MONTH_DAYS)

    items = [
        {
            **_dog_registration(dog, f"{dog.name}'s status updated"),
            "time": dog.updated_at,
        }
        for dog in dogs.scalars()
    ]
    for agreement in agreements.scalars():
        renewal_due = (
            agreement.expires_at is not None
            and ensure_utc(agreement.expires_at) < renewal_cutoff
        )
        items.append(
            {
                "id": f"agreement-{agreement.id}",
                "type": "agreement",
                "title": (
                    "Agreement renewal required" if renewal_due else "Agreement accepted"
                ),
                "description": AGREEMENT_TITLES[agreement.type],
                "time": agreement.created_at,
                "status": "approved" if agreement.is_active else "pending",
            }
        )
    return items


async def get_recent_activity(
    db: AsyncSession, user: User, now: Optional[datetime] = None
) -> list[dict[str, Any]]:
    """Up to five recent events for ``user``'s dashboard, newest first."""
    now = ensure_utc(now or utc_now())
    scope = dashboard_scope(user.role)

    if scope == "admin":
        items = await _admin_activity(db, now)
    elif scope == "trainer":
        items = await _trainer_activity(db, user)
    else:
        items = await _handler_activity(db, user, now)

    for item in items:
        item["time"] = ensure_utc(item["time"])
    items.sort(key=lambda item: item["time"], reverse=True)
    return items[:ACTIVITY_LIMIT]
