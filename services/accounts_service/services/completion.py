"""
Profile completion checklist and percentage.

Pure functions over any object exposing the profile attributes (ORM ``User``,
pydantic schema, test double). Missing or empty values count as not done;
nothing here raises for an incomplete profile.
"""

from dataclasses import dataclass
from typing import Any

from libs.auth.roles import is_admin
from services.accounts_service.models.enums import AgreementType

PROFILE_FIELDS: tuple[tuple[str, str], ...] = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("phone", "Phone number"),
    ("profile_image", "Profile photo"),
    ("address", "Address"),
    ("bio", "Bio"),
    ("email_verified", "Email verification"),
)

AGREEMENT_ITEM = ("training_standards_agreement", "SDS Training & Behavior Standards")


@dataclass(frozen=True)
class ChecklistItem:
    key: str
    label: str
    completed: bool


def has_active_agreement(profile: Any, agreement_type: AgreementType) -> bool:
    agreements = getattr(profile, "agreements", None) or []
    return any(
        getattr(agreement, "type", None) == agreement_type
        and getattr(agreement, "is_active", False)
        for agreement in agreements
    )


def requires_agreement(role: Any) -> bool:
    """Administrators are not asked to accept the training standards."""
    return not is_admin(role)


def completion_checklist(profile: Any) -> list[ChecklistItem]:
    items = [
        ChecklistItem(key, label, bool(getattr(profile, key, None)))
        for key, label in PROFILE_FIELDS
    ]
    if requires_agreement(getattr(profile, "role", None)):
        key, label = AGREEMENT_ITEM
        items.append(
            ChecklistItem(
                key,
                label,
                has_active_agreement(profile, AgreementType.TRAINING_BEHAVIOR_STANDARDS),
            )
        )
    return items


def percentage(completed: int, total: int) -> int:
    """``round(100 * completed / total)`` with halves rounded up, in integers."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def calculate_completion(profile: Any) -> int:
    """Completion percentage (0-100) of ``profile``'s checklist."""
    items = completion_checklist(profile)
    return percentage(sum(1 for item in items if item.completed), len(items))


def next_actions(profile: Any, limit: int = 2) -> list[ChecklistItem]:
    """The first ``limit`` checklist items still to do."""
    return [item for item in completion_checklist(profile) if not item.completed][:limit]


def completion_message(value: int) -> str:
    if value >= 100:
        return "Profile Complete!"
    if value >= 75:
        return "Almost there!"
    if value >= 50:
        return "Good progress"
    return "Let's get started"


def refresh_profile_completion(user: Any) -> int:
    """Recompute and store the cached ``profile_complete`` value on ``user``.

    Always a full recompute; the cached value is never adjusted in place.
    """
    value = calculate_completion(user)
    user.profile_complete = value
    return value
