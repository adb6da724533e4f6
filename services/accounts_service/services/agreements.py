"""
Agreement lifecycle: acceptance, expiry, and the status shown on dashboards.

Status and progress helpers are pure and take ``now`` explicitly.
``accept_agreement`` is the only writer; it runs as one transaction and
retries when a concurrent acceptance for the same user wins the race.
"""

import asyncio
import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from dateutil.relativedelta import relativedelta
from libs.common.config import get_settings
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from services.accounts_service.errors import AgreementConflictError, UserNotFoundError
from services.accounts_service.models import Agreement, AgreementType, User
from services.accounts_service.services.completion import refresh_profile_completion
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

# Only the training standards expire; other agreements stay valid until replaced.
AGREEMENT_TERMS: dict[AgreementType, relativedelta] = {
    AgreementType.TRAINING_BEHAVIOR_STANDARDS: relativedelta(years=4),
}

EXPIRING_SOON_DAYS = 7
EXPIRING_MONTH_DAYS = 30
EXPIRING_HALF_YEAR_DAYS = 180


class AgreementStatus(str, enum.Enum):
    MISSING = "missing"
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    EXPIRING_MONTH = "expiring_month"
    EXPIRING_HALF_YEAR = "expiring_half_year"
    ACTIVE = "active"


@dataclass(frozen=True)
class StatusBanner:
    title: str
    description: str
    action: str
    urgent: bool


AGREEMENT_TITLES: dict[AgreementType, str] = {
    AgreementType.TRAINING_BEHAVIOR_STANDARDS: "SDS Training & Behavior Standards",
    AgreementType.TERMS_OF_SERVICE: "SDS Terms of Service",
    AgreementType.PRIVACY_POLICY: "SDS Privacy Policy",
    AgreementType.TRAINER_AGREEMENT: "SDS Trainer Agreement",
}

# Descriptions are templates; "{agreement}" is the agreement's title
STATUS_BANNERS: dict[AgreementStatus, StatusBanner] = {
    AgreementStatus.MISSING: StatusBanner(
        "Agreement Required",
        "You must accept the {agreement} to continue.",
        "Accept Agreement",
        True,
    ),
    AgreementStatus.EXPIRED: StatusBanner(
        "Agreement Expired",
        "Your acceptance of the {agreement} expired. Please renew to maintain access.",
        "Renew Agreement",
        True,
    ),
    AgreementStatus.EXPIRING_SOON: StatusBanner(
        "Expires This Week",
        "Your acceptance of the {agreement} expires in less than 7 days. Renew now.",
        "Renew Agreement",
        True,
    ),
    AgreementStatus.EXPIRING_MONTH: StatusBanner(
        "Expires This Month",
        "Your acceptance of the {agreement} expires in less than 30 days.",
        "Renew Agreement",
        False,
    ),
    AgreementStatus.EXPIRING_HALF_YEAR: StatusBanner(
        "Expires in 6 Months",
        "Consider renewing the {agreement} soon.",
        "Renew Agreement",
        False,
    ),
    AgreementStatus.ACTIVE: StatusBanner(
        "Agreement Active",
        "Your acceptance of the {agreement} is current.",
        "View Agreement",
        False,
    ),
}


@dataclass(frozen=True)
class AgreementStatusReport:
    status: AgreementStatus
    banner: StatusBanner
    agreement: Optional[Any] = None
    days_until_expiry: Optional[int] = None
    elapsed_fraction: float = 0.0


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def status_banner(
    status: AgreementStatus, agreement_type: AgreementType
) -> StatusBanner:
    """Banner copy for ``status`` naming the agreement it is about."""
    template = STATUS_BANNERS[status]
    title = AGREEMENT_TITLES[AgreementType(agreement_type)]
    return StatusBanner(
        template.title,
        template.description.format(agreement=title),
        template.action,
        template.urgent,
    )


def agreement_expiry(
    agreement_type: AgreementType, accepted_at: datetime
) -> Optional[datetime]:
    """Expiry for an acceptance at ``accepted_at``, or ``None`` if it never expires."""
    term = AGREEMENT_TERMS.get(AgreementType(agreement_type))
    if term is None:
        return None
    return accepted_at + term


def days_until(moment: datetime, now: datetime) -> int:
    """Whole days from ``now`` to ``moment``, truncated toward zero."""
    return int((ensure_utc(moment) - ensure_utc(now)) / timedelta(days=1))


def select_active_agreement(
    agreements: Optional[Iterable[Any]], agreement_type: AgreementType
) -> Optional[Any]:
    """The active record of ``agreement_type``.

    Two active records of one type break the uniqueness invariant. The read
    still succeeds with the most recently accepted one and the anomaly is
    logged.
    """
    active = [
        agreement
        for agreement in agreements or []
        if agreement.type == agreement_type and agreement.is_active
    ]
    if not active:
        return None
    if len(active) > 1:
        logger.warning(
            "Multiple active agreements found for one type",
            extra={
                "extra_fields": {
                    "anomaly": "duplicate_active_agreement",
                    "user_id": str(active[0].user_id),
                    "agreement_type": AgreementType(agreement_type).value,
                    "agreement_ids": [str(a.id) for a in active],
                }
            },
        )
    return max(
        active,
        key=lambda a: (ensure_utc(a.accepted_at), str(a.id)),
    )


def get_agreement_status(
    agreement: Optional[Any], now: Optional[datetime] = None
) -> AgreementStatus:
    """Dashboard status of the active agreement (``None`` when there is none)."""
    now = now or utc_now()

    if agreement is None or not agreement.is_active:
        return AgreementStatus.MISSING
    # A record without expiry reads as missing, whatever its type
    if agreement.expires_at is None:
        return AgreementStatus.MISSING

    expires_at = ensure_utc(agreement.expires_at)
    if expires_at < ensure_utc(now):
        return AgreementStatus.EXPIRED

    remaining = days_until(expires_at, now)
    if remaining <= EXPIRING_SOON_DAYS:
        return AgreementStatus.EXPIRING_SOON
    if remaining <= EXPIRING_MONTH_DAYS:
        return AgreementStatus.EXPIRING_MONTH
    if remaining <= EXPIRING_HALF_YEAR_DAYS:
        return AgreementStatus.EXPIRING_HALF_YEAR
    return AgreementStatus.ACTIVE


def elapsed_fraction(agreement: Optional[Any], now: Optional[datetime] = None) -> float:
    """Share of the agreement term already used, clamped to [0, 1]."""
    if agreement is None or agreement.expires_at is None:
        return 0.0
    now = ensure_utc(now or utc_now())
    accepted_at = ensure_utc(agreement.accepted_at)
    expires_at = ensure_utc(agreement.expires_at)

    total = (expires_at - accepted_at).total_seconds()
    if total <= 0:
        return 1.0
    fraction = (now - accepted_at).total_seconds() / total
    return min(max(fraction, 0.0), 1.0)


def agreement_status_report(
    agreement: Optional[Any],
    now: Optional[datetime] = None,
    agreement_type: AgreementType = AgreementType.TRAINING_BEHAVIOR_STANDARDS,
) -> AgreementStatusReport:
    now = now or utc_now()
    if agreement is not None:
        agreement_type = agreement.type
    status = get_agreement_status(agreement, now)
    has_expiry = agreement is not None and agreement.expires_at is not None
    return AgreementStatusReport(
        status=status,
        banner=status_banner(status, agreement_type),
        agreement=agreement,
        days_until_expiry=days_until(agreement.expires_at, now) if has_expiry else None,
        elapsed_fraction=elapsed_fraction(agreement, now),
    )


# ---------------------------------------------------------------------------
# Acceptance
# ---------------------------------------------------------------------------


async def _accept_once(
    db: AsyncSession,
    user_id: uuid.UUID,
    agreement_type: AgreementType,
    version: str,
    content: dict[str, Any],
    now: datetime,
) -> Agreement:
    # Row lock on the owner serializes acceptances for the same user
    # (FOR UPDATE; SQLite ignores it and relies on its write lock).
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.agreements))
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFoundError(user_id)

    previous = [
        agreement
        for agreement in user.agreements
        if agreement.type == agreement_type and agreement.is_active
    ]
    for old in previous:
        old.is_active = False
        old.superseded_at = now
    # Deactivation must reach the database before the new active row
    await db.flush()

    agreement = Agreement(
        type=agreement_type,
        version=version,
        content=dict(content or {}),
        accepted_at=now,
        expires_at=agreement_expiry(agreement_type, now),
        is_active=True,
    )
    user.agreements.append(agreement)
    db.add(agreement)
    await db.flush()

    for old in previous:
        old.superseded_by_id = agreement.id

    refresh_profile_completion(user)
    await db.commit()
    return agreement


async def accept_agreement(
    db: AsyncSession,
    user_id: uuid.UUID,
    agreement_type: AgreementType,
    version: str,
    content: Optional[dict[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Agreement:
    """Record ``user_id``'s acceptance of ``agreement_type`` at ``version``.

    Any previously active record of the same type is deactivated in the same
    transaction. Write conflicts with a concurrent acceptance are retried with
    exponential backoff; ``AgreementConflictError`` is raised once the
    configured attempts are used up.
    """
    settings = get_settings()
    agreement_type = AgreementType(agreement_type)
    max_attempts = max(1, settings.AGREEMENT_ACCEPT_MAX_ATTEMPTS)

    attempt = 0
    while True:
        attempt += 1
        accepted_at = now or utc_now()
        try:
            agreement = await _accept_once(
                db, user_id, agreement_type, version, content or {}, accepted_at
            )
        except (IntegrityError, OperationalError) as exc:
            await db.rollback()
            if attempt >= max_attempts:
                logger.error(
                    f"Agreement acceptance failed after {attempt} attempts: {exc}",
                    extra={
                        "extra_fields": {
                            "user_id": str(user_id),
                            "agreement_type": agreement_type.value,
                        }
                    },
                )
                raise AgreementConflictError(agreement_type.value, attempt) from exc

            delay = settings.AGREEMENT_ACCEPT_BACKOFF_SECONDS * 2 ** (attempt - 1)
            logger.warning(
                f"Agreement acceptance conflicted (attempt {attempt}), retrying in {delay:.2f}s",
                extra={
                    "extra_fields": {
                        "user_id": str(user_id),
                        "agreement_type": agreement_type.value,
                    }
                },
            )
            await asyncio.sleep(delay)
            continue

        logger.info(
            f"Agreement accepted: user={user_id}, type={agreement_type.value}, version={version}",
            extra={
                "extra_fields": {
                    "user_id": str(user_id),
                    "agreement_type": agreement_type.value,
                    "agreement_version": version,
                }
            },
        )
        return agreement


async def find_expiring_agreements(
    db: AsyncSession, within_days: int, now: Optional[datetime] = None
) -> list[Agreement]:
    """Active agreements expiring between ``now`` and ``now + within_days``."""
    now = now or utc_now()
    result = await db.execute(
        select(Agreement)
        .options(selectinload(Agreement.user))
        .where(
            Agreement.is_active.is_(True),
            Agreement.expires_at.is_not(None),
            Agreement.expires_at >= now,
            Agreement.expires_at <= now + timedelta(days=within_days),
        )
        .order_by(Agreement.expires_at.asc())
    )
    return list(result.scalars().all())
