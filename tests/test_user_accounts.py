"""Registration and profile writes against a real (SQLite) database."""

import re
from datetime import datetime, timezone

import pytest
from services.accounts_service.errors import (
    UserAlreadyRegisteredError,
    UserNotFoundError,
)
from services.accounts_service.models import Organization, Role, User
from services.accounts_service.services import users as user_service
from sqlalchemy import func, select
from tests.factories import AgreementFactory, UserFactory

MEMBER_NUMBER = re.compile(r"^SDS-\d{4}-\d{4}$")


def test_generate_member_number_format():
    number = user_service.generate_member_number(datetime(2025, 5, 1, tzinfo=timezone.utc))
    assert MEMBER_NUMBER.match(number)
    assert number.startswith("SDS-2025-")


@pytest.mark.asyncio
async def test_register_creates_default_organization_once(db_session):
    first = await user_service.register_user(
        db_session,
        auth_id="auth-1",
        email="first@example.com",
        first_name="First",
        last_name="User",
        role=Role.TRAINER,
    )
    second = await user_service.register_user(
        db_session,
        auth_id="auth-2",
        email="second@example.com",
        first_name="Second",
        last_name="User",
        role=Role.HANDLER,
    )

    assert first.organization_id == second.organization_id
    assert await db_session.scalar(select(func.count(Organization.id))) == 1

    organization = await db_session.get(Organization, first.organization_id)
    assert organization.subdomain == "sds"
    assert organization.name == "Service Dog Standards"

    assert MEMBER_NUMBER.match(first.member_number)
    # first and last name only: 2 of 8
    assert first.profile_complete == 25


@pytest.mark.asyncio
async def test_register_rejects_existing_email(db_session):
    existing = UserFactory.create(email="taken@example.com")
    db_session.add(existing)
    await db_session.commit()

    with pytest.raises(UserAlreadyRegisteredError):
        await user_service.register_user(
            db_session,
            auth_id="someone-else",
            email="taken@example.com",
            first_name="A",
            last_name="B",
            role=Role.AIDE,
        )


@pytest.mark.asyncio
async def test_register_race_on_unique_constraint_is_already_registered(
    db_session, monkeypatch
):
    winner = UserFactory.create(auth_id="auth-race", email="race@example.com")
    db_session.add(winner)
    await db_session.commit()

    real_is_registered = user_service._is_registered
    calls = []

    async def check_before_winner_commits(db, auth_id, email):
        calls.append(auth_id)
        # The first look happens before the competing insert is visible
        if len(calls) == 1:
            return False
        return await real_is_registered(db, auth_id, email)

    monkeypatch.setattr(user_service, "_is_registered", check_before_winner_commits)

    with pytest.raises(UserAlreadyRegisteredError):
        await user_service.register_user(
            db_session,
            auth_id="auth-race",
            email="race@example.com",
            first_name="Late",
            last_name="Twin",
            role=Role.HANDLER,
        )

    assert calls == ["auth-race", "auth-race"]
    count = await db_session.scalar(
        select(func.count(User.id)).where(User.auth_id == "auth-race")
    )
    assert count == 1

@pytest.mark.asyncio
async def test_update_profile_recomputes_completion(db_session):
    user = UserFactory.create(profile_complete=0)
    db_session.add(user)
    await db_session.commit()

    user = await user_service.require_user_by_auth_id(db_session, user.auth_id)
    user = await user_service.update_profile(
        db_session, user, {"phone": "555-0100", "bio": "Hello"}
    )

    # first, last, phone, bio: 4 of 8
    assert user.profile_complete == 50
    stored = await db_session.scalar(select(User.profile_complete).where(User.id == user.id))
    assert stored == 50


@pytest.mark.asyncio
async def test_record_login_stamps_time_and_recomputes(db_session):
    user = UserFactory.create_complete_profile(profile_complete=3)
    db_session.add(user)
    db_session.add(AgreementFactory.create(user_id=user.id))
    await db_session.commit()

    logged_in_at = datetime(2025, 7, 1, 8, 0, tzinfo=timezone.utc)
    user = await user_service.record_login(db_session, user.auth_id, now=logged_in_at)

    assert user.last_login_at == logged_in_at
    assert user.profile_complete == 100


@pytest.mark.asyncio
async def test_mark_email_verified(db_session):
    user = UserFactory.create()
    db_session.add(user)
    await db_session.commit()

    verified_at = datetime(2025, 7, 2, tzinfo=timezone.utc)
    user = await user_service.mark_email_verified(db_session, user.auth_id, now=verified_at)

    assert user.email_verified == verified_at
    # first, last, email verification: 3 of 8
    assert user.profile_complete == 38


@pytest.mark.asyncio
async def test_unknown_auth_id(db_session):
    with pytest.raises(UserNotFoundError):
        await user_service.record_login(db_session, "nobody")
