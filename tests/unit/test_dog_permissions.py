"""Unit tests for dog team permissions and dashboard role views."""

import re
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from services.accounts_service.models import RelationshipStatus, Role
from services.accounts_service.services.dashboard import (
    QUICK_ACTIONS,
    dashboard_scope,
    quick_actions,
)
from services.accounts_service.services.dogs import (
    can_manage_dog,
    can_view_dog,
    generate_registration_number,
)

pytestmark = pytest.mark.unit

OWNER = uuid.uuid4()
MEMBER = uuid.uuid4()


def _rel(user_id=MEMBER, status=RelationshipStatus.ACCEPTED, **flags):
    return SimpleNamespace(
        user_id=user_id,
        status=status,
        can_view_profile=flags.get("view", False),
        can_edit_profile=flags.get("edit", False),
        can_manage_dogs=flags.get("manage", False),
    )


def _dog(*relationships):
    return SimpleNamespace(owner_id=OWNER, relationships=list(relationships))


def test_registration_number_format():
    number = generate_registration_number(datetime(2025, 1, 2, tzinfo=timezone.utc))
    assert re.match(r"^DOG-2025-\d{5}$", number)


class TestDogPermissions:
    def test_owner_can_do_everything(self):
        dog = _dog()
        assert can_view_dog(dog, OWNER)
        assert can_manage_dog(dog, OWNER)

    def test_stranger_can_do_nothing(self):
        dog = _dog(_rel(view=True, manage=True))
        assert not can_view_dog(dog, uuid.uuid4())
        assert not can_manage_dog(dog, uuid.uuid4())

    def test_view_flag_does_not_grant_management(self):
        dog = _dog(_rel(view=True))
        assert can_view_dog(dog, MEMBER)
        assert not can_manage_dog(dog, MEMBER)

    def test_manage_flag_alone_does_not_grant_viewing(self):
        dog = _dog(_rel(manage=True))
        assert can_manage_dog(dog, MEMBER)
        assert not can_view_dog(dog, MEMBER)

    def test_pending_invitation_counts(self):
        dog = _dog(_rel(status=RelationshipStatus.PENDING, view=True))
        assert can_view_dog(dog, MEMBER)

    def test_declined_relationship_grants_nothing(self):
        dog = _dog(_rel(status=RelationshipStatus.DECLINED, view=True, manage=True))
        assert not can_view_dog(dog, MEMBER)
        assert not can_manage_dog(dog, MEMBER)

    def test_any_relationship_with_the_flag_is_enough(self):
        dog = _dog(_rel(view=False), _rel(view=True))
        assert can_view_dog(dog, MEMBER)


class TestDashboardScope:
    @pytest.mark.parametrize(
        "role, scope",
        [
            (Role.SUPER_ADMIN, "admin"),
            ("ADMIN", "admin"),
            (Role.TRAINER, "trainer"),
            (Role.HANDLER, "handler"),
            (Role.AIDE, "handler"),
            (None, "handler"),
        ],
    )
    def test_scope_for_role(self, role, scope):
        assert dashboard_scope(role) == scope

    def test_quick_actions_follow_the_scope(self):
        hrefs = [action["href"] for action in quick_actions(Role.HANDLER)]
        assert "/dashboard/dogs/register" in hrefs
        assert quick_actions(Role.ADMIN) == QUICK_ACTIONS["admin"]

    def test_quick_actions_are_copies(self):
        actions = quick_actions(Role.TRAINER)
        actions[0]["title"] = "changed"
        assert QUICK_ACTIONS["trainer"][0]["title"] != "changed"
